from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class ContractEntity(EntityMixin):
    id: uuid.UUID
    beneficiary_id: uuid.UUID
    document_id: str
    status: str = "pending_signature"
    signature_link: str | None = None
    signed_at: datetime | None = None
    provider_payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
