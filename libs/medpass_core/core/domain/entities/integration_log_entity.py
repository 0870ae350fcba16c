from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class IntegrationLogEntity(EntityMixin):
    id: uuid.UUID
    operation: str
    status: str
    beneficiary_id: uuid.UUID | None = None
    request_data: dict[str, Any] = field(default_factory=dict)
    response_data: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None
    retry_count: int = 0
    created_at: datetime | None = None
