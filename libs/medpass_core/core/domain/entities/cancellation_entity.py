from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True, frozen=True)
class CancellationEntity(EntityMixin):
    """Registro imutável de um cancelamento de beneficiário."""
    id: uuid.UUID
    beneficiary_id: uuid.UUID
    reason: str
    user_id: uuid.UUID | None = None
    notes: str | None = None
    cancelled_at: datetime | None = None
