from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class FranchiseEntity(EntityMixin):
    id: uuid.UUID
    name: str
    description: str | None = None
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
