from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class UserEntity(EntityMixin):
    id: uuid.UUID
    email: str
    name: str
    role: str
    password_hash: str | None = None
    unit_id: uuid.UUID | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_headquarters(self) -> bool:
        return self.role == "matriz"
