from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class UnitEntity(EntityMixin):
    id: uuid.UUID
    name: str
    franchise_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    cnpj: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    cep: str | None = None
    phone: str | None = None
    email: str | None = None
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
