from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class NotificationEntity(EntityMixin):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    message: str
    kind: str = "info"
    read: bool = False
    action_url: str | None = None
    action_label: str | None = None
    created_at: datetime | None = None
