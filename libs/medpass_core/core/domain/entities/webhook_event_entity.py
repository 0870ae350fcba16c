from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class WebhookEventEntity(EntityMixin):
    id: uuid.UUID
    event_id: str
    event_type: str
    source: str = "vindi"
    event_data: dict[str, Any] = field(default_factory=dict)
    processed: bool = False
    processed_at: datetime | None = None
    error_message: str | None = None
    created_at: datetime | None = None
