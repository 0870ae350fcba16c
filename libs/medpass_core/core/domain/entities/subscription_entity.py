from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from medpass_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class SubscriptionEntity(EntityMixin):
    """Espelho local de uma assinatura no gateway."""
    id: uuid.UUID
    beneficiary_id: uuid.UUID | None
    plan_id: uuid.UUID | None
    customer_name: str
    customer_email: str
    customer_document: str
    payment_method: str
    status: str = "pending"
    vindi_subscription_id: int | None = None
    vindi_plan_id: int | None = None
    vindi_customer_id: int | None = None
    checkout_link: str | None = None
    next_billing_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
