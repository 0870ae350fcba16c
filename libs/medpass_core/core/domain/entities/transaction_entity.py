from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from medpass_core.core.domain.entities._base import EntityMixin


class TransactionStatus:
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"


@dataclass(slots=True)
class TransactionEntity(EntityMixin):
    """Uma tentativa de cobrança no gateway."""
    id: uuid.UUID
    beneficiary_id: uuid.UUID | None
    subscription_id: uuid.UUID | None
    payment_method: str
    status: str = TransactionStatus.PENDING
    transaction_type: str = "subscription_charge"
    vindi_subscription_id: int | None = None
    vindi_bill_id: int | None = None
    vindi_charge_id: int | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_document: str | None = None
    plan_name: str | None = None
    plan_price: Decimal | None = None
    installments: int = 1
    gateway_response: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
