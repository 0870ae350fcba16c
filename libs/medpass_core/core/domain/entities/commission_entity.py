from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from medpass_core.core.domain.entities._base import EntityMixin

CENTS = Decimal("0.01")


@dataclass(slots=True)
class CommissionEntity(EntityMixin):
    id: uuid.UUID
    beneficiary_id: uuid.UUID
    unit_id: uuid.UUID
    reference_month: date
    amount: Decimal
    percent: Decimal
    commission_type: str = "adesao"
    user_id: uuid.UUID | None = None
    paid: bool = False
    paid_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def compute_amount(base_value: Decimal, percent: Decimal) -> Decimal:
        return (Decimal(base_value) * Decimal(percent) / Decimal(100)).quantize(CENTS, ROUND_HALF_UP)
