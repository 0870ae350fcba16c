from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from medpass_core.core.domain.entities._base import EntityMixin

RMS_PLAN_INDIVIDUAL = 102303
RMS_PLAN_FAMILIAR = 102304


@dataclass(slots=True)
class PlanEntity(EntityMixin):
    id: uuid.UUID
    name: str
    price: Decimal
    cost: Decimal | None = None
    adhesion_commission_percent: Decimal = Decimal("0")
    recurring_commission_percent: Decimal = Decimal("0")
    franchise_id: uuid.UUID | None = None
    description: str | None = None
    active: bool = True
    rms_plan_code: int | None = None
    vindi_plan_id: int | None = None
    vindi_product_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def registry_plan_code(self) -> int:
        """Código do plano no RMS; na falta, deduz pelo nome."""
        if self.rms_plan_code:
            return int(self.rms_plan_code)
        return RMS_PLAN_FAMILIAR if "famil" in self.name.lower() else RMS_PLAN_INDIVIDUAL
