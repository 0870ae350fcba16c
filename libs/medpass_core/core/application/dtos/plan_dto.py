from decimal import Decimal

from pydantic import BaseModel, Field


class PlanDTO(BaseModel):
    name: str
    price: Decimal = Field(ge=0, decimal_places=2)
    cost: Decimal | None = Field(default=None, ge=0)
    adhesion_commission_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    recurring_commission_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    franchise_id: str | None = None
    description: str | None = None
    active: bool = True
    rms_plan_code: int | None = None
    vindi_plan_id: int | None = None
    vindi_product_id: int | None = None


class PlanUpdateDTO(PlanDTO):
    name: str | None = None  # type: ignore[assignment]
    price: Decimal | None = Field(default=None, ge=0)  # type: ignore[assignment]
    adhesion_commission_percent: Decimal | None = Field(default=None, ge=0, le=100)  # type: ignore[assignment]
    recurring_commission_percent: Decimal | None = Field(default=None, ge=0, le=100)  # type: ignore[assignment]
    active: bool | None = None  # type: ignore[assignment]
