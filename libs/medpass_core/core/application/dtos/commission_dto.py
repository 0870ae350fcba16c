from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


class CommissionDTO(BaseModel):
    beneficiary_id: str
    unit_id: str
    reference_month: date
    amount: Decimal = Field(ge=0)
    percent: Decimal = Field(ge=0, le=100)
    commission_type: str = Field(default="adesao", pattern="^(adesao|recorrente)$")


class CommissionUpdateDTO(BaseModel):
    amount: Decimal | None = Field(default=None, ge=0)
    percent: Decimal | None = Field(default=None, ge=0, le=100)
    reference_month: date | None = None
