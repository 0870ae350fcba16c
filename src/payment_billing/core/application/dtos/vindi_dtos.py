"""
Modelos de resposta da API Vindi v1.

Apenas os campos que a aplicação lê são declarados; o restante do JSON
é preservado (`extra="allow"`) para ser gravado em `gateway_response`.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VindiModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class VindiCustomer(VindiModel):
    id: int
    name: str | None = None
    email: str | None = None
    registry_code: str | None = None
    status: str | None = None


class VindiPaymentProfile(VindiModel):
    id: int
    status: str | None = None
    card_number_last_four: str | None = None
    payment_company: dict[str, Any] | None = None


class VindiCharge(VindiModel):
    id: int
    status: str
    amount: Decimal | None = None
    print_url: str | None = None
    due_at: str | None = None
    last_transaction: dict[str, Any] | None = None


class VindiBill(VindiModel):
    id: int
    status: str
    amount: Decimal | None = None
    url: str | None = None
    due_at: str | None = None
    charges: list[VindiCharge] = Field(default_factory=list)

    @property
    def first_charge(self) -> VindiCharge | None:
        return self.charges[0] if self.charges else None


class VindiSubscription(VindiModel):
    id: int
    status: str
    url: str | None = None
    next_billing_at: str | None = None


# ───────────────────────── envelopes ─────────────────────────
class CustomerEnvelope(VindiModel):
    customer: VindiCustomer


class CustomerListEnvelope(VindiModel):
    customers: list[VindiCustomer] = Field(default_factory=list)


class PaymentProfileEnvelope(VindiModel):
    payment_profile: VindiPaymentProfile


class SubscriptionEnvelope(VindiModel):
    subscription: VindiSubscription
    bill: VindiBill | None = None


class BillEnvelope(VindiModel):
    bill: VindiBill


class BillListEnvelope(VindiModel):
    bills: list[VindiBill] = Field(default_factory=list)


class ChargeEnvelope(VindiModel):
    charge: VindiCharge
