from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal


# ───────────────────────────────────────────────
# Event Base e Domain Events
# ───────────────────────────────────────────────
@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


# ╭──────────────────────────────────────────────╮
# │ 1. Beneficiários                            │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True)
class BeneficiaryCreatedEvent(DomainEvent):
    beneficiary_id: uuid.UUID
    unit_id: uuid.UUID | None
    plan_id: uuid.UUID
    name: str


@dataclass(frozen=True)
class BeneficiaryCancelledEvent(DomainEvent):
    beneficiary_id: uuid.UUID
    cancellation_id: uuid.UUID
    user_id: uuid.UUID | None
    reason: str


# ╭──────────────────────────────────────────────╮
# │ 2. Pagamentos                               │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True)
class PaymentConfirmedEvent(DomainEvent):
    beneficiary_id: uuid.UUID
    vindi_subscription_id: int | None
    vindi_bill_id: int | None
    amount: Decimal | None = None


@dataclass(frozen=True)
class CheckoutCompletedEvent(DomainEvent):
    beneficiary_id: uuid.UUID
    vindi_subscription_id: int
    payment_method: str


@dataclass(frozen=True)
class PaymentFailedEvent(DomainEvent):
    beneficiary_id: uuid.UUID
    vindi_bill_id: int | None
    reason: str


# ╭──────────────────────────────────────────────╮
# │ 3. Registro externo (RMS)                   │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True)
class RegistryAdhesionFailedEvent(DomainEvent):
    beneficiary_id: uuid.UUID
    error: str
    retry_count: int


# ╭──────────────────────────────────────────────╮
# │ 4. Contratos                                │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True)
class ContractSignedEvent(DomainEvent):
    beneficiary_id: uuid.UUID
    contract_id: uuid.UUID
    document_id: str


# ╭──────────────────────────────────────────────╮
# │ 5. Comissões                                │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True)
class CommissionPaidEvent(DomainEvent):
    commission_id: uuid.UUID
    unit_id: uuid.UUID
    amount: Decimal
