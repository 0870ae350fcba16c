from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from medpass_core.core.domain.entities._base import EntityMixin


# ───────────────────────────────────────────────
# Status (ciclo de vida) e status de pagamento
# ───────────────────────────────────────────────
class BeneficiaryStatus:
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    PENDING_PAYMENT = "pending_payment"
    PAYMENT_CONFIRMED = "payment_confirmed"
    SENT_TO_REGISTRY = "sent_to_registry"
    REGISTRY_FAILED = "registry_failed"


class PaymentStatus:
    PENDING = "pending"
    PAYMENT_REQUESTED = "payment_requested"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"
    CANCELED = "canceled"


class ContractStatus:
    NOT_SENT = "not_sent"
    PENDING_SIGNATURE = "pending_signature"
    SIGNED = "signed"
    REFUSED = "refused"


@dataclass(slots=True)
class BeneficiaryEntity(EntityMixin):
    id: uuid.UUID
    name: str
    cpf: str
    plan_id: uuid.UUID
    email: str | None = None
    phone: str | None = None
    birth_date: date | None = None
    address: str | None = None
    address_number: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    cep: str | None = None
    unit_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    plan_value: Decimal | None = None
    status: str = BeneficiaryStatus.PENDING
    payment_status: str = PaymentStatus.PENDING
    vindi_customer_id: int | None = None
    vindi_subscription_id: int | None = None
    checkout_link: str | None = None
    contract_status: str = ContractStatus.NOT_SENT
    autentique_document_id: str | None = None
    autentique_signature_link: str | None = None
    contract_signed_at: datetime | None = None
    adhesion_date: date | None = None
    notes: str | None = None
    registry_retry_count: int = 0
    last_registry_error: str | None = None
    last_registry_attempt_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_inactive(self) -> bool:
        return self.status == BeneficiaryStatus.INACTIVE

    def masked_cpf(self) -> str | None:
        if not self.cpf or len(self.cpf) < 3:  # noqa: PLR2004
            return None
        return f"***.***.***-{self.cpf[-2:]}"
