"""
Dublês dos provedores externos (Vindi, RMS, Autentique, Brevo).

Injetados no container com `container.<provider>.override(providers.Object(fake))`
e removidos em `tearDown` via `reset_override()`.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from payment_billing.core.application.dtos.rms_dtos import RmsBeneficiary, RmsBeneficiaryPage
from payment_billing.core.application.dtos.vindi_dtos import (
    SubscriptionEnvelope,
    VindiBill,
    VindiCharge,
    VindiCustomer,
    VindiPaymentProfile,
    VindiSubscription,
)
from payment_billing.core.domain.events.exceptions import GatewayError, RegistryTemporaryError

CUSTOMER_ID = 1001
SUBSCRIPTION_ID = 2002
PROFILE_ID = 3003
BILL_ID = 4004
CHARGE_ID = 5005
PIX_CODE = "00020126580014br.gov.bcb.pix0136medpass-teste520400005303986540549.90"


class FakeVindiClient:
    def __init__(
        self,
        *,
        existing_customer: bool = False,
        charge_status: str = "pending",
        fail_on: str | None = None,
        gateway_message: str = "Erro ao criar assinatura",
    ) -> None:
        self.existing_customer = existing_customer
        self.charge_status = charge_status
        self.fail_on = fail_on
        self.gateway_message = gateway_message
        self.calls: list[str] = []
        self.deleted_customers: list[int] = []
        self.canceled_subscriptions: list[int] = []
        self.subscription_payloads: list[dict[str, Any]] = []

    def _maybe_fail(self, step: str) -> None:
        self.calls.append(step)
        if self.fail_on == step:
            raise GatewayError(self.gateway_message, status_code=422)

    def _bill(self) -> VindiBill:
        return VindiBill(
            id=BILL_ID,
            status="paid" if self.charge_status == "paid" else "pending",
            amount=Decimal("49.90"),
            url=f"https://vindi.test/bills/{BILL_ID}",
            charges=[
                VindiCharge(
                    id=CHARGE_ID,
                    status=self.charge_status,
                    amount=Decimal("49.90"),
                    last_transaction={
                        "pix_qr": PIX_CODE,
                        "gateway_message": "Transação negada",
                        "gateway_response_code": "05",
                    },
                )
            ],
        )

    # ─── clientes ───
    def find_customer_by_registry_code(self, cpf: str) -> VindiCustomer | None:
        self._maybe_fail("find_customer")
        if self.existing_customer:
            return VindiCustomer(id=CUSTOMER_ID, registry_code=cpf)
        return None

    def create_customer(self, payload: dict[str, Any]) -> VindiCustomer:
        self._maybe_fail("create_customer")
        return VindiCustomer(id=CUSTOMER_ID, name=payload["name"], registry_code=payload["registry_code"])

    def delete_customer(self, customer_id: int) -> None:
        self.calls.append("delete_customer")
        self.deleted_customers.append(customer_id)

    # ─── cartão ───
    def tokenize_card(self, card: dict[str, Any]) -> str:
        self._maybe_fail("tokenize_card")
        return "tok_" + card["number"][-4:]

    def create_payment_profile(self, customer_id: int, gateway_token: str) -> VindiPaymentProfile:
        self._maybe_fail("create_payment_profile")
        return VindiPaymentProfile(id=PROFILE_ID, status="active")

    # ─── assinatura / fatura ───
    def create_subscription(self, payload: dict[str, Any]) -> SubscriptionEnvelope:
        self._maybe_fail("create_subscription")
        self.subscription_payloads.append(payload)
        return SubscriptionEnvelope(
            subscription=VindiSubscription(id=SUBSCRIPTION_ID, status="active"),
            bill=self._bill(),
        )

    def cancel_subscription(self, subscription_id: int) -> None:
        self.calls.append("cancel_subscription")
        self.canceled_subscriptions.append(subscription_id)

    def list_subscription_bills(self, subscription_id: int) -> list[VindiBill]:
        return [self._bill()]

    def get_bill(self, bill_id: int) -> VindiBill:
        return self._bill()

    def get_charge(self, charge_id: int) -> VindiCharge:
        self.calls.append("get_charge")
        return VindiCharge(id=charge_id, status=self.charge_status)


class FakeRmsClient:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.adhesions: list[dict[str, Any]] = []
        self.cancellations: list[dict[str, Any]] = []

    def send_adhesion(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.adhesions.append(payload)
        if self.fail:
            raise RegistryTemporaryError("RMS indisponível")
        return {"codigo": 200, "mensagem": "Beneficiário incluído com sucesso"}

    def send_cancellation(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.cancellations.append(payload)
        if self.fail:
            raise RegistryTemporaryError("RMS indisponível")
        return {"codigo": 200, "mensagem": "Beneficiário cancelado com sucesso"}

    def query_beneficiaries(self, start, end, offset=0, cpf=None) -> RmsBeneficiaryPage:
        return RmsBeneficiaryPage(
            offset=offset,
            limit=50,
            count=1,
            beneficiarios=[RmsBeneficiary(beneficiario="Maria Teste", cpf=cpf or "08600756995")],
        )


class FakeAutentiqueClient:
    def __init__(self) -> None:
        self.documents: list[tuple[str, str]] = []

    def create_document(self, name: str, signer_email: str, html: str) -> tuple[str, str | None]:
        self.documents.append((name, signer_email))
        return f"doc-{len(self.documents)}", f"https://assina.test/doc-{len(self.documents)}"


class FakeEmailNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[list[str], str]] = []

    def send(self, to: list[str], subject: str, html: str) -> None:
        self.sent.append((to, subject))
