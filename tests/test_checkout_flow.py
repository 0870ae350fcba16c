"""
Ponta-a-ponta da adesão: checkout → webhook de pagamento → registro RMS.

Gateway, RMS e assinatura eletrônica são dublês injetados no container;
o restante (handlers, repositórios, eventos, tasks Celery em modo eager)
roda de verdade.
"""
from __future__ import annotations

import uuid

from dependency_injector import providers
from rest_framework.test import APIClient

from plugins.django_interface.models import (
    Beneficiary,
    Commission,
    Contract,
    IntegrationLog,
    Subscription,
    Transaction,
)
from tests.helpers.builders import (
    ApiTestCase,
    api_client_for,
    make_beneficiary,
    make_plan,
    make_unit,
    make_user,
)
from tests.helpers.fakes import (
    BILL_ID,
    CUSTOMER_ID,
    PIX_CODE,
    SUBSCRIPTION_ID,
    FakeVindiClient,
)

CHECKOUT_URL = "/api/functions/process-checkout"
WEBHOOK_URL = "/api/webhooks/vindi"

VALID_CARD = {
    "number": "4111 1111 1111 1111",
    "cvv": "123",
    "holder_name": "Maria Teste",
    "expiry_month": "12",
    "expiry_year": "2030",
}


def bill_paid_event(event_id: str = "evt-1") -> dict:
    return {
        "event": {
            "id": event_id,
            "type": "bill_paid",
            "created_at": "2026-10-17T10:00:00-03:00",
            "data": {
                "bill": {
                    "id": BILL_ID,
                    "amount": "49.90",
                    "subscription": {"id": SUBSCRIPTION_ID},
                }
            },
        }
    }


class CheckoutFlowTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.unit = make_unit()
        self.operator = make_user("unidade", self.unit)
        self.plan = make_plan("Individual", "49.90")
        self.ben = make_beneficiary(self.plan, self.unit, user=self.operator)
        self.client = api_client_for(self.operator)

    def _checkout(self, **extra):
        body = {"beneficiary_id": str(self.ben.id), "plan_id": str(self.plan.id), "payment_method": "pix"}
        body.update(extra)
        return self.client.post(CHECKOUT_URL, body, format="json")

    def test_pix_checkout_to_registry(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            resp = self._checkout()

        self.assertEqual(resp.status_code, 200, resp.content)
        data = resp.json()["data"]
        self.assertTrue(resp.json()["success"])
        self.assertEqual(data["vindi_subscription_id"], SUBSCRIPTION_ID)
        self.assertEqual(data["pix"]["code"], PIX_CODE)

        self.ben.refresh_from_db()
        self.assertEqual(self.ben.status, "pending_payment")
        self.assertEqual(self.ben.payment_status, "payment_requested")
        self.assertEqual(self.ben.vindi_subscription_id, SUBSCRIPTION_ID)
        self.assertEqual(Subscription.objects.filter(beneficiary=self.ben).count(), 1)
        self.assertEqual(Transaction.objects.get(beneficiary=self.ben).vindi_bill_id, BILL_ID)

        # contrato gerado de forma assíncrona após o commit
        self.assertEqual(Contract.objects.filter(beneficiary=self.ben).count(), 1)
        self.assertEqual(self.ben.contract_status, "pending_signature")
        self.assertEqual(len(self.autentique.documents), 1)

        webhook = APIClient()
        with self.captureOnCommitCallbacks(execute=True):
            resp = webhook.post(WEBHOOK_URL, bill_paid_event(), format="json")
        self.assertEqual(resp.status_code, 200, resp.content)

        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "paid")
        self.assertEqual(self.ben.status, "sent_to_registry")
        self.assertEqual(Transaction.objects.get(beneficiary=self.ben).status, "paid")
        self.assertEqual(Commission.objects.filter(beneficiary=self.ben, commission_type="adesao").count(), 1)

        self.assertEqual(len(self.rms.adhesions), 1)
        payload = self.rms.adhesions[0]
        self.assertEqual(payload["codigoExterno"], f"VINDI_{SUBSCRIPTION_ID}")
        self.assertEqual(payload["cpf"], "08600756995")
        self.assertEqual(payload["tipoPlano"], 102303)
        self.assertEqual(IntegrationLog.objects.filter(beneficiary=self.ben, operation="adesao").count(), 1)

        # reentrega do mesmo evento não reaplica nada
        with self.captureOnCommitCallbacks(execute=True):
            resp = webhook.post(WEBHOOK_URL, bill_paid_event(), format="json")
        self.assertEqual(resp.json()["data"]["status"], "duplicate")
        self.assertEqual(len(self.rms.adhesions), 1)
        self.assertEqual(Commission.objects.filter(beneficiary=self.ben).count(), 1)

    def test_unknown_plan_fails_before_gateway(self) -> None:
        resp = self._checkout(plan_id=str(uuid.uuid4()))

        self.assertEqual(resp.status_code, 404)
        self.assertFalse(resp.json()["success"])
        self.assertEqual(resp.json()["error"], "Plano não encontrado")
        self.assertEqual(self.vindi.calls, [])

    def test_inactive_plan_is_not_offered(self) -> None:
        plan = make_plan("Descontinuado", "39.90", active=False)

        resp = self._checkout(plan_id=str(plan.id))

        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"], "Plano não encontrado")
        self.assertEqual(self.vindi.calls, [])

    def test_plan_without_gateway_id_is_configuration_error(self) -> None:
        plan = make_plan("Sem Gateway", "10.00", vindi_plan_id=None)
        resp = self._checkout(plan_id=str(plan.id))
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(self.vindi.calls, [])

    def test_invalid_beneficiary_cpf_is_rejected(self) -> None:
        Beneficiary.objects.filter(id=self.ben.id).update(cpf="11111111111")
        resp = self._checkout()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["field"], "cpf")
        self.assertEqual(self.vindi.calls, [])

    def test_operator_cannot_checkout_other_unit(self) -> None:
        other = make_user("unidade", make_unit("Unidade Norte"))
        resp = api_client_for(other).post(
            CHECKOUT_URL,
            {"beneficiary_id": str(self.ben.id), "plan_id": str(self.plan.id), "payment_method": "pix"},
            format="json",
        )
        self.assertEqual(resp.status_code, 403)

    def test_credit_card_requires_card_data(self) -> None:
        resp = self._checkout(payment_method="credit_card")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("cartão", resp.json()["error"])


class CheckoutSagaTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.unit = make_unit()
        self.operator = make_user("unidade", self.unit)
        self.plan = make_plan()
        self.ben = make_beneficiary(self.plan, self.unit)
        self.client = api_client_for(self.operator)

    def _use_vindi(self, fake: FakeVindiClient) -> None:
        self.vindi = fake
        self.container.vindi_client.override(providers.Object(fake))

    def _checkout(self, payment_method: str = "pix", **extra):
        body = {
            "beneficiary_id": str(self.ben.id),
            "plan_id": str(self.plan.id),
            "payment_method": payment_method,
            **extra,
        }
        return self.client.post(CHECKOUT_URL, body, format="json")

    def test_subscription_failure_deletes_new_customer(self) -> None:
        self._use_vindi(FakeVindiClient(fail_on="create_subscription"))

        resp = self._checkout()

        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["error_key"], "subscription_error")
        self.assertTrue(resp.json()["can_retry"])
        self.assertEqual(self.vindi.deleted_customers, [CUSTOMER_ID])
        self.assertEqual(Subscription.objects.count(), 0)
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "pending")

    def test_existing_customer_is_kept_on_failure(self) -> None:
        self._use_vindi(FakeVindiClient(existing_customer=True, fail_on="create_subscription"))

        self._checkout()

        self.assertEqual(self.vindi.deleted_customers, [])

    def test_rejected_card_compensates_and_maps_error(self) -> None:
        self._use_vindi(FakeVindiClient(charge_status="rejected"))

        resp = self._checkout("credit_card", card=VALID_CARD)

        self.assertEqual(resp.status_code, 402)
        body = resp.json()
        self.assertEqual(body["error_key"], "card_declined")
        self.assertEqual(body["suggested_action"], "use_another_card")
        self.assertEqual(body["gateway_code"], "05")
        self.assertEqual(self.vindi.canceled_subscriptions, [SUBSCRIPTION_ID])
        self.assertEqual(self.vindi.deleted_customers, [CUSTOMER_ID])
        self.assertEqual(Transaction.objects.count(), 0)

    def test_approved_card_confirms_payment_immediately(self) -> None:
        self._use_vindi(FakeVindiClient(charge_status="paid"))

        with self.captureOnCommitCallbacks(execute=True):
            resp = self._checkout("credit_card", card=VALID_CARD)

        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["data"]["card_last_four"], "1111")
        self.assertIn("create_payment_profile", self.vindi.calls)
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "paid")
        self.assertEqual(len(self.rms.adhesions), 1)


class TokenizeCardTests(ApiTestCase):
    def test_tokenize_returns_brand_and_last_four(self) -> None:
        operator = make_user("unidade", make_unit())
        resp = api_client_for(operator).post("/api/functions/tokenize-card", VALID_CARD, format="json")

        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(
            resp.json()["data"],
            {"gateway_token": "tok_1111", "card_brand": "visa", "card_last_four": "1111"},
        )

    def test_invalid_luhn_is_rejected_before_gateway(self) -> None:
        operator = make_user("unidade", make_unit())
        card = {**VALID_CARD, "number": "4111111111111112"}
        resp = api_client_for(operator).post("/api/functions/tokenize-card", card, format="json")

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.vindi.calls, [])
