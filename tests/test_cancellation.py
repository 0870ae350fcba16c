from __future__ import annotations

from dependency_injector import providers
from rest_framework.test import APIClient

from plugins.django_interface.models import Cancellation, IntegrationLog
from tests.helpers.builders import (
    ApiTestCase,
    api_client_for,
    make_beneficiary,
    make_plan,
    make_unit,
    make_user,
)
from tests.helpers.fakes import BILL_ID, SUBSCRIPTION_ID, FakeRmsClient

URL = "/api/functions/cancel-beneficiary"


class CancelBeneficiaryTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.unit = make_unit()
        self.operator = make_user("unidade", self.unit)
        self.ben = make_beneficiary(
            make_plan(),
            self.unit,
            status="sent_to_registry",
            payment_status="paid",
            vindi_subscription_id=SUBSCRIPTION_ID,
        )
        self.client = api_client_for(self.operator)

    def _cancel(self, client=None, **extra):
        body = {"beneficiary_id": str(self.ben.id), "reason": "Mudança de cidade", **extra}
        return (client or self.client).post(URL, body, format="json")

    def test_cancel_creates_single_record_and_inactivates(self) -> None:
        resp = self._cancel(notes="pedido por telefone")

        self.assertEqual(resp.status_code, 200, resp.content)
        data = resp.json()["data"]
        self.assertEqual(data["status"], "inactive")
        self.assertTrue(data["gateway_cancelled"])
        self.assertTrue(data["registry_notified"])

        cancellation = Cancellation.objects.get(beneficiary=self.ben)
        self.assertEqual(cancellation.reason, "Mudança de cidade")
        self.assertEqual(cancellation.user_id, self.operator.id)
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.status, "inactive")
        # pagamento permanece como estava
        self.assertEqual(self.ben.payment_status, "paid")

        self.assertEqual(self.vindi.canceled_subscriptions, [SUBSCRIPTION_ID])
        self.assertEqual(self.rms.cancellations, [{"cpf": "08600756995", "codigoExterno": f"BEN{str(self.ben.id)[:8]}"}])
        self.assertTrue(IntegrationLog.objects.filter(operation="cancelamento", status="success").exists())

    def test_second_cancellation_is_rejected(self) -> None:
        self._cancel()
        resp = self._cancel()

        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["error"], "Beneficiário já está cancelado")
        self.assertEqual(Cancellation.objects.filter(beneficiary=self.ben).count(), 1)

    def test_blank_reason_is_rejected(self) -> None:
        resp = self._cancel(reason="   ")

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(Cancellation.objects.count(), 0)

    def test_registry_failure_does_not_block_cancellation(self) -> None:
        self.container.rms_client.override(providers.Object(FakeRmsClient(fail=True)))

        resp = self._cancel()

        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["data"]["registry_notified"])
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.status, "inactive")
        self.assertTrue(IntegrationLog.objects.filter(operation="cancelamento", status="error").exists())

    def test_without_gateway_subscription_skips_gateway(self) -> None:
        self.ben.vindi_subscription_id = None
        self.ben.save()

        resp = self._cancel()

        self.assertFalse(resp.json()["data"]["gateway_cancelled"])
        self.assertEqual(self.vindi.canceled_subscriptions, [])

    def test_other_unit_cannot_cancel(self) -> None:
        other = api_client_for(make_user("unidade", make_unit("Unidade Sul")))

        resp = self._cancel(client=other)

        self.assertEqual(resp.status_code, 403)
        self.assertFalse(Cancellation.objects.exists())

    def test_headquarters_can_cancel_any_unit(self) -> None:
        resp = self._cancel(client=api_client_for(make_user("matriz")))

        self.assertEqual(resp.status_code, 200)

    def test_inactivates_whatever_the_payment_status(self) -> None:
        for cpf, payment_status in (("52998224725", "pending"), ("11144477735", "failed")):
            with self.subTest(payment_status=payment_status):
                ben = make_beneficiary(
                    make_plan(),
                    self.unit,
                    cpf=cpf,
                    email=f"{payment_status}@medpass.com.br",
                    status="pending_payment",
                    payment_status=payment_status,
                )

                resp = self.client.post(
                    URL, {"beneficiary_id": str(ben.id), "reason": "Desistência"}, format="json"
                )

                self.assertEqual(resp.status_code, 200, resp.content)
                ben.refresh_from_db()
                self.assertEqual(ben.status, "inactive")
                self.assertEqual(ben.payment_status, payment_status)
                self.assertEqual(Cancellation.objects.filter(beneficiary=ben).count(), 1)


class LatePaymentAfterCancellationTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        unit = make_unit()
        self.ben = make_beneficiary(
            make_plan(),
            unit,
            status="pending_payment",
            payment_status="payment_requested",
            vindi_subscription_id=SUBSCRIPTION_ID,
        )
        self.client = api_client_for(make_user("unidade", unit))

    def test_bill_paid_after_cancel_keeps_beneficiary_inactive(self) -> None:
        self.client.post(URL, {"beneficiary_id": str(self.ben.id), "reason": "Desistência"}, format="json")
        body = {
            "event": {
                "id": "evt-late",
                "type": "bill_paid",
                "data": {"bill": {"id": BILL_ID, "amount": "49.90", "subscription": {"id": SUBSCRIPTION_ID}}},
            }
        }

        with self.captureOnCommitCallbacks(execute=True):
            resp = APIClient().post("/api/webhooks/vindi", body, format="json")

        self.assertEqual(resp.status_code, 200, resp.content)
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.status, "inactive")
        self.assertEqual(self.ben.payment_status, "paid")
        self.assertEqual(self.rms.adhesions, [])
        self.assertFalse(IntegrationLog.objects.filter(beneficiary=self.ben, operation="adesao").exists())
