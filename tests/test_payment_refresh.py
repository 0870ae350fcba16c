from __future__ import annotations

from decimal import Decimal
from io import StringIO

from dependency_injector import providers
from django.core.management import call_command

from payment_billing.core.application.dtos.vindi_dtos import VindiCharge
from plugins.django_interface.models import Transaction
from tests.helpers.builders import (
    ApiTestCase,
    api_client_for,
    make_beneficiary,
    make_plan,
    make_unit,
    make_user,
)
from tests.helpers.fakes import BILL_ID, CHARGE_ID, SUBSCRIPTION_ID, FakeVindiClient

URL = "/api/functions/refresh-payment-statuses"


class RefreshPaymentStatusesTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.ben = make_beneficiary(
            make_plan(),
            make_unit(),
            status="pending_payment",
            payment_status="payment_requested",
            vindi_subscription_id=SUBSCRIPTION_ID,
        )
        self.tx = Transaction.objects.create(
            beneficiary=self.ben,
            payment_method="pix",
            vindi_subscription_id=SUBSCRIPTION_ID,
            vindi_bill_id=BILL_ID,
            vindi_charge_id=CHARGE_ID,
            plan_price=Decimal("49.90"),
        )
        self.hq = api_client_for(make_user("matriz"))

    def _charge_status(self, status: str) -> None:
        self.vindi = FakeVindiClient(charge_status=status)
        self.container.vindi_client.override(providers.Object(self.vindi))

    def test_paid_charge_confirms_and_registers(self) -> None:
        self._charge_status("paid")

        with self.captureOnCommitCallbacks(execute=True):
            resp = self.hq.post(URL, {"limit": 10}, format="json")

        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["data"]["updated"], 1)
        self.tx.refresh_from_db()
        self.ben.refresh_from_db()
        self.assertEqual(self.tx.status, "paid")
        self.assertEqual(self.ben.payment_status, "paid")
        self.assertEqual(self.ben.status, "sent_to_registry")
        self.assertEqual(len(self.rms.adhesions), 1)

    def test_processing_charge_updates_both_sides(self) -> None:
        self._charge_status("processing")

        self.hq.post(URL, {}, format="json")

        self.tx.refresh_from_db()
        self.ben.refresh_from_db()
        self.assertEqual(self.tx.status, "processing")
        self.assertEqual(self.ben.payment_status, "processing")
        self.assertEqual(self.rms.adhesions, [])

    def test_unknown_status_is_left_untouched(self) -> None:
        self._charge_status("fraud_review")

        resp = self.hq.post(URL, {}, format="json")

        self.assertEqual(resp.json()["data"]["updated"], 0)
        self.tx.refresh_from_db()
        self.assertEqual(self.tx.status, "pending")

    def test_paid_transactions_are_not_queried(self) -> None:
        Transaction.objects.filter(id=self.tx.id).update(status="paid")

        resp = self.hq.post(URL, {}, format="json")

        self.assertEqual(resp.json()["data"]["checked"], 0)
        self.assertNotIn("get_charge", self.vindi.calls)

    def test_unit_operator_is_forbidden(self) -> None:
        operator = api_client_for(make_user("unidade", make_unit("Outra")))

        self.assertEqual(operator.post(URL, {}, format="json").status_code, 403)

    def test_management_command(self) -> None:
        self._charge_status("rejected")
        out = StringIO()

        call_command("refresh_payment_statuses", "--limit", "5", stdout=out)

        self.assertIn("atualizadas: 1", out.getvalue())
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "failed")


class _MalformedFirstCharge(FakeVindiClient):
    """Devolve payload sem `status` para a cobrança padrão."""

    def get_charge(self, charge_id: int) -> VindiCharge:
        if charge_id == CHARGE_ID:
            self.calls.append("get_charge")
            return VindiCharge.model_validate({"id": charge_id})
        return super().get_charge(charge_id)


class RefreshIsolationTests(ApiTestCase):
    def test_one_bad_charge_does_not_stop_the_others(self) -> None:
        plan, unit = make_plan(), make_unit()
        broken = make_beneficiary(plan, unit, payment_status="payment_requested")
        healthy = make_beneficiary(
            plan, unit, cpf="52998224725", email="joao@medpass.com.br", payment_status="payment_requested"
        )
        Transaction.objects.create(beneficiary=broken, payment_method="pix", vindi_charge_id=CHARGE_ID)
        Transaction.objects.create(beneficiary=healthy, payment_method="pix", vindi_charge_id=6006)
        self.container.vindi_client.override(providers.Object(_MalformedFirstCharge(charge_status="processing")))

        resp = api_client_for(make_user("matriz")).post(URL, {}, format="json")

        self.assertEqual(resp.status_code, 200, resp.content)
        data = resp.json()["data"]
        self.assertEqual((data["checked"], data["updated"], data["errors"]), (2, 1, 1))
        healthy.refresh_from_db()
        broken.refresh_from_db()
        self.assertEqual(healthy.payment_status, "processing")
        self.assertEqual(broken.payment_status, "payment_requested")
