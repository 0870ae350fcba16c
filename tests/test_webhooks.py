from __future__ import annotations

from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import override_settings
from rest_framework.test import APIClient

from payment_billing.core.application.services.payment_status_service import PaymentStatusService
from plugins.django_interface.models import Beneficiary, Contract, WebhookEvent
from tests.helpers.builders import ApiTestCase, make_beneficiary, make_plan, make_unit
from tests.helpers.fakes import BILL_ID, SUBSCRIPTION_ID

VINDI_URL = "/api/webhooks/vindi"
AUTENTIQUE_URL = "/api/webhooks/autentique"


def vindi_event(event_type: str, event_id: str = "evt-100", **data) -> dict:
    data = data or {"bill": {"id": BILL_ID, "amount": "49.90", "subscription": {"id": SUBSCRIPTION_ID}}}
    return {"event": {"id": event_id, "type": event_type, "data": data}}


class VindiWebhookTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.ben = make_beneficiary(
            make_plan(),
            make_unit(),
            vindi_subscription_id=SUBSCRIPTION_ID,
            status="pending_payment",
            payment_status="payment_requested",
        )
        self.client = APIClient()

    def _post(self, body: dict, **meta):
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post(VINDI_URL, body, format="json", **meta)

    def test_same_event_is_applied_once(self) -> None:
        first = self._post(vindi_event("bill_paid"))
        second = self._post(vindi_event("bill_paid"))

        self.assertEqual(first.json()["data"]["status"], "processed")
        self.assertEqual(first.json()["data"]["outcome"], "payment_confirmed")
        self.assertEqual(second.json()["data"]["status"], "duplicate")
        self.assertEqual(WebhookEvent.objects.filter(event_id="evt-100").count(), 1)
        self.assertEqual(len(self.rms.adhesions), 1)

    def test_header_event_id_takes_precedence(self) -> None:
        self._post(vindi_event("bill_paid"), HTTP_X_EVENT_ID="hdr-1")

        self.assertTrue(WebhookEvent.objects.get(event_id="hdr-1").processed)
        self.assertFalse(WebhookEvent.objects.filter(event_id="evt-100").exists())

    def test_event_without_id_uses_body_hash(self) -> None:
        body = vindi_event("bill_paid")
        del body["event"]["id"]

        self._post(body)
        resp = self._post(body)

        self.assertEqual(resp.json()["data"]["status"], "duplicate")
        self.assertTrue(WebhookEvent.objects.get().event_id.startswith("sha256:"))

    def test_unknown_type_is_recorded_without_effect(self) -> None:
        resp = self._post(vindi_event("customer_created", event_id="evt-200", customer={"id": 1}))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["outcome"], "ignored")
        self.assertTrue(WebhookEvent.objects.get(event_id="evt-200").processed)
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "payment_requested")

    def test_failure_returns_500_and_is_reprocessed(self) -> None:
        with mock.patch.object(PaymentStatusService, "confirm_payment", side_effect=RuntimeError("banco fora")):
            resp = self._post(vindi_event("bill_paid"))

        self.assertEqual(resp.status_code, 500)
        self.assertFalse(resp.json()["success"])
        row = WebhookEvent.objects.get(event_id="evt-100")
        self.assertFalse(row.processed)
        self.assertIn("banco fora", row.error_message)

        out = StringIO()
        with self.captureOnCommitCallbacks(execute=True):
            call_command("reprocess_webhook_events", "--event-type", "bill_paid", stdout=out)

        self.assertIn("evt-100: success", out.getvalue())
        row.refresh_from_db()
        self.assertTrue(row.processed)
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "paid")
        self.assertEqual(len(self.rms.adhesions), 1)

    def test_rejected_charge_does_not_undo_paid(self) -> None:
        Beneficiary.objects.filter(id=self.ben.id).update(payment_status="paid")

        self._post(vindi_event("charge_rejected", event_id="evt-300"))

        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "paid")

    def test_rejected_charge_marks_failed(self) -> None:
        self._post(vindi_event("charge_rejected", event_id="evt-301"))

        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "failed")
        self.assertEqual(self.rms.adhesions, [])

    def test_subscription_canceled(self) -> None:
        self._post(vindi_event("subscription_canceled", event_id="evt-400", subscription={"id": SUBSCRIPTION_ID}))

        self.ben.refresh_from_db()
        self.assertEqual(self.ben.payment_status, "canceled")

    @override_settings(VINDI_WEBHOOK_SECRET="segredo")
    def test_shared_secret(self) -> None:
        denied = self._post(vindi_event("bill_paid"))
        allowed = self._post(vindi_event("bill_paid"), HTTP_X_WEBHOOK_SECRET="segredo")

        self.assertEqual(denied.status_code, 401)
        self.assertEqual(allowed.status_code, 200)


class AutentiqueWebhookTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.ben = make_beneficiary(make_plan(), make_unit(), contract_status="pending_signature")
        self.contract = Contract.objects.create(
            beneficiary=self.ben, document_id="doc-9", status="pending_signature"
        )
        self.client = APIClient()

    def _post(self, body: dict):
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post(AUTENTIQUE_URL, body, format="json")

    def test_finished_document_signs_and_sends_payment_link(self) -> None:
        resp = self._post({"event": {"type": "document.finished", "data": {"id": "doc-9"}}})

        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["data"]["contract_status"], "signed")
        self.contract.refresh_from_db()
        self.ben.refresh_from_db()
        self.assertEqual(self.contract.status, "signed")
        self.assertIsNotNone(self.contract.signed_at)
        self.assertEqual(self.ben.contract_status, "signed")
        self.assertEqual(len(self.email.sent), 1)
        self.assertEqual(self.email.sent[0][0], ["maria@medpass.com.br"])

    def test_rejected_signature_refuses_contract(self) -> None:
        resp = self._post({"event": {"type": "signature.rejected", "data": {"document": {"id": "doc-9"}}}})

        self.assertEqual(resp.json()["data"]["contract_status"], "refused")
        self.contract.refresh_from_db()
        self.assertEqual(self.contract.status, "refused")
        self.assertEqual(self.email.sent, [])

    def test_viewed_event_only_logs(self) -> None:
        resp = self._post({"event": {"type": "signature.viewed", "data": {"document": "doc-9"}}})

        self.assertEqual(resp.json()["data"]["contract_status"], "pending_signature")

    def test_missing_document_is_bad_request(self) -> None:
        resp = self._post({"event": {"type": "document.finished", "data": {}}})

        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])

    def test_unknown_document_is_not_found(self) -> None:
        resp = self._post({"event": {"type": "document.finished", "data": {"id": "doc-x"}}})

        self.assertEqual(resp.status_code, 404)
