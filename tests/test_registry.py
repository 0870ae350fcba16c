from __future__ import annotations

from io import StringIO

from dependency_injector import providers
from django.core.management import call_command
from django.test import SimpleTestCase

from medpass_core.adapters.repositories.api_setting_repo_impl import ApiSettingRepoImpl
from payment_billing.adapters.api_clients.rms_api_client import RmsAPIClient
from payment_billing.core.application.commands.registry_commands import NotifyRegistryAdhesionCommand
from plugins.django_interface.models import Beneficiary, IntegrationLog, Notification
from tests.helpers.builders import (
    ApiTestCase,
    api_client_for,
    make_beneficiary,
    make_plan,
    make_unit,
    make_user,
)
from tests.helpers.fakes import SUBSCRIPTION_ID, FakeRmsClient


class NotifyRegistryAdhesionTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.unit = make_unit()
        self.hq = make_user("matriz")
        self.ben = make_beneficiary(
            make_plan("Familiar", "89.90", rms_plan_code=None),
            self.unit,
            status="payment_confirmed",
            payment_status="paid",
            vindi_subscription_id=SUBSCRIPTION_ID,
            address_number="100",
            state="pr",
        )
        self.bus = self.container.command_bus()

    def _use_rms(self, fake: FakeRmsClient) -> None:
        self.rms = fake
        self.container.rms_client.override(providers.Object(fake))

    def test_success_marks_sent_and_logs(self) -> None:
        result = self.bus.dispatch(NotifyRegistryAdhesionCommand(beneficiary_id=str(self.ben.id)))

        self.assertEqual(result["status"], "sent")
        self.assertEqual(result["codigo_externo"], f"VINDI_{SUBSCRIPTION_ID}")
        payload = self.rms.adhesions[0]
        self.assertEqual(payload["idBeneficiarioTipo"], 1)
        self.assertEqual(payload["dataNascimento"], "20051990")
        self.assertEqual(payload["numero"], "100")
        self.assertEqual(payload["uf"], "PR")
        # plano sem código explícito: deduzido pelo nome
        self.assertEqual(payload["tipoPlano"], 102304)

        self.ben.refresh_from_db()
        self.assertEqual(self.ben.status, "sent_to_registry")
        self.assertIsNotNone(self.ben.adhesion_date)
        log = IntegrationLog.objects.get(beneficiary=self.ben)
        self.assertEqual((log.operation, log.status), ("adesao", "success"))

    def test_already_sent_is_skipped(self) -> None:
        Beneficiary.objects.filter(id=self.ben.id).update(status="sent_to_registry")

        result = self.bus.dispatch(NotifyRegistryAdhesionCommand(beneficiary_id=str(self.ben.id)))

        self.assertEqual(result["status"], "skipped")
        self.assertEqual(self.rms.adhesions, [])

    def test_inactive_beneficiary_is_skipped(self) -> None:
        Beneficiary.objects.filter(id=self.ben.id).update(status="inactive")

        result = self.bus.dispatch(NotifyRegistryAdhesionCommand(beneficiary_id=str(self.ben.id)))

        self.assertEqual(result["status"], "skipped")
        self.assertEqual(self.rms.adhesions, [])
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.status, "inactive")
        self.assertFalse(IntegrationLog.objects.filter(beneficiary=self.ben).exists())

    def test_failure_is_recorded_not_raised(self) -> None:
        self._use_rms(FakeRmsClient(fail=True))

        result = self.bus.dispatch(NotifyRegistryAdhesionCommand(beneficiary_id=str(self.ben.id)))

        self.assertEqual(result["status"], "failed")
        self.assertTrue(result["retryable"])
        self.ben.refresh_from_db()
        self.assertEqual(self.ben.status, "registry_failed")
        self.assertEqual(self.ben.registry_retry_count, 1)
        self.assertEqual(self.ben.last_registry_error, "RMS indisponível")
        self.assertTrue(IntegrationLog.objects.filter(beneficiary=self.ben, status="error").exists())
        # matriz avisada in-app
        self.assertTrue(Notification.objects.filter(user=self.hq).exists())

    def test_dependent_requires_holder_cpf(self) -> None:
        result = self.bus.dispatch(
            NotifyRegistryAdhesionCommand(beneficiary_id=str(self.ben.id), beneficiary_type=3)
        )

        self.assertEqual(result["status"], "failed")
        self.assertEqual(self.rms.adhesions, [])

    def test_retry_command_respects_max_retries(self) -> None:
        Beneficiary.objects.filter(id=self.ben.id).update(status="registry_failed", registry_retry_count=1)
        exhausted = make_beneficiary(
            make_plan("Outro"),
            self.unit,
            cpf="52998224725",
            email="joao@medpass.com.br",
            status="registry_failed",
            registry_retry_count=5,
        )

        out = StringIO()
        call_command("retry_registry_adhesions", "--max-retries", "5", stdout=out)

        self.assertIn("enviados: 1", out.getvalue())
        self.assertEqual(len(self.rms.adhesions), 1)
        self.ben.refresh_from_db()
        exhausted.refresh_from_db()
        self.assertEqual(self.ben.status, "sent_to_registry")
        self.assertEqual(exhausted.status, "registry_failed")


class RegistryQueryViewTests(ApiTestCase):
    URL = "/api/functions/registry-beneficiaries"

    def test_headquarters_queries_period(self) -> None:
        client = api_client_for(make_user("matriz"))

        resp = client.post(self.URL, {"start": "2026-10-01", "end": "2026-10-17"}, format="json")

        self.assertEqual(resp.status_code, 200, resp.content)
        page = resp.json()["data"]
        self.assertEqual(page["count"], 1)
        self.assertEqual(page["beneficiarios"][0]["cpf"], "08600756995")

    def test_inverted_period_is_rejected(self) -> None:
        client = api_client_for(make_user("matriz"))

        resp = client.post(self.URL, {"start": "2026-10-17", "end": "2026-10-01"}, format="json")

        self.assertEqual(resp.status_code, 400)

    def test_unit_user_is_forbidden(self) -> None:
        client = api_client_for(make_user("unidade", make_unit()))

        resp = client.post(self.URL, {"start": "2026-10-01", "end": "2026-10-17"}, format="json")

        self.assertEqual(resp.status_code, 403)


class RmsTransportRetryTests(SimpleTestCase):
    def test_only_reads_are_retried_by_the_session(self) -> None:
        client = RmsAPIClient(ApiSettingRepoImpl())

        retry = client.session.get_adapter("https://rms.example.com.br").max_retries

        self.assertTrue(retry.is_retry("GET", 503))
        self.assertFalse(retry.is_retry("POST", 503))
