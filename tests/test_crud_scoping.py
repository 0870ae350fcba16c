"""Escopo por unidade, permissões por papel, filtros e cache das listas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from plugins.django_interface.models import Beneficiary, Commission, Contract, Notification, Plan
from tests.helpers.builders import (
    ApiTestCase,
    api_client_for,
    make_beneficiary,
    make_plan,
    make_unit,
    make_user,
)

SECOND_CPF = "52998224725"


class BeneficiaryScopeTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.plan = make_plan()
        self.unit_a = make_unit("Unidade A")
        self.unit_b = make_unit("Unidade B")
        self.ben_a = make_beneficiary(self.plan, self.unit_a)
        self.ben_b = make_beneficiary(self.plan, self.unit_b, cpf=SECOND_CPF, email="joao@medpass.com.br")
        self.operator_a = api_client_for(make_user("unidade", self.unit_a))
        self.hq = api_client_for(make_user("matriz"))

    def test_unit_operator_lists_only_own_unit(self) -> None:
        resp = self.operator_a.get("/api/beneficiaries")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["total_items"], 1)
        self.assertEqual(body["results"][0]["id"], str(self.ben_a.id))

    def test_headquarters_lists_everything(self) -> None:
        resp = self.hq.get("/api/beneficiaries")

        self.assertEqual(resp.json()["total_items"], 2)

    def test_unit_filter_cannot_escape_scope(self) -> None:
        resp = self.operator_a.get("/api/beneficiaries", {"unit_id": str(self.unit_b.id)})

        self.assertEqual(resp.json()["total_items"], 1)
        self.assertEqual(resp.json()["results"][0]["id"], str(self.ben_a.id))

    def test_other_unit_record_is_not_found(self) -> None:
        self.assertEqual(self.operator_a.get(f"/api/beneficiaries/{self.ben_b.id}").status_code, 404)
        self.assertEqual(
            self.operator_a.patch(f"/api/beneficiaries/{self.ben_b.id}", {"notes": "x"}, format="json").status_code,
            404,
        )
        self.assertEqual(self.operator_a.delete(f"/api/beneficiaries/{self.ben_b.id}").status_code, 404)

    def test_create_forces_operator_unit(self) -> None:
        payload = {
            "name": "Ana Souza",
            "cpf": "111.444.777-35",
            "plan_id": str(self.plan.id),
            "email": "ana@medpass.com.br",
            "phone": "(41) 98888-7777",
            "cep": "80010-000",
            "unit_id": str(self.unit_b.id),
        }

        resp = self.operator_a.post("/api/beneficiaries", payload, format="json")

        self.assertEqual(resp.status_code, 201, resp.content)
        created = Beneficiary.objects.get(id=resp.json()["id"])
        self.assertEqual(created.unit_id, self.unit_a.id)
        self.assertEqual(created.cpf, "11144477735")
        self.assertEqual(created.cep, "80010000")
        self.assertEqual(created.status, "pending")
        self.assertEqual(created.payment_status, "pending")

    def test_duplicate_cpf_conflicts(self) -> None:
        payload = {"name": "Outra Maria", "cpf": self.ben_a.cpf, "plan_id": str(self.plan.id)}

        resp = self.hq.post("/api/beneficiaries", payload, format="json")

        self.assertEqual(resp.status_code, 409)

    def test_invalid_cpf_is_rejected(self) -> None:
        payload = {"name": "Teste", "cpf": "123.456.789-00", "plan_id": str(self.plan.id)}

        resp = self.hq.post("/api/beneficiaries", payload, format="json")

        self.assertEqual(resp.status_code, 400)

    def test_delete_inactivates(self) -> None:
        resp = self.operator_a.delete(f"/api/beneficiaries/{self.ben_a.id}")

        self.assertEqual(resp.status_code, 204)
        self.ben_a.refresh_from_db()
        self.assertEqual(self.ben_a.status, "inactive")

    def test_list_cache_is_invalidated_by_mutation(self) -> None:
        before = self.hq.get("/api/beneficiaries", {"status": "inactive"}).json()
        self.hq.delete(f"/api/beneficiaries/{self.ben_b.id}")
        after = self.hq.get("/api/beneficiaries", {"status": "inactive"}).json()

        self.assertEqual(before["total_items"], 0)
        self.assertEqual(after["total_items"], 1)

    def test_pagination_envelope(self) -> None:
        body = self.hq.get("/api/beneficiaries", {"page": 2, "page_size": 1}).json()

        self.assertEqual(body["page"], 2)
        self.assertEqual(body["page_size"], 1)
        self.assertEqual(body["total_pages"], 2)
        self.assertEqual(body["items_on_page"], 1)

    def test_anonymous_is_rejected(self) -> None:
        from rest_framework.test import APIClient

        self.assertIn(APIClient().get("/api/beneficiaries").status_code, (401, 403))


class PlanPermissionTests(ApiTestCase):
    def test_unit_operator_reads_but_cannot_write_plans(self) -> None:
        plan = make_plan()
        operator = api_client_for(make_user("unidade", make_unit()))

        self.assertEqual(operator.get("/api/plans").status_code, 200)
        resp = operator.patch(f"/api/plans/{plan.id}", {"price": "59.90"}, format="json")
        self.assertEqual(resp.status_code, 403)

    def test_headquarters_manages_plans(self) -> None:
        hq = api_client_for(make_user("matriz"))

        created = hq.post("/api/plans", {"name": "Empresarial", "price": "120.00"}, format="json")
        self.assertEqual(created.status_code, 201, created.content)

        plan_id = created.json()["id"]
        self.assertEqual(hq.delete(f"/api/plans/{plan_id}").status_code, 204)
        self.assertFalse(Plan.objects.get(id=plan_id).active)


class CommissionTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.unit = make_unit()
        self.ben = make_beneficiary(make_plan(), self.unit)
        self.commission = Commission.objects.create(
            beneficiary=self.ben,
            unit=self.unit,
            reference_month=dt.date(2026, 10, 1),
            amount=Decimal("4.99"),
            percent=Decimal("10"),
        )
        self.operator = api_client_for(make_user("unidade", self.unit))
        self.hq = api_client_for(make_user("matriz"))

    def test_headquarters_marks_paid(self) -> None:
        resp = self.hq.post(f"/api/commissions/{self.commission.id}/mark-paid")

        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertTrue(resp.json()["paid"])
        self.assertIsNotNone(resp.json()["paid_at"])

    def test_unit_operator_reads_but_cannot_mark_paid(self) -> None:
        listing = self.operator.get("/api/commissions", {"paid": "false"})
        self.assertEqual(listing.json()["total_items"], 1)

        resp = self.operator.post(f"/api/commissions/{self.commission.id}/mark-paid")
        self.assertEqual(resp.status_code, 403)
        self.commission.refresh_from_db()
        self.assertFalse(self.commission.paid)

    def test_mark_paid_unknown_is_not_found(self) -> None:
        resp = self.hq.post("/api/commissions/7d1f9a36-1111-4c1e-9a0b-2f4f0c3d5e6a/mark-paid")

        self.assertEqual(resp.status_code, 404)

    def test_search_by_beneficiary_name_or_cpf(self) -> None:
        self.assertEqual(self.hq.get("/api/commissions", {"search": "maria"}).json()["total_items"], 1)
        self.assertEqual(self.hq.get("/api/commissions", {"search": "086.007"}).json()["total_items"], 1)
        self.assertEqual(self.hq.get("/api/commissions", {"search": "ninguem"}).json()["total_items"], 0)

    def test_contract_search(self) -> None:
        Contract.objects.create(beneficiary=self.ben, document_id="doc-abc-123")

        resp = self.operator.get("/api/contracts", {"search": "doc-abc"})

        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["total_items"], 1)
        self.assertEqual(self.operator.get("/api/contracts", {"search": "joao"}).json()["total_items"], 0)


class NotificationTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        unit = make_unit()
        self.owner = make_user("unidade", unit)
        self.stranger = make_user("unidade", unit)
        self.notes = [
            Notification.objects.create(user=self.owner, title=f"Aviso {i}", message="...") for i in range(3)
        ]
        self.foreign = Notification.objects.create(user=self.stranger, title="Outro", message="...")
        self.client = api_client_for(self.owner)

    def test_lists_only_own_notifications(self) -> None:
        body = self.client.get("/api/notifications").json()

        self.assertEqual(body["total_items"], 3)

    def test_mark_read_and_filter(self) -> None:
        resp = self.client.post(f"/api/notifications/{self.notes[0].id}/mark-read")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"id": str(self.notes[0].id), "read": True})
        unread = self.client.get("/api/notifications", {"read": "false"}).json()
        self.assertEqual(unread["total_items"], 2)

    def test_search_title_and_message(self) -> None:
        Notification.objects.create(user=self.owner, title="Pagamento confirmado", message="Maria pagou")

        resp = self.client.get("/api/notifications", {"search": "pagamento"})

        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["total_items"], 1)

    def test_mark_all_read(self) -> None:
        resp = self.client.post("/api/notifications/mark-all-read")

        self.assertEqual(resp.json(), {"updated": 3})
        self.assertFalse(Notification.objects.filter(user=self.owner, read=False).exists())
        self.foreign.refresh_from_db()
        self.assertFalse(self.foreign.read)

    def test_cannot_touch_someone_elses_notification(self) -> None:
        self.assertEqual(self.client.post(f"/api/notifications/{self.foreign.id}/mark-read").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/notifications/{self.foreign.id}").status_code, 404)
        self.assertTrue(Notification.objects.filter(id=self.foreign.id).exists())

    def test_only_headquarters_creates(self) -> None:
        payload = {"user_id": str(self.owner.id), "title": "Manual", "message": "Olá"}

        self.assertEqual(self.client.post("/api/notifications", payload, format="json").status_code, 403)
        hq = api_client_for(make_user("matriz"))
        self.assertEqual(hq.post("/api/notifications", payload, format="json").status_code, 201)
