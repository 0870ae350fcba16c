"""Criação de dados de teste direto no ORM + cliente autenticado."""
from __future__ import annotations

import uuid
from decimal import Decimal

from dependency_injector import providers
from django.conf import settings
from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from medpass_core.adapters.security.hash_service import HashService
from medpass_core.adapters.security.jwt_service import JWTService
from payment_billing.adapters.config.composition_root import setup_di_container_from_settings
from plugins.django_interface.models import Beneficiary, Franchise, Plan, Unit, User
from tests.helpers.fakes import (
    FakeAutentiqueClient,
    FakeEmailNotifier,
    FakeRmsClient,
    FakeVindiClient,
)

VALID_CPF = "08600756995"
PASSWORD = "s3nha-forte"


def make_unit(name: str = "Unidade Centro") -> Unit:
    franchise = Franchise.objects.create(name=f"Franquia {name}")
    return Unit.objects.create(name=name, franchise=franchise, city="Curitiba", state="PR")


def make_user(role: str = "unidade", unit: Unit | None = None, email: str | None = None) -> User:
    return User.objects.create(
        email=email or f"{uuid.uuid4().hex[:8]}@medpass.com.br",
        password_hash=HashService.hash_password(PASSWORD),
        name="Operador" if role == "unidade" else "Matriz",
        role=role,
        unit=unit,
    )


def make_plan(name: str = "Individual", price: str = "49.90", **extra) -> Plan:
    defaults = {
        "vindi_plan_id": 111,
        "rms_plan_code": 102303,
        "adhesion_commission_percent": Decimal("10"),
    }
    defaults.update(extra)
    return Plan.objects.create(name=name, price=Decimal(price), **defaults)


def make_beneficiary(plan: Plan, unit: Unit | None = None, cpf: str = VALID_CPF, **extra) -> Beneficiary:
    data = {
        "name": "Maria Teste",
        "email": "maria@medpass.com.br",
        "phone": "41987654321",
        "cep": "80010000",
        "birth_date": "1990-05-20",
    }
    data.update(extra)
    return Beneficiary.objects.create(plan=plan, unit=unit, cpf=cpf, **data)


def api_client_for(user: User) -> APIClient:
    token = JWTService.create_token(
        subject=str(user.id),
        expires_in=settings.JWT_EXPIRES_IN,
        role=user.role,
        unit_id=str(user.unit_id) if user.unit_id else None,
    )
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


class ProviderFakesMixin:
    """Troca os clientes externos do container por dublês durante o teste."""

    def install_fakes(self, *, vindi: FakeVindiClient | None = None, rms: FakeRmsClient | None = None):
        self.container = setup_di_container_from_settings(settings)
        self.vindi = vindi or FakeVindiClient()
        self.rms = rms or FakeRmsClient()
        self.autentique = FakeAutentiqueClient()
        self.email = FakeEmailNotifier()
        self.container.vindi_client.override(providers.Object(self.vindi))
        self.container.rms_client.override(providers.Object(self.rms))
        self.container.autentique_client.override(providers.Object(self.autentique))
        self.container.email_notifier.override(providers.Object(self.email))

    def reset_fakes(self) -> None:
        for provider in (
            self.container.vindi_client,
            self.container.rms_client,
            self.container.autentique_client,
            self.container.email_notifier,
        ):
            provider.reset_override()


class ApiTestCase(ProviderFakesMixin, TestCase):
    def setUp(self) -> None:
        cache.clear()
        self.install_fakes()

    def tearDown(self) -> None:
        self.reset_fakes()
