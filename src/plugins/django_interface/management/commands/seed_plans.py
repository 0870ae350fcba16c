from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from plugins.django_interface.models import Plan

# (nome, preço, código tipoPlano no RMS)
DEFAULT_PLANS = [
    ("Individual", Decimal("49.90"), 102303),
    ("Familiar", Decimal("89.90"), 102304),
]


class Command(BaseCommand):
    help = "Cria/atualiza os planos padrão (Individual e Familiar)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--vindi-plan-id",
            action="append",
            default=[],
            metavar="NOME=ID",
            help="Associa o plano ao ID do plano no gateway (ex.: Individual=123). Pode repetir.",
        )

    @transaction.atomic
    def handle(self, *args, **opts):
        vindi_ids = {}
        for item in opts["vindi_plan_id"]:
            name, _, value = item.partition("=")
            vindi_ids[name.strip()] = int(value)

        for name, price, rms_code in DEFAULT_PLANS:
            defaults = {"price": price, "rms_plan_code": rms_code, "active": True}
            if name in vindi_ids:
                defaults["vindi_plan_id"] = vindi_ids[name]
            plan, created = Plan.objects.update_or_create(name=name, defaults=defaults)
            verb = "criado" if created else "atualizado"
            self.stdout.write(self.style.SUCCESS(f"Plano {plan.name} ({plan.price}) {verb}."))
