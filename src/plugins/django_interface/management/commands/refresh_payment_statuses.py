from django.conf import settings
from django.core.management.base import BaseCommand

from payment_billing.adapters.config.composition_root import setup_di_container_from_settings
from payment_billing.core.application.commands.payment_commands import RefreshPaymentStatusesCommand


class Command(BaseCommand):
    help = "Consulta no gateway as cobranças pendentes e atualiza os status locais."

    def add_arguments(self, parser):
        parser.add_argument("--limit", type=int, default=100, help="Máximo de transações por execução (default: 100)")

    def handle(self, *args, **opts):
        bus = setup_di_container_from_settings(settings).command_bus()
        result = bus.dispatch(RefreshPaymentStatusesCommand(limit=opts["limit"]))
        self.stdout.write(
            self.style.SUCCESS(
                f"Verificadas: {result['checked']} | atualizadas: {result['updated']} | erros: {result['errors']}"
            )
        )
