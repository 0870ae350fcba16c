from django.conf import settings
from django.core.management.base import BaseCommand

from payment_billing.adapters.config.composition_root import setup_di_container_from_settings
from payment_billing.core.application.commands.webhook_commands import ReprocessWebhookEventsCommand


class Command(BaseCommand):
    help = "Reaplica eventos de webhook não processados (ou que falharam)."

    def add_arguments(self, parser):
        parser.add_argument("--limit", type=int, default=50, help="Máximo de eventos (default: 50)")
        parser.add_argument("--event-type", help="Filtra por tipo de evento (ex.: bill_paid)")

    def handle(self, *args, **opts):
        bus = setup_di_container_from_settings(settings).command_bus()
        result = bus.dispatch(
            ReprocessWebhookEventsCommand(limit=opts["limit"], event_type=opts.get("event_type"))
        )

        styles = {"success": self.style.SUCCESS, "skipped": self.style.WARNING, "error": self.style.ERROR}
        for item in result["results"]:
            self.stdout.write(styles[item["status"]](f"{item['event_id']}: {item['status']} - {item['message']}"))
        self.stdout.write(
            f"Total: {result['total']} | sucesso: {result.get('success', 0)} | "
            f"ignorados: {result.get('skipped', 0)} | erros: {result.get('error', 0)}"
        )
