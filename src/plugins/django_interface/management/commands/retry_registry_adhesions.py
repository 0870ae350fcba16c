from django.conf import settings
from django.core.management.base import BaseCommand

from payment_billing.adapters.config.composition_root import setup_di_container_from_settings
from payment_billing.core.application.commands.registry_commands import RetryRegistryAdhesionsCommand


class Command(BaseCommand):
    help = "Reenvia ao RMS as adesões com status registry_failed."

    def add_arguments(self, parser):
        parser.add_argument(
            "--max-retries",
            type=int,
            default=settings.REGISTRY_MAX_RETRIES,
            help=f"Ignora beneficiários com tentativas >= N (default: {settings.REGISTRY_MAX_RETRIES})",
        )

    def handle(self, *args, **opts):
        bus = setup_di_container_from_settings(settings).command_bus()
        result = bus.dispatch(RetryRegistryAdhesionsCommand(max_retries=opts["max_retries"]))

        for item in result["results"]:
            style = self.style.SUCCESS if item["status"] == "sent" else self.style.WARNING
            self.stdout.write(style(f"{item['beneficiary_id']}: {item['status']}"))
        self.stdout.write(
            self.style.SUCCESS(
                f"Total: {result['total']} | enviados: {result['sent']} | "
                f"ignorados: {result['skipped']} | falhas: {result['failed']}"
            )
        )
