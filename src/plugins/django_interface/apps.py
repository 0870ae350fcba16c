import structlog
from django.apps import AppConfig

logger = structlog.get_logger(__name__)


class DjangoInterfaceConfig(AppConfig):
    name = "plugins.django_interface"
    verbose_name = "MedPass Interface"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        # normalização de CPF/telefone antes de salvar
        from . import signals  # noqa: F401

        logger.info("DjangoInterfaceConfig ready")
