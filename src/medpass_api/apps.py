from django.apps import AppConfig


class MedpassConfig(AppConfig):
    name = "medpass_api"
    verbose_name = "MedPass Gestão API"

    def ready(self):
        from django.conf import settings

        # ─── DI containers ──────────────────────────────────────────
        from medpass_core.adapters.config.composition_root import (
            setup_di_container_from_settings as build_core_container,
        )

        from payment_billing.adapters.config.composition_root import (
            setup_di_container_from_settings as build_pb_container,
        )

        core_container = build_core_container(settings)
        _pb_container  = build_pb_container(settings)

        # ─── Eventos de domínio → tasks Celery ──────────────────────
        import medpass_api.celery  # noqa: F401  (app Celery corrente p/ os shared_tasks)
        from medpass_api.tasks import register_event_subscribers

        register_event_subscribers(core_container.event_dispatcher())
