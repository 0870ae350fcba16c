"""
Composition-root do *payment_billing*.

• Carregado apenas depois que Django já aplicou as `settings`.
• Reaproveita repositórios, dispatcher e buses do container do core;
  os handlers daqui são registrados nos mesmos buses.
• Clientes externos são `Factory`: a chave ausente só falha na chamada,
  e os testes trocam o cliente com `container.vindi_client.override(...)`.
"""
from dependency_injector import containers, providers

container = None  # type: ignore


# ────────────────────────────────────────────────────────────────────
def setup_di_container_from_settings(settings):                      # noqa: PLR0915
    """
    Lazy-factory do DI container. Pode ser chamada quantas vezes
    for necessário: sempre retorna a mesma instância.
    """
    global container                                                 # noqa: PLW0603
    if container is not None:
        import structlog

        structlog.get_logger(__name__).debug("PaymentBilling DI container já instanciado.")
        return container

    import structlog
    from medpass_core.adapters.config.composition_root import (
        setup_di_container_from_settings as _setup_core_di,
    )

    core_container = _setup_core_di(settings)

    from payment_billing.adapters.api_clients.autentique_api_client import AutentiqueAPIClient
    from payment_billing.adapters.api_clients.rms_api_client import RmsAPIClient
    from payment_billing.adapters.api_clients.vindi_api_client import VindiAPIClient
    from payment_billing.adapters.notifiers.registry import get_email_notifier
    from payment_billing.core.application.commands.cancellation_commands import CancelBeneficiaryCommand
    from payment_billing.core.application.commands.payment_commands import (
        ProcessCheckoutCommand,
        RefreshPaymentStatusesCommand,
        TokenizeCardCommand,
    )
    from payment_billing.core.application.commands.registry_commands import (
        NotifyRegistryAdhesionCommand,
        NotifyRegistryCancellationCommand,
        RetryRegistryAdhesionsCommand,
    )
    from payment_billing.core.application.commands.signature_commands import (
        CreateSignatureContractCommand,
    )
    from payment_billing.core.application.commands.webhook_commands import (
        IngestGatewayWebhookCommand,
        IngestSignatureWebhookCommand,
        ReprocessWebhookEventsCommand,
    )
    from payment_billing.core.application.handlers.cancellation_handlers import (
        CancelBeneficiaryHandler,
    )
    from payment_billing.core.application.handlers.checkout_handlers import (
        ProcessCheckoutHandler,
        TokenizeCardHandler,
    )
    from payment_billing.core.application.handlers.payment_status_handlers import (
        RefreshPaymentStatusesHandler,
    )
    from payment_billing.core.application.handlers.registry_handlers import (
        NotifyRegistryAdhesionHandler,
        NotifyRegistryCancellationHandler,
        QueryRegistryBeneficiariesHandler,
        RetryRegistryAdhesionsHandler,
    )
    from payment_billing.core.application.handlers.signature_handlers import (
        CreateSignatureContractHandler,
    )
    from payment_billing.core.application.handlers.webhook_handlers import (
        GatewayEventApplier,
        IngestGatewayWebhookHandler,
        IngestSignatureWebhookHandler,
        ReprocessWebhookEventsHandler,
    )
    from payment_billing.core.application.queries.registry_queries import (
        QueryRegistryBeneficiariesQuery,
    )
    from payment_billing.core.application.services.notification_service import (
        InAppNotificationService,
    )
    from payment_billing.core.application.services.payment_status_service import (
        PaymentStatusService,
    )

    # ─── CONTAINER ─────────────────────────────────────────────────
    class Container(containers.DeclarativeContainer):
        config = providers.Configuration()

        # --- cross-cutting (instâncias do core) -------------------
        logger      = providers.Singleton(structlog.get_logger, __name__)
        dispatcher  = providers.Callable(lambda: core_container.event_dispatcher())
        command_bus = providers.Callable(lambda: core_container.command_bus())
        query_bus   = providers.Callable(lambda: core_container.query_bus())

        # --- clientes externos ------------------------------------
        vindi_client = providers.Factory(
            VindiAPIClient,
            environment=config.vindi_environment,
            timeout=config.vindi_timeout,
        )
        rms_client = providers.Factory(RmsAPIClient, settings_repo=core_container.api_setting_repo)
        autentique_client = providers.Factory(AutentiqueAPIClient, api_key=config.autentique_api_key)
        email_notifier = providers.Callable(get_email_notifier)

        # --- serviços --------------------------------------------
        payment_status_service = providers.Singleton(
            PaymentStatusService,
            beneficiary_repo=core_container.beneficiary_repo,
            transaction_repo=core_container.transaction_repo,
            subscription_repo=core_container.subscription_repo,
            commission_repo=core_container.commission_repo,
            plan_repo=core_container.plan_repo,
            dispatcher=dispatcher,
        )
        gateway_event_applier = providers.Singleton(
            GatewayEventApplier, payment_status_service=payment_status_service
        )
        in_app_notifications = providers.Singleton(
            InAppNotificationService,
            notification_repo=core_container.notification_repo,
            beneficiary_repo=core_container.beneficiary_repo,
            unit_repo=core_container.unit_repo,
            user_repo=core_container.user_repo,
        )

        # --- handlers ---------------------------------------------
        process_checkout_handler = providers.Factory(
            ProcessCheckoutHandler,
            beneficiary_repo=core_container.beneficiary_repo,
            plan_repo=core_container.plan_repo,
            subscription_repo=core_container.subscription_repo,
            transaction_repo=core_container.transaction_repo,
            payment_status_service=payment_status_service,
            vindi_client_factory=vindi_client.provider,
            dispatcher=dispatcher,
        )
        tokenize_card_handler = providers.Factory(
            TokenizeCardHandler, vindi_client_factory=vindi_client.provider
        )
        refresh_payment_statuses_handler = providers.Factory(
            RefreshPaymentStatusesHandler,
            transaction_repo=core_container.transaction_repo,
            payment_status_service=payment_status_service,
            vindi_client_factory=vindi_client.provider,
        )
        ingest_gateway_webhook_handler = providers.Factory(
            IngestGatewayWebhookHandler,
            webhook_event_repo=core_container.webhook_event_repo,
            applier=gateway_event_applier,
        )
        reprocess_webhook_events_handler = providers.Factory(
            ReprocessWebhookEventsHandler,
            webhook_event_repo=core_container.webhook_event_repo,
            applier=gateway_event_applier,
        )
        ingest_signature_webhook_handler = providers.Factory(
            IngestSignatureWebhookHandler,
            contract_repo=core_container.contract_repo,
            beneficiary_repo=core_container.beneficiary_repo,
            plan_repo=core_container.plan_repo,
            email_notifier_factory=email_notifier.provider,
            dispatcher=dispatcher,
        )
        notify_registry_adhesion_handler = providers.Singleton(
            NotifyRegistryAdhesionHandler,
            beneficiary_repo=core_container.beneficiary_repo,
            plan_repo=core_container.plan_repo,
            integration_log_repo=core_container.integration_log_repo,
            rms_client_factory=rms_client.provider,
            dispatcher=dispatcher,
        )
        notify_registry_cancellation_handler = providers.Factory(
            NotifyRegistryCancellationHandler,
            beneficiary_repo=core_container.beneficiary_repo,
            integration_log_repo=core_container.integration_log_repo,
            rms_client_factory=rms_client.provider,
        )
        retry_registry_adhesions_handler = providers.Factory(
            RetryRegistryAdhesionsHandler,
            beneficiary_repo=core_container.beneficiary_repo,
            adhesion_handler=notify_registry_adhesion_handler,
        )
        query_registry_beneficiaries_handler = providers.Factory(
            QueryRegistryBeneficiariesHandler, rms_client_factory=rms_client.provider
        )
        cancel_beneficiary_handler = providers.Factory(
            CancelBeneficiaryHandler,
            beneficiary_repo=core_container.beneficiary_repo,
            cancellation_repo=core_container.cancellation_repo,
            vindi_client_factory=vindi_client.provider,
            command_bus=command_bus,
            dispatcher=dispatcher,
        )
        create_signature_contract_handler = providers.Factory(
            CreateSignatureContractHandler,
            beneficiary_repo=core_container.beneficiary_repo,
            plan_repo=core_container.plan_repo,
            contract_repo=core_container.contract_repo,
            esignature_client_factory=autentique_client.provider,
            email_notifier_factory=email_notifier.provider,
        )

        # ----------------------------------------------------------
        def init(self) -> None:
            """Registra handlers nos buses do core e assina os eventos: executa 1×."""
            bus = self.command_bus()
            bus.register(ProcessCheckoutCommand, self.process_checkout_handler())
            bus.register(TokenizeCardCommand, self.tokenize_card_handler())
            bus.register(RefreshPaymentStatusesCommand, self.refresh_payment_statuses_handler())
            bus.register(IngestGatewayWebhookCommand, self.ingest_gateway_webhook_handler())
            bus.register(ReprocessWebhookEventsCommand, self.reprocess_webhook_events_handler())
            bus.register(IngestSignatureWebhookCommand, self.ingest_signature_webhook_handler())
            bus.register(NotifyRegistryAdhesionCommand, self.notify_registry_adhesion_handler())
            bus.register(NotifyRegistryCancellationCommand, self.notify_registry_cancellation_handler())
            bus.register(RetryRegistryAdhesionsCommand, self.retry_registry_adhesions_handler())
            bus.register(CancelBeneficiaryCommand, self.cancel_beneficiary_handler())
            bus.register(CreateSignatureContractCommand, self.create_signature_contract_handler())

            qry = self.query_bus()
            qry.register(QueryRegistryBeneficiariesQuery, self.query_registry_beneficiaries_handler())

            self.in_app_notifications().subscribe(self.dispatcher())

    # ─── INSTANTIAÇÃO + CONFIG ─────────────────────────────────────
    container = Container()
    container.config.vindi_environment.from_value(settings.VINDI_ENVIRONMENT)
    container.config.vindi_timeout.from_value(settings.VINDI_TIMEOUT)
    container.config.autentique_api_key.from_value(settings.AUTENTIQUE_API_KEY)

    # registra os handlers
    Container.init(container)                                             # type: ignore[attr-defined]
    return container
