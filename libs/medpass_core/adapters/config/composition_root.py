from dependency_injector import containers, providers

container = None


def setup_di_container_from_settings(settings):  # noqa: PLR0915
    """Inicializa o DI container após o Django já estar com settings carregados."""
    global container  # noqa: PLW0603
    if container is not None:
        import structlog
        structlog.get_logger(__name__).debug("DI container já inicializado.")
        return container

    # ------- IMPORTS QUE USAM DJANGO MODELS -------
    import redis
    import structlog

    from medpass_core.adapters.repositories.api_setting_repo_impl import ApiSettingRepoImpl
    from medpass_core.adapters.repositories.beneficiary_repo_impl import BeneficiaryRepoImpl
    from medpass_core.adapters.repositories.cancellation_repo_impl import CancellationRepoImpl
    from medpass_core.adapters.repositories.commission_repo_impl import CommissionRepoImpl
    from medpass_core.adapters.repositories.contract_repo_impl import ContractRepoImpl
    from medpass_core.adapters.repositories.franchise_repo_impl import FranchiseRepoImpl
    from medpass_core.adapters.repositories.integration_log_repo_impl import IntegrationLogRepoImpl
    from medpass_core.adapters.repositories.notification_repo_impl import NotificationRepoImpl
    from medpass_core.adapters.repositories.plan_repo_impl import PlanRepoImpl
    from medpass_core.adapters.repositories.subscription_repo_impl import SubscriptionRepoImpl
    from medpass_core.adapters.repositories.transaction_repo_impl import TransactionRepoImpl
    from medpass_core.adapters.repositories.unit_repo_impl import UnitRepoImpl
    from medpass_core.adapters.repositories.user_repo_impl import UserRepoImpl
    from medpass_core.adapters.repositories.webhook_event_repo_impl import WebhookEventRepoImpl
    from medpass_core.adapters.security.hash_service import HashService

    # Commands
    from medpass_core.core.application.commands.beneficiary_commands import (
        CreateBeneficiaryCommand,
        DeleteBeneficiaryCommand,
        UpdateBeneficiaryCommand,
    )
    from medpass_core.core.application.commands.commission_commands import (
        CreateCommissionCommand,
        DeleteCommissionCommand,
        MarkCommissionPaidCommand,
        UpdateCommissionCommand,
    )
    from medpass_core.core.application.commands.contract_commands import (
        CreateContractCommand,
        DeleteContractCommand,
        UpdateContractCommand,
    )
    from medpass_core.core.application.commands.franchise_commands import (
        CreateFranchiseCommand,
        DeleteFranchiseCommand,
        UpdateFranchiseCommand,
    )
    from medpass_core.core.application.commands.notification_commands import (
        CreateNotificationCommand,
        DeleteNotificationCommand,
        MarkAllNotificationsReadCommand,
        MarkNotificationReadCommand,
        UpdateNotificationCommand,
    )
    from medpass_core.core.application.commands.plan_commands import (
        CreatePlanCommand,
        DeletePlanCommand,
        UpdatePlanCommand,
    )
    from medpass_core.core.application.commands.unit_commands import (
        CreateUnitCommand,
        DeleteUnitCommand,
        UpdateUnitCommand,
    )
    from medpass_core.core.application.commands.user_commands import CreateUserCommand

    # CQRS buses
    from medpass_core.core.application.cqrs import CommandBusImpl, QueryBusImpl

    # Handlers de CRUD (comandos)
    from medpass_core.core.application.handlers.core_entities_handlers import (
        CreateBeneficiaryHandler,
        CreateCommissionHandler,
        CreateContractRecordHandler,
        CreateFranchiseHandler,
        CreateNotificationHandler,
        CreatePlanHandler,
        CreateUnitHandler,
        CreateUserHandler,
        DeleteBeneficiaryHandler,
        DeleteCommissionHandler,
        DeleteContractRecordHandler,
        DeleteFranchiseHandler,
        DeleteNotificationHandler,
        DeletePlanHandler,
        DeleteUnitHandler,
        MarkAllNotificationsReadHandler,
        MarkCommissionPaidHandler,
        MarkNotificationReadHandler,
        UpdateBeneficiaryHandler,
        UpdateCommissionHandler,
        UpdateContractRecordHandler,
        UpdateFranchiseHandler,
        UpdateNotificationHandler,
        UpdatePlanHandler,
        UpdateUnitHandler,
    )

    # Handlers de Queries
    from medpass_core.core.application.handlers.query_handlers import (
        GetBeneficiaryHandler,
        GetCommissionHandler,
        GetContractHandler,
        GetFranchiseHandler,
        GetNotificationHandler,
        GetPlanHandler,
        GetUnitHandler,
        GetUserHandler,
        ListBeneficiariesHandler,
        ListCommissionsHandler,
        ListContractsHandler,
        ListFranchisesHandler,
        ListNotificationsHandler,
        ListPlansHandler,
        ListUnitsHandler,
    )
    from medpass_core.core.application.queries.core_queries import (
        GetBeneficiaryQuery,
        GetCommissionQuery,
        GetContractQuery,
        GetFranchiseQuery,
        GetNotificationQuery,
        GetPlanQuery,
        GetUnitQuery,
        ListBeneficiariesQuery,
        ListCommissionsQuery,
        ListContractsQuery,
        ListFranchisesQuery,
        ListNotificationsQuery,
        ListPlansQuery,
        ListUnitsQuery,
    )
    from medpass_core.core.application.queries.user_queries import GetUserQuery

    # ─────────────────────────────────────────────────────────
    # Construção do container DI
    # ─────────────────────────────────────────────────────────
    class Container(containers.DeclarativeContainer):
        config = providers.Configuration()

        # Infra
        logger           = providers.Singleton(structlog.get_logger)
        event_dispatcher = providers.Singleton(
            "medpass_core.core.domain.services.event_dispatcher.EventDispatcher"
        )
        redis_client     = providers.Singleton(redis.Redis.from_url, config.redis_url)

        # CQRS
        command_bus = providers.Singleton(CommandBusImpl, dispatcher=event_dispatcher)
        query_bus   = providers.Singleton(QueryBusImpl)

        # Implementações de Repositórios
        user_repo             = providers.Singleton(UserRepoImpl)
        franchise_repo        = providers.Singleton(FranchiseRepoImpl)
        unit_repo             = providers.Singleton(UnitRepoImpl)
        plan_repo             = providers.Singleton(PlanRepoImpl)
        beneficiary_repo      = providers.Singleton(BeneficiaryRepoImpl)
        cancellation_repo     = providers.Singleton(CancellationRepoImpl)
        commission_repo       = providers.Singleton(CommissionRepoImpl)
        contract_repo         = providers.Singleton(ContractRepoImpl)
        subscription_repo     = providers.Singleton(SubscriptionRepoImpl)
        transaction_repo      = providers.Singleton(TransactionRepoImpl)
        webhook_event_repo    = providers.Singleton(WebhookEventRepoImpl)
        notification_repo     = providers.Singleton(NotificationRepoImpl)
        api_setting_repo      = providers.Singleton(ApiSettingRepoImpl)
        integration_log_repo  = providers.Singleton(IntegrationLogRepoImpl)

        # Hash
        hash_service = providers.Singleton(HashService)

        # Handlers CRUD (comandos)
        create_franchise_handler = providers.Factory(CreateFranchiseHandler, repo=franchise_repo)
        update_franchise_handler = providers.Factory(UpdateFranchiseHandler, repo=franchise_repo)
        delete_franchise_handler = providers.Factory(DeleteFranchiseHandler, repo=franchise_repo)

        create_unit_handler      = providers.Factory(CreateUnitHandler,      repo=unit_repo)
        update_unit_handler      = providers.Factory(UpdateUnitHandler,      repo=unit_repo)
        delete_unit_handler      = providers.Factory(DeleteUnitHandler,      repo=unit_repo)

        create_plan_handler      = providers.Factory(CreatePlanHandler,      repo=plan_repo)
        update_plan_handler      = providers.Factory(UpdatePlanHandler,      repo=plan_repo)
        delete_plan_handler      = providers.Factory(DeletePlanHandler,      repo=plan_repo)

        create_beneficiary_handler = providers.Factory(
            CreateBeneficiaryHandler,
            repo=beneficiary_repo,
            plan_repo=plan_repo,
            dispatcher=event_dispatcher,
        )
        update_beneficiary_handler = providers.Factory(
            UpdateBeneficiaryHandler, repo=beneficiary_repo, plan_repo=plan_repo
        )
        delete_beneficiary_handler = providers.Factory(DeleteBeneficiaryHandler, repo=beneficiary_repo)

        create_commission_handler    = providers.Factory(CreateCommissionHandler,   repo=commission_repo)
        update_commission_handler    = providers.Factory(UpdateCommissionHandler,   repo=commission_repo)
        delete_commission_handler    = providers.Factory(DeleteCommissionHandler,   repo=commission_repo)
        mark_commission_paid_handler = providers.Factory(MarkCommissionPaidHandler, repo=commission_repo)

        create_contract_handler = providers.Factory(
            CreateContractRecordHandler, repo=contract_repo, beneficiary_repo=beneficiary_repo
        )
        update_contract_handler = providers.Factory(
            UpdateContractRecordHandler, repo=contract_repo, beneficiary_repo=beneficiary_repo
        )
        delete_contract_handler = providers.Factory(
            DeleteContractRecordHandler, repo=contract_repo, beneficiary_repo=beneficiary_repo
        )

        create_notification_handler    = providers.Factory(CreateNotificationHandler,       repo=notification_repo)
        update_notification_handler    = providers.Factory(UpdateNotificationHandler,       repo=notification_repo)
        delete_notification_handler    = providers.Factory(DeleteNotificationHandler,       repo=notification_repo)
        mark_notification_read_handler = providers.Factory(MarkNotificationReadHandler,     repo=notification_repo)
        mark_all_read_handler          = providers.Factory(MarkAllNotificationsReadHandler, repo=notification_repo)

        create_user_handler = providers.Factory(CreateUserHandler, repo=user_repo, hash_service=hash_service)

        # Handlers de Queries
        list_franchises_handler    = providers.Factory(ListFranchisesHandler,    repo=franchise_repo)
        get_franchise_handler      = providers.Factory(GetFranchiseHandler,      repo=franchise_repo)
        list_units_handler         = providers.Factory(ListUnitsHandler,         repo=unit_repo)
        get_unit_handler           = providers.Factory(GetUnitHandler,           repo=unit_repo)
        list_plans_handler         = providers.Factory(ListPlansHandler,         repo=plan_repo)
        get_plan_handler           = providers.Factory(GetPlanHandler,           repo=plan_repo)
        list_beneficiaries_handler = providers.Factory(ListBeneficiariesHandler, repo=beneficiary_repo)
        get_beneficiary_handler    = providers.Factory(GetBeneficiaryHandler,    repo=beneficiary_repo)
        list_commissions_handler   = providers.Factory(ListCommissionsHandler,   repo=commission_repo)
        get_commission_handler     = providers.Factory(GetCommissionHandler,     repo=commission_repo)
        list_contracts_handler     = providers.Factory(ListContractsHandler,     repo=contract_repo)
        get_contract_handler       = providers.Factory(
            GetContractHandler, repo=contract_repo, beneficiary_repo=beneficiary_repo
        )
        list_notifications_handler = providers.Factory(ListNotificationsHandler, repo=notification_repo)
        get_notification_handler   = providers.Factory(GetNotificationHandler,   repo=notification_repo)
        get_user_handler           = providers.Factory(GetUserHandler,           repo=user_repo)

        def init(self):  # noqa: PLR0915
            # Bus de comandos
            cmd_bus = self.command_bus()

            cmd_bus.register(CreateFranchiseCommand, self.create_franchise_handler())
            cmd_bus.register(UpdateFranchiseCommand, self.update_franchise_handler())
            cmd_bus.register(DeleteFranchiseCommand, self.delete_franchise_handler())

            cmd_bus.register(CreateUnitCommand, self.create_unit_handler())
            cmd_bus.register(UpdateUnitCommand, self.update_unit_handler())
            cmd_bus.register(DeleteUnitCommand, self.delete_unit_handler())

            cmd_bus.register(CreatePlanCommand, self.create_plan_handler())
            cmd_bus.register(UpdatePlanCommand, self.update_plan_handler())
            cmd_bus.register(DeletePlanCommand, self.delete_plan_handler())

            cmd_bus.register(CreateBeneficiaryCommand, self.create_beneficiary_handler())
            cmd_bus.register(UpdateBeneficiaryCommand, self.update_beneficiary_handler())
            cmd_bus.register(DeleteBeneficiaryCommand, self.delete_beneficiary_handler())

            cmd_bus.register(CreateCommissionCommand, self.create_commission_handler())
            cmd_bus.register(UpdateCommissionCommand, self.update_commission_handler())
            cmd_bus.register(DeleteCommissionCommand, self.delete_commission_handler())
            cmd_bus.register(MarkCommissionPaidCommand, self.mark_commission_paid_handler())

            cmd_bus.register(CreateContractCommand, self.create_contract_handler())
            cmd_bus.register(UpdateContractCommand, self.update_contract_handler())
            cmd_bus.register(DeleteContractCommand, self.delete_contract_handler())

            cmd_bus.register(CreateNotificationCommand, self.create_notification_handler())
            cmd_bus.register(UpdateNotificationCommand, self.update_notification_handler())
            cmd_bus.register(DeleteNotificationCommand, self.delete_notification_handler())
            cmd_bus.register(MarkNotificationReadCommand, self.mark_notification_read_handler())
            cmd_bus.register(MarkAllNotificationsReadCommand, self.mark_all_read_handler())

            cmd_bus.register(CreateUserCommand, self.create_user_handler())

            # Bus de queries
            qry_bus = self.query_bus()

            qry_bus.register(ListFranchisesQuery, self.list_franchises_handler())
            qry_bus.register(GetFranchiseQuery, self.get_franchise_handler())
            qry_bus.register(ListUnitsQuery, self.list_units_handler())
            qry_bus.register(GetUnitQuery, self.get_unit_handler())
            qry_bus.register(ListPlansQuery, self.list_plans_handler())
            qry_bus.register(GetPlanQuery, self.get_plan_handler())
            qry_bus.register(ListBeneficiariesQuery, self.list_beneficiaries_handler())
            qry_bus.register(GetBeneficiaryQuery, self.get_beneficiary_handler())
            qry_bus.register(ListCommissionsQuery, self.list_commissions_handler())
            qry_bus.register(GetCommissionQuery, self.get_commission_handler())
            qry_bus.register(ListContractsQuery, self.list_contracts_handler())
            qry_bus.register(GetContractQuery, self.get_contract_handler())
            qry_bus.register(ListNotificationsQuery, self.list_notifications_handler())
            qry_bus.register(GetNotificationQuery, self.get_notification_handler())
            qry_bus.register(GetUserQuery, self.get_user_handler())

    # ------- INSTANCIAÇÃO E CONFIG -------
    container = Container()
    container.config.redis_url.from_value(settings.REDIS_URL)
    Container.init(container)
    return container
