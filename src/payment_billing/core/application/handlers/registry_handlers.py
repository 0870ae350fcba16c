from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any

import structlog
from django.utils import timezone

from medpass_core.core.application.cqrs import CommandHandler, QueryHandler
from medpass_core.core.domain.entities.beneficiary_entity import BeneficiaryEntity, BeneficiaryStatus
from medpass_core.core.domain.entities.integration_log_entity import IntegrationLogEntity
from medpass_core.core.domain.events.events import RegistryAdhesionFailedEvent
from medpass_core.core.domain.events.exceptions import DomainError, NotFoundError, PlanNotFoundError
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.integration_log_repository import IntegrationLogRepository
from medpass_core.core.domain.repositories.plan_repository import PlanRepository
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher
from payment_billing.adapters.api_clients.rms_api_client import RmsAPIClient
from payment_billing.adapters.observability.metrics import REGISTRY_CALLS
from payment_billing.core.application.commands.registry_commands import (
    NotifyRegistryAdhesionCommand,
    NotifyRegistryCancellationCommand,
    RetryRegistryAdhesionsCommand,
)
from payment_billing.core.application.queries.registry_queries import QueryRegistryBeneficiariesQuery
from payment_billing.core.domain.events.exceptions import RegistryTemporaryError
from payment_billing.core.domain.services.registry_payload import (
    build_adhesion_payload,
    build_cancellation_payload,
)

logger = structlog.get_logger(__name__)


class _RegistryCallMixin:
    """Grava o `IntegrationLog` e a métrica de cada chamada ao RMS."""

    integration_log_repo: IntegrationLogRepository

    def _log_call(  # noqa: PLR0913
        self,
        operation: str,
        ben: BeneficiaryEntity,
        request: dict[str, Any],
        *,
        response: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        status = "error" if error else "success"
        self.integration_log_repo.add(
            IntegrationLogEntity(
                id=uuid.uuid4(),
                operation=operation,
                status=status,
                beneficiary_id=ben.id,
                request_data=request,
                response_data=response if isinstance(response, dict) else {},
                error_message=error,
                retry_count=ben.registry_retry_count,
            )
        )
        REGISTRY_CALLS.labels(operation, status).inc()


# ╭──────────────────────────────────────────────╮
# │ 1. Adesão                                    │
# ╰──────────────────────────────────────────────╯
class NotifyRegistryAdhesionHandler(_RegistryCallMixin, CommandHandler[NotifyRegistryAdhesionCommand]):
    """
    Envia a adesão ao RMS. Sucesso → `sent_to_registry`; qualquer erro de
    domínio → `registry_failed`, contador de tentativas +1 e evento de falha.
    """

    def __init__(  # noqa: PLR0913
        self,
        beneficiary_repo: BeneficiaryRepository,
        plan_repo: PlanRepository,
        integration_log_repo: IntegrationLogRepository,
        rms_client_factory: Callable[[], RmsAPIClient],
        dispatcher: EventDispatcher,
    ) -> None:
        self.beneficiary_repo = beneficiary_repo
        self.plan_repo = plan_repo
        self.integration_log_repo = integration_log_repo
        self.rms_client_factory = rms_client_factory
        self.dispatcher = dispatcher

    def handle(self, command: NotifyRegistryAdhesionCommand) -> dict[str, Any]:
        ben = self.beneficiary_repo.find_by_id(command.beneficiary_id)
        if ben is None:
            raise NotFoundError("Beneficiário não encontrado", beneficiary_id=command.beneficiary_id)
        log = logger.bind(beneficiary_id=str(ben.id), cpf=ben.masked_cpf())

        if ben.status == BeneficiaryStatus.SENT_TO_REGISTRY:
            log.info("registry.already_sent")
            return {"beneficiary_id": str(ben.id), "status": "skipped"}
        if ben.is_inactive:
            # cancelado não volta ao RMS nem muda de status
            log.info("registry.skipped_inactive")
            return {"beneficiary_id": str(ben.id), "status": "skipped", "reason": "inactive"}

        plan = self.plan_repo.find_by_id(str(ben.plan_id))
        if plan is None:
            raise PlanNotFoundError(plan_id=str(ben.plan_id))

        payload: dict[str, Any] = {}
        now = timezone.now()
        try:
            payload = build_adhesion_payload(
                ben,
                plan,
                command.codigo_externo,
                beneficiary_type=command.beneficiary_type,
                holder_cpf=command.holder_cpf,
            )
            response = self.rms_client_factory().send_adhesion(payload)
        except DomainError as exc:
            self._log_call("adesao", ben, payload, error=exc.message)
            self.beneficiary_repo.increment_registry_retry(
                str(ben.id),
                status=BeneficiaryStatus.REGISTRY_FAILED,
                last_registry_error=exc.message[:1000],
                last_registry_attempt_at=now,
            )
            retry_count = ben.registry_retry_count + 1
            self.dispatcher.dispatch(
                RegistryAdhesionFailedEvent(beneficiary_id=ben.id, error=exc.message, retry_count=retry_count)
            )
            log.warning("registry.failed", error=exc.message, retry_count=retry_count)
            return {
                "beneficiary_id": str(ben.id),
                "status": "failed",
                "error": exc.message,
                "retryable": isinstance(exc, RegistryTemporaryError),
            }

        self._log_call("adesao", ben, payload, response=response)
        self.beneficiary_repo.update_fields(
            str(ben.id),
            status=BeneficiaryStatus.SENT_TO_REGISTRY,
            last_registry_error=None,
            last_registry_attempt_at=now,
            adhesion_date=ben.adhesion_date or timezone.localdate(),
        )
        log.info("registry.sent", codigo_externo=payload["codigoExterno"])
        return {"beneficiary_id": str(ben.id), "status": "sent", "codigo_externo": payload["codigoExterno"]}


# ╭──────────────────────────────────────────────╮
# │ 2. Cancelamento                              │
# ╰──────────────────────────────────────────────╯
class NotifyRegistryCancellationHandler(_RegistryCallMixin, CommandHandler[NotifyRegistryCancellationCommand]):
    def __init__(
        self,
        beneficiary_repo: BeneficiaryRepository,
        integration_log_repo: IntegrationLogRepository,
        rms_client_factory: Callable[[], RmsAPIClient],
    ) -> None:
        self.beneficiary_repo = beneficiary_repo
        self.integration_log_repo = integration_log_repo
        self.rms_client_factory = rms_client_factory

    def handle(self, command: NotifyRegistryCancellationCommand) -> dict[str, Any]:
        ben = self.beneficiary_repo.find_by_id(command.beneficiary_id)
        if ben is None:
            raise NotFoundError("Beneficiário não encontrado", beneficiary_id=command.beneficiary_id)

        payload = build_cancellation_payload(ben)
        try:
            response = self.rms_client_factory().send_cancellation(payload)
        except DomainError as exc:
            self._log_call("cancelamento", ben, payload, error=exc.message)
            raise
        self._log_call("cancelamento", ben, payload, response=response)
        logger.info("registry.cancelled", beneficiary_id=str(ben.id), codigo_externo=payload["codigoExterno"])
        return {"beneficiary_id": str(ben.id), "status": "cancelled"}


# ╭──────────────────────────────────────────────╮
# │ 3. Retentativa em lote                       │
# ╰──────────────────────────────────────────────╯
class RetryRegistryAdhesionsHandler(CommandHandler[RetryRegistryAdhesionsCommand]):
    def __init__(
        self,
        beneficiary_repo: BeneficiaryRepository,
        adhesion_handler: NotifyRegistryAdhesionHandler,
    ) -> None:
        self.beneficiary_repo = beneficiary_repo
        self.adhesion_handler = adhesion_handler

    def handle(self, command: RetryRegistryAdhesionsCommand) -> dict[str, Any]:
        candidates = self.beneficiary_repo.list_registry_failed(command.max_retries)
        results = [
            self.adhesion_handler.handle(NotifyRegistryAdhesionCommand(beneficiary_id=str(ben.id)))
            for ben in candidates
        ]
        sent = sum(1 for r in results if r["status"] == "sent")
        skipped = sum(1 for r in results if r["status"] == "skipped")
        failed = len(results) - sent - skipped
        logger.info("registry.retry_done", total=len(results), sent=sent, skipped=skipped, failed=failed)
        return {
            "total": len(results),
            "sent": sent,
            "skipped": skipped,
            "failed": failed,
            "results": results,
        }


# ╭──────────────────────────────────────────────╮
# │ 4. Consulta                                  │
# ╰──────────────────────────────────────────────╯
class QueryRegistryBeneficiariesHandler(QueryHandler[QueryRegistryBeneficiariesQuery, dict]):
    def __init__(self, rms_client_factory: Callable[[], RmsAPIClient]) -> None:
        self.rms_client_factory = rms_client_factory

    def handle(self, query: QueryRegistryBeneficiariesQuery) -> dict[str, Any]:
        page = self.rms_client_factory().query_beneficiaries(query.start, query.end, query.offset, query.cpf)
        return page.model_dump(mode="json")
