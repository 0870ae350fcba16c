from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any

import structlog
from django.db import transaction
from django.utils import timezone

from medpass_core.core.application.cqrs import CommandBus, CommandHandler
from medpass_core.core.domain.entities.beneficiary_entity import BeneficiaryStatus
from medpass_core.core.domain.entities.cancellation_entity import CancellationEntity
from medpass_core.core.domain.events.events import BeneficiaryCancelledEvent
from medpass_core.core.domain.events.exceptions import (
    BusinessRuleError,
    PermissionDeniedError,
    ValidationError,
)
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.cancellation_repository import CancellationRepository
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher
from payment_billing.adapters.api_clients.vindi_api_client import VindiAPIClient
from payment_billing.core.application.commands.cancellation_commands import CancelBeneficiaryCommand
from payment_billing.core.application.commands.registry_commands import NotifyRegistryCancellationCommand

logger = structlog.get_logger(__name__)


class CancelBeneficiaryHandler(CommandHandler[CancelBeneficiaryCommand]):
    """
    Cancela a adesão: uma linha de `Cancellation` + status `inactive` na
    mesma transação, com a linha do beneficiário travada. Gateway e RMS são
    avisados depois do commit e suas falhas viram apenas warning.
    """

    def __init__(  # noqa: PLR0913
        self,
        beneficiary_repo: BeneficiaryRepository,
        cancellation_repo: CancellationRepository,
        vindi_client_factory: Callable[[], VindiAPIClient],
        command_bus: CommandBus,
        dispatcher: EventDispatcher,
    ) -> None:
        self.beneficiary_repo = beneficiary_repo
        self.cancellation_repo = cancellation_repo
        self.vindi_client_factory = vindi_client_factory
        self.command_bus = command_bus
        self.dispatcher = dispatcher

    def _cancel_gateway(self, vindi_subscription_id: int | None) -> bool:
        if not vindi_subscription_id:
            return False
        try:
            self.vindi_client_factory().cancel_subscription(vindi_subscription_id)
            return True
        except Exception as exc:
            logger.warning(
                "cancellation.gateway_failed", vindi_subscription_id=vindi_subscription_id, error=str(exc)
            )
            return False

    def _notify_registry(self, beneficiary_id: str) -> bool:
        try:
            self.command_bus.dispatch(NotifyRegistryCancellationCommand(beneficiary_id=beneficiary_id))
            return True
        except Exception as exc:
            logger.warning("cancellation.registry_failed", beneficiary_id=beneficiary_id, error=str(exc))
            return False

    def handle(self, command: CancelBeneficiaryCommand) -> dict[str, Any]:
        if not command.reason or not command.reason.strip():
            raise ValidationError("Motivo do cancelamento é obrigatório", field="reason")

        with transaction.atomic():
            ben = self.beneficiary_repo.lock(command.beneficiary_id)
            if command.scope_unit_id and str(ben.unit_id) != str(command.scope_unit_id):
                raise PermissionDeniedError("Beneficiário fora da unidade do usuário")
            if ben.is_inactive:
                raise BusinessRuleError("Beneficiário já está cancelado", beneficiary_id=str(ben.id))

            cancellation = self.cancellation_repo.add(
                CancellationEntity(
                    id=uuid.uuid4(),
                    beneficiary_id=ben.id,
                    reason=command.reason.strip(),
                    user_id=uuid.UUID(command.user_id) if command.user_id else None,
                    notes=command.notes,
                    cancelled_at=timezone.now(),
                )
            )
            # independe de payment_status
            self.beneficiary_repo.update_fields(str(ben.id), status=BeneficiaryStatus.INACTIVE)

        logger.info("cancellation.done", beneficiary_id=str(ben.id), cancellation_id=str(cancellation.id))
        gateway_cancelled = self._cancel_gateway(ben.vindi_subscription_id)
        registry_notified = self._notify_registry(str(ben.id))

        self.dispatcher.dispatch(
            BeneficiaryCancelledEvent(
                beneficiary_id=ben.id,
                cancellation_id=cancellation.id,
                user_id=cancellation.user_id,
                reason=cancellation.reason,
            )
        )
        return {
            "beneficiary_id": str(ben.id),
            "cancellation_id": str(cancellation.id),
            "status": BeneficiaryStatus.INACTIVE,
            "gateway_cancelled": gateway_cancelled,
            "registry_notified": registry_notified,
        }
