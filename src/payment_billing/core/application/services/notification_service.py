from __future__ import annotations

import uuid

import structlog

from medpass_core.core.domain.entities.notification_entity import NotificationEntity
from medpass_core.core.domain.events.events import (
    BeneficiaryCancelledEvent,
    ContractSignedEvent,
    PaymentConfirmedEvent,
    RegistryAdhesionFailedEvent,
)
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.notification_repository import NotificationRepository
from medpass_core.core.domain.repositories.unit_repository import UnitRepository
from medpass_core.core.domain.repositories.user_repository import UserRepository
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher

logger = structlog.get_logger(__name__)


class InAppNotificationService:
    """
    Assinante dos eventos de domínio que cria notificações in-app para o
    operador da unidade (e para a matriz, em falhas de registro).
    """

    def __init__(
        self,
        notification_repo: NotificationRepository,
        beneficiary_repo: BeneficiaryRepository,
        unit_repo: UnitRepository,
        user_repo: UserRepository,
    ) -> None:
        self.notification_repo = notification_repo
        self.beneficiary_repo = beneficiary_repo
        self.unit_repo = unit_repo
        self.user_repo = user_repo

    def subscribe(self, dispatcher: EventDispatcher) -> None:
        dispatcher.subscribe(PaymentConfirmedEvent, self.on_payment_confirmed)
        dispatcher.subscribe(RegistryAdhesionFailedEvent, self.on_registry_failed)
        dispatcher.subscribe(ContractSignedEvent, self.on_contract_signed)
        dispatcher.subscribe(BeneficiaryCancelledEvent, self.on_beneficiary_cancelled)

    # ───────────────────────── destinatários ─────────────────────────
    def _operator_ids(self, beneficiary_id) -> tuple[object | None, set[uuid.UUID]]:
        ben = self.beneficiary_repo.find_by_id(str(beneficiary_id))
        if ben is None:
            return None, set()
        recipients: set[uuid.UUID] = set()
        if ben.unit_id:
            unit = self.unit_repo.find_by_id(str(ben.unit_id))
            if unit and unit.user_id:
                recipients.add(unit.user_id)
        if not recipients and ben.user_id:
            recipients.add(ben.user_id)
        return ben, recipients

    def _notify(self, user_ids, *, title: str, message: str, kind: str, action_url: str | None = None) -> int:
        for user_id in user_ids:
            self.notification_repo.save(
                NotificationEntity(
                    id=uuid.uuid4(),
                    user_id=user_id,
                    title=title,
                    message=message,
                    kind=kind,
                    action_url=action_url,
                    action_label="Ver beneficiário" if action_url else None,
                )
            )
        logger.debug("notification.created", title=title, recipients=len(user_ids))
        return len(user_ids)

    # ───────────────────────── handlers ─────────────────────────
    def on_payment_confirmed(self, event: PaymentConfirmedEvent) -> None:
        ben, users = self._operator_ids(event.beneficiary_id)
        if ben is None:
            return
        self._notify(
            users,
            title="Pagamento confirmado",
            message=f"O pagamento de {ben.name} foi confirmado.",
            kind="success",
            action_url=f"/beneficiarios/{ben.id}",
        )

    def on_registry_failed(self, event: RegistryAdhesionFailedEvent) -> None:
        ben, users = self._operator_ids(event.beneficiary_id)
        if ben is None:
            return
        users |= {u.id for u in self.user_repo.list_headquarters()}
        self._notify(
            users,
            title="Falha no envio ao RMS",
            message=f"Adesão de {ben.name} falhou (tentativa {event.retry_count}): {event.error}",
            kind="error",
            action_url=f"/beneficiarios/{ben.id}",
        )

    def on_contract_signed(self, event: ContractSignedEvent) -> None:
        ben, users = self._operator_ids(event.beneficiary_id)
        if ben is None:
            return
        self._notify(users, title="Contrato assinado", message=f"{ben.name} assinou o contrato.", kind="info")

    def on_beneficiary_cancelled(self, event: BeneficiaryCancelledEvent) -> None:
        ben, users = self._operator_ids(event.beneficiary_id)
        if ben is None:
            return
        self._notify(
            users,
            title="Adesão cancelada",
            message=f"A adesão de {ben.name} foi cancelada. Motivo: {event.reason}",
            kind="warning",
        )
