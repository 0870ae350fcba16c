"""
Transições de status de pagamento compartilhadas por webhook, checkout e
atualização periódica.

Todos os métodos esperam estar dentro de `transaction.atomic()`: o
beneficiário é lido com `lock()` e os eventos só são publicados no
`on_commit`, de modo que um rollback nunca dispara o registro externo.
"""
from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any

import structlog
from django.db import transaction
from django.utils import timezone

from medpass_core.core.domain.entities.beneficiary_entity import (
    BeneficiaryEntity,
    BeneficiaryStatus,
    PaymentStatus,
)
from medpass_core.core.domain.entities.commission_entity import CommissionEntity
from medpass_core.core.domain.entities.transaction_entity import TransactionStatus
from medpass_core.core.domain.events.events import PaymentConfirmedEvent, PaymentFailedEvent
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.commission_repository import CommissionRepository
from medpass_core.core.domain.repositories.plan_repository import PlanRepository
from medpass_core.core.domain.repositories.subscription_repository import SubscriptionRepository
from medpass_core.core.domain.repositories.transaction_repository import TransactionRepository
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher

logger = structlog.get_logger(__name__)

# status da cobrança no gateway → (transaction.status, beneficiary.payment_status)
CHARGE_STATUS_MAP: dict[str, tuple[str, str]] = {
    "paid":       (TransactionStatus.PAID, PaymentStatus.PAID),
    "canceled":   (TransactionStatus.FAILED, PaymentStatus.FAILED),
    "rejected":   (TransactionStatus.FAILED, PaymentStatus.FAILED),
    "pending":    (TransactionStatus.PENDING, PaymentStatus.PAYMENT_REQUESTED),
    "processing": (TransactionStatus.PROCESSING, PaymentStatus.PROCESSING),
}


class PaymentStatusService:
    def __init__(  # noqa: PLR0913
        self,
        beneficiary_repo: BeneficiaryRepository,
        transaction_repo: TransactionRepository,
        subscription_repo: SubscriptionRepository,
        commission_repo: CommissionRepository,
        plan_repo: PlanRepository,
        dispatcher: EventDispatcher,
    ) -> None:
        self.beneficiary_repo = beneficiary_repo
        self.transaction_repo = transaction_repo
        self.subscription_repo = subscription_repo
        self.commission_repo = commission_repo
        self.plan_repo = plan_repo
        self.dispatcher = dispatcher

    # ───────────────────────── resolução ─────────────────────────
    def _resolve_beneficiary(
        self, vindi_subscription_id: int | None, vindi_bill_id: int | None
    ) -> BeneficiaryEntity | None:
        tx = self.transaction_repo.find_by_bill(vindi_bill_id) if vindi_bill_id else None
        if tx is None and vindi_subscription_id:
            tx = self.transaction_repo.find_latest_for_subscription(vindi_subscription_id)

        ben = None
        if vindi_subscription_id:
            ben = self.beneficiary_repo.find_by_vindi_subscription(vindi_subscription_id)
        if ben is None and tx is not None and tx.beneficiary_id:
            ben = self.beneficiary_repo.find_by_id(str(tx.beneficiary_id))
        return ben

    def _set_transaction(
        self,
        vindi_subscription_id: int | None,
        vindi_bill_id: int | None,
        status: str,
        gateway_response: dict[str, Any] | None,
    ) -> None:
        tx = self.transaction_repo.find_by_bill(vindi_bill_id) if vindi_bill_id else None
        if tx is None and vindi_subscription_id:
            tx = self.transaction_repo.find_latest_for_subscription(vindi_subscription_id)
        if tx is not None:
            self.transaction_repo.set_status(str(tx.id), status, gateway_response)

    # ───────────────────────── confirmação ─────────────────────────
    def confirm_payment(
        self,
        *,
        vindi_subscription_id: int | None,
        vindi_bill_id: int | None = None,
        amount: Decimal | None = None,
        gateway_response: dict[str, Any] | None = None,
    ) -> BeneficiaryEntity | None:
        """
        Marca o pagamento como confirmado. Reaplicar é inócuo: se o
        beneficiário já está `paid`, nada muda e nenhum evento sai.
        """
        self._set_transaction(vindi_subscription_id, vindi_bill_id, TransactionStatus.PAID, gateway_response)

        found = self._resolve_beneficiary(vindi_subscription_id, vindi_bill_id)
        if found is None:
            logger.warning(
                "payment.beneficiary_not_found",
                vindi_subscription_id=vindi_subscription_id,
                vindi_bill_id=vindi_bill_id,
            )
            return None

        ben = self.beneficiary_repo.lock(str(found.id))
        if ben.payment_status == PaymentStatus.PAID:
            logger.info("payment.already_confirmed", beneficiary_id=str(ben.id))
            return ben

        fields: dict[str, Any] = {"payment_status": PaymentStatus.PAID}
        if not ben.is_inactive:
            fields["status"] = BeneficiaryStatus.PAYMENT_CONFIRMED
        ben = self.beneficiary_repo.update_fields(str(ben.id), **fields)

        if vindi_subscription_id:
            sub = self.subscription_repo.find_by_vindi_id(vindi_subscription_id)
            if sub is not None:
                self.subscription_repo.set_status(str(sub.id), "active")

        self._generate_adhesion_commission(ben, amount)

        if ben.is_inactive:
            # pagamento tardio de cancelado: sem evento, logo sem adesão no RMS
            logger.warning("payment.confirmed_for_inactive", beneficiary_id=str(ben.id), vindi_bill_id=vindi_bill_id)
            return ben

        event = PaymentConfirmedEvent(
            beneficiary_id=ben.id,
            vindi_subscription_id=vindi_subscription_id,
            vindi_bill_id=vindi_bill_id,
            amount=amount,
        )
        transaction.on_commit(lambda: self.dispatcher.dispatch(event))
        logger.info("payment.confirmed", beneficiary_id=str(ben.id), vindi_bill_id=vindi_bill_id)
        return ben

    def _generate_adhesion_commission(self, ben: BeneficiaryEntity, amount: Decimal | None) -> None:
        if ben.unit_id is None:
            logger.info("commission.skipped_no_unit", beneficiary_id=str(ben.id))
            return
        plan = self.plan_repo.find_by_id(str(ben.plan_id))
        if plan is None or not plan.adhesion_commission_percent:
            return

        base = amount if amount is not None else (ben.plan_value or plan.price)
        percent = Decimal(plan.adhesion_commission_percent)
        commission = self.commission_repo.save(
            CommissionEntity(
                id=uuid.uuid4(),
                beneficiary_id=ben.id,
                unit_id=ben.unit_id,
                user_id=ben.user_id,
                reference_month=timezone.localdate().replace(day=1),
                amount=CommissionEntity.compute_amount(base, percent),
                percent=percent,
                commission_type="adesao",
            )
        )
        logger.info("commission.generated", commission_id=str(commission.id), amount=str(commission.amount))

    # ───────────────────────── falha / cancelamento ─────────────────────────
    def fail_payment(
        self,
        *,
        vindi_subscription_id: int | None,
        vindi_bill_id: int | None = None,
        reason: str = "",
        gateway_response: dict[str, Any] | None = None,
    ) -> BeneficiaryEntity | None:
        self._set_transaction(vindi_subscription_id, vindi_bill_id, TransactionStatus.FAILED, gateway_response)

        found = self._resolve_beneficiary(vindi_subscription_id, vindi_bill_id)
        if found is None:
            return None
        ben = self.beneficiary_repo.lock(str(found.id))
        if ben.payment_status == PaymentStatus.PAID:
            # cobrança antiga recusada não desfaz pagamento já confirmado
            logger.info("payment.fail_ignored_already_paid", beneficiary_id=str(ben.id))
            return ben

        ben = self.beneficiary_repo.update_fields(str(ben.id), payment_status=PaymentStatus.FAILED)
        event = PaymentFailedEvent(beneficiary_id=ben.id, vindi_bill_id=vindi_bill_id, reason=reason)
        transaction.on_commit(lambda: self.dispatcher.dispatch(event))
        logger.info("payment.failed", beneficiary_id=str(ben.id), reason=reason)
        return ben

    def cancel_subscription(self, vindi_subscription_id: int) -> BeneficiaryEntity | None:
        sub = self.subscription_repo.find_by_vindi_id(vindi_subscription_id)
        if sub is not None:
            self.subscription_repo.set_status(str(sub.id), "canceled")
        ben = self.beneficiary_repo.find_by_vindi_subscription(vindi_subscription_id)
        if ben is None:
            return None
        return self.beneficiary_repo.update_fields(str(ben.id), payment_status=PaymentStatus.CANCELED)

    # ───────────────────────── sincronização com a cobrança ─────────────────────────
    def apply_charge_status(
        self,
        transaction_id: str,
        beneficiary_id: str | None,
        charge_status: str,
        *,
        vindi_subscription_id: int | None = None,
        vindi_bill_id: int | None = None,
        gateway_response: dict[str, Any] | None = None,
    ) -> tuple[str, str] | None:
        """
        Aplica o status lido do gateway. `paid` segue o mesmo caminho de
        confirmação do webhook. Devolve o par aplicado ou None se desconhecido.
        """
        mapped = CHARGE_STATUS_MAP.get(charge_status)
        if mapped is None:
            logger.info("payment.unknown_charge_status", status=charge_status, transaction_id=transaction_id)
            return None
        tx_status, pay_status = mapped

        if tx_status == TransactionStatus.PAID:
            self.confirm_payment(
                vindi_subscription_id=vindi_subscription_id,
                vindi_bill_id=vindi_bill_id,
                gateway_response=gateway_response,
            )
            self.transaction_repo.set_status(transaction_id, tx_status, gateway_response)
            return mapped

        self.transaction_repo.set_status(transaction_id, tx_status, gateway_response)
        if tx_status == TransactionStatus.FAILED:
            self.fail_payment(
                vindi_subscription_id=vindi_subscription_id,
                vindi_bill_id=vindi_bill_id,
                reason=f"charge {charge_status}",
                gateway_response=gateway_response,
            )
        elif beneficiary_id:
            ben = self.beneficiary_repo.find_by_id(beneficiary_id)
            if ben is not None and ben.payment_status != PaymentStatus.PAID:
                self.beneficiary_repo.update_fields(beneficiary_id, payment_status=pay_status)
        return mapped
