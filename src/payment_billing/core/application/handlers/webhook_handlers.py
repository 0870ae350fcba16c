from __future__ import annotations

import hashlib
import json
from collections.abc import Callable
from decimal import Decimal
from typing import Any

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from medpass_core.core.application.cqrs import CommandHandler
from medpass_core.core.domain.entities.beneficiary_entity import BeneficiaryEntity, ContractStatus
from medpass_core.core.domain.events.events import ContractSignedEvent
from medpass_core.core.domain.events.exceptions import NotFoundError, ValidationError
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.repositories.contract_repository import ContractRepository
from medpass_core.core.domain.repositories.plan_repository import PlanRepository
from medpass_core.core.domain.repositories.webhook_event_repository import WebhookEventRepository
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher
from payment_billing.adapters.notifiers.base import BaseNotifier
from payment_billing.adapters.observability.metrics import WEBHOOK_EVENTS
from payment_billing.core.application.commands.webhook_commands import (
    IngestGatewayWebhookCommand,
    IngestSignatureWebhookCommand,
    ReprocessWebhookEventsCommand,
)
from payment_billing.core.application.services.document_templates import (
    PAYMENT_EMAIL_SUBJECT,
    render_payment_email,
)
from payment_billing.core.application.services.payment_status_service import PaymentStatusService

logger = structlog.get_logger(__name__)

PAID_EVENTS = {"bill_paid", "charge_paid"}
FAILED_EVENTS = {"charge_rejected", "bill_canceled"}
CANCELED_EVENTS = {"subscription_canceled"}

SIGNED_EVENTS = {"document.finished", "signature.accepted"}
REFUSED_EVENTS = {"signature.rejected"}


def derive_event_id(body: dict[str, Any], header_id: str | None = None, raw_body: bytes = b"") -> str:
    """Header → `event.id` → sha256 do corpo (determinístico)."""
    if header_id:
        return str(header_id)
    event = body.get("event") or {}
    if event.get("id"):
        return str(event["id"])
    raw = raw_body or json.dumps(body, sort_keys=True, separators=(",", ":")).encode()
    return "sha256:" + hashlib.sha256(raw).hexdigest()


def _gateway_ids(data: dict[str, Any]) -> tuple[int | None, int | None, Decimal | None]:
    """(vindi_subscription_id, vindi_bill_id, amount) a partir de `event.data`."""
    bill = data.get("bill") or {}
    charge = data.get("charge") or {}
    subscription = data.get("subscription") or {}

    bill_id = bill.get("id") or (charge.get("bill") or {}).get("id")
    sub_id = (
        (bill.get("subscription") or {}).get("id")
        or subscription.get("id")
        or (charge.get("subscription") or {}).get("id")
    )
    raw_amount = bill.get("amount") or charge.get("amount")
    amount = Decimal(str(raw_amount)) if raw_amount is not None else None
    return (int(sub_id) if sub_id else None), (int(bill_id) if bill_id else None), amount


# ╭──────────────────────────────────────────────╮
# │ 1. Webhook do gateway                        │
# ╰──────────────────────────────────────────────╯
class GatewayEventApplier:
    """Aplica um evento do gateway. Compartilhado por ingestão e reprocessamento."""

    def __init__(self, payment_status_service: PaymentStatusService) -> None:
        self.payments = payment_status_service

    def apply(self, event_type: str, data: dict[str, Any]) -> str:
        sub_id, bill_id, amount = _gateway_ids(data)

        if event_type in PAID_EVENTS:
            self.payments.confirm_payment(
                vindi_subscription_id=sub_id, vindi_bill_id=bill_id, amount=amount, gateway_response=data,
            )
            return "payment_confirmed"
        if event_type in FAILED_EVENTS:
            self.payments.fail_payment(
                vindi_subscription_id=sub_id, vindi_bill_id=bill_id, reason=event_type, gateway_response=data,
            )
            return "payment_failed"
        if event_type in CANCELED_EVENTS and sub_id:
            self.payments.cancel_subscription(sub_id)
            return "subscription_canceled"

        logger.info("webhook.ignored_type", event_type=event_type)
        return "ignored"


class IngestGatewayWebhookHandler(CommandHandler[IngestGatewayWebhookCommand]):
    """
    Idempotência: a linha do evento é criada/travada na mesma transação em
    que os efeitos são aplicados. Evento já processado não reaplica nada.
    """

    def __init__(self, webhook_event_repo: WebhookEventRepository, applier: GatewayEventApplier) -> None:
        self.repo = webhook_event_repo
        self.applier = applier

    def handle(self, command: IngestGatewayWebhookCommand) -> dict[str, Any]:
        event = command.body.get("event") or {}
        event_type = str(event.get("type") or "unknown")
        data = event.get("data") or {}
        event_id = derive_event_id(command.body, command.event_id, command.raw_body)
        log = logger.bind(event_id=event_id, event_type=event_type)

        failure: Exception | None = None
        with transaction.atomic():
            row, created = self.repo.get_or_create_locked(event_id, event_type, "vindi", command.body)
            if row.processed:
                log.info("webhook.duplicate")
                WEBHOOK_EVENTS.labels("vindi", event_type, "duplicate").inc()
                return {"event_id": event_id, "status": "duplicate"}

            try:
                with transaction.atomic():
                    outcome = self.applier.apply(event_type, data)
            except Exception as exc:
                # savepoint desfeito; a linha do evento fica com o erro
                self.repo.mark_failed(event_id, str(exc))
                failure = exc
            else:
                self.repo.mark_processed(event_id)

        if failure is not None:
            log.error("webhook.failed", error=str(failure))
            WEBHOOK_EVENTS.labels("vindi", event_type, "error").inc()
            raise failure

        log.info("webhook.processed", outcome=outcome, first_delivery=created)
        WEBHOOK_EVENTS.labels("vindi", event_type, "processed").inc()
        return {"event_id": event_id, "status": "processed", "outcome": outcome}


class ReprocessWebhookEventsHandler(CommandHandler[ReprocessWebhookEventsCommand]):
    def __init__(self, webhook_event_repo: WebhookEventRepository, applier: GatewayEventApplier) -> None:
        self.repo = webhook_event_repo
        self.applier = applier

    def _reprocess_one(self, event_id: str) -> dict[str, Any]:
        failure: Exception | None = None
        with transaction.atomic():
            row, _ = self.repo.get_or_create_locked(event_id, "unknown", "vindi", {})
            if row.processed:
                return {"event_id": event_id, "status": "skipped", "message": "já processado"}
            event = (row.event_data or {}).get("event") or {}
            event_type = str(event.get("type") or row.event_type)
            try:
                with transaction.atomic():
                    outcome = self.applier.apply(event_type, event.get("data") or {})
            except Exception as exc:
                self.repo.mark_failed(event_id, str(exc))
                failure = exc
            else:
                self.repo.mark_processed(event_id)

        if failure is not None:
            return {"event_id": event_id, "status": "error", "message": str(failure)}
        if outcome == "ignored":
            return {"event_id": event_id, "status": "skipped", "message": f"tipo {event_type} sem efeito"}
        return {"event_id": event_id, "status": "success", "message": outcome}

    def handle(self, command: ReprocessWebhookEventsCommand) -> dict[str, Any]:
        pending = self.repo.list_pending(command.limit, command.event_type)
        results = [self._reprocess_one(evt.event_id) for evt in pending]
        summary = {
            status: sum(1 for r in results if r["status"] == status)
            for status in ("success", "skipped", "error")
        }
        logger.info("webhook.reprocess_done", total=len(results), **summary)
        return {"total": len(results), **summary, "results": results}


# ╭──────────────────────────────────────────────╮
# │ 2. Webhook de assinatura eletrônica          │
# ╰──────────────────────────────────────────────╯
class IngestSignatureWebhookHandler(CommandHandler[IngestSignatureWebhookCommand]):
    def __init__(  # noqa: PLR0913
        self,
        contract_repo: ContractRepository,
        beneficiary_repo: BeneficiaryRepository,
        plan_repo: PlanRepository,
        email_notifier_factory: Callable[[], BaseNotifier],
        dispatcher: EventDispatcher,
    ) -> None:
        self.contract_repo = contract_repo
        self.beneficiary_repo = beneficiary_repo
        self.plan_repo = plan_repo
        self.email_notifier_factory = email_notifier_factory
        self.dispatcher = dispatcher

    @staticmethod
    def _document_id(event_type: str, data: dict[str, Any]) -> str | None:
        if event_type.startswith("signature."):
            doc = data.get("document")
            return doc.get("id") if isinstance(doc, dict) else doc
        return data.get("id")

    def _send_payment_link(self, ben: BeneficiaryEntity) -> None:
        """Falha aqui não desfaz a assinatura; só gera warning."""
        try:
            plan = self.plan_repo.find_by_id(str(ben.plan_id))
            link = ben.checkout_link or f"{settings.PAYMENT_LINK_BASE_URL.rstrip('/')}/{ben.id}"
            self.email_notifier_factory().send(
                [ben.email] if ben.email else [],
                PAYMENT_EMAIL_SUBJECT,
                render_payment_email(ben, plan, link),
            )
        except Exception as exc:
            logger.warning("signature.payment_link_failed", beneficiary_id=str(ben.id), error=str(exc))

    def handle(self, command: IngestSignatureWebhookCommand) -> dict[str, Any]:
        event = command.body.get("event") or {}
        event_type = str(event.get("type") or "")
        data = event.get("data") or {}
        document_id = self._document_id(event_type, data)
        if not event_type or not document_id:
            raise ValidationError("Payload inválido: evento ou documento ausente")

        log = logger.bind(event_type=event_type, document_id=document_id)
        contract = self.contract_repo.find_by_document_id(document_id)
        ben = (
            self.beneficiary_repo.find_by_id(str(contract.beneficiary_id))
            if contract
            else self.beneficiary_repo.find_by_document_id(document_id)
        )
        if ben is None:
            raise NotFoundError("Beneficiário não encontrado", document_id=document_id)

        if event_type in SIGNED_EVENTS:
            now = timezone.now()
            with transaction.atomic():
                if contract is not None:
                    contract.status = "signed"
                    contract.signed_at = now
                    contract.provider_payload = data
                    contract = self.contract_repo.save(contract)
                ben = self.beneficiary_repo.update_fields(
                    str(ben.id), contract_status=ContractStatus.SIGNED, contract_signed_at=now
                )
                evt = ContractSignedEvent(
                    beneficiary_id=ben.id,
                    contract_id=contract.id if contract else None,
                    document_id=document_id,
                )
                transaction.on_commit(lambda: self.dispatcher.dispatch(evt))
            self._send_payment_link(ben)
            log.info("signature.signed", beneficiary_id=str(ben.id))
            WEBHOOK_EVENTS.labels("autentique", event_type, "processed").inc()
            return {"beneficiary_id": str(ben.id), "contract_status": ContractStatus.SIGNED}

        if event_type in REFUSED_EVENTS:
            with transaction.atomic():
                if contract is not None:
                    contract.status = "refused"
                    contract.provider_payload = data
                    self.contract_repo.save(contract)
                self.beneficiary_repo.update_fields(str(ben.id), contract_status=ContractStatus.REFUSED)
            log.info("signature.refused", beneficiary_id=str(ben.id))
            WEBHOOK_EVENTS.labels("autentique", event_type, "processed").inc()
            return {"beneficiary_id": str(ben.id), "contract_status": ContractStatus.REFUSED}

        # signature.viewed e demais: só registro
        log.info("signature.event_logged")
        WEBHOOK_EVENTS.labels("autentique", event_type, "ignored").inc()
        return {"beneficiary_id": str(ben.id), "contract_status": ben.contract_status}
