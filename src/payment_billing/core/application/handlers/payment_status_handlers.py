from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from django.db import transaction

from medpass_core.core.application.cqrs import CommandHandler
from medpass_core.core.domain.entities.transaction_entity import TransactionEntity
from medpass_core.core.domain.repositories.transaction_repository import TransactionRepository
from payment_billing.adapters.api_clients.vindi_api_client import VindiAPIClient
from payment_billing.core.application.commands.payment_commands import RefreshPaymentStatusesCommand
from payment_billing.core.application.services.payment_status_service import PaymentStatusService
from payment_billing.core.domain.events.exceptions import GatewayError

logger = structlog.get_logger(__name__)


class RefreshPaymentStatusesHandler(CommandHandler[RefreshPaymentStatusesCommand]):
    """
    Consulta no gateway as cobranças pendentes/em processamento e aplica o
    status lido. Erro de uma cobrança não interrompe as demais.
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        payment_status_service: PaymentStatusService,
        vindi_client_factory: Callable[[], VindiAPIClient],
    ) -> None:
        self.transaction_repo = transaction_repo
        self.payments = payment_status_service
        self.vindi_client_factory = vindi_client_factory

    def _refresh_one(self, vindi: VindiAPIClient, tx: TransactionEntity) -> dict[str, Any]:
        try:
            charge = vindi.get_charge(tx.vindi_charge_id)
        except GatewayError as exc:
            logger.warning("refresh.charge_fetch_failed", transaction_id=str(tx.id), error=exc.message)
            return {"transaction_id": str(tx.id), "status": "error", "error": exc.message}

        with transaction.atomic():
            applied = self.payments.apply_charge_status(
                str(tx.id),
                str(tx.beneficiary_id) if tx.beneficiary_id else None,
                charge.status,
                vindi_subscription_id=tx.vindi_subscription_id,
                vindi_bill_id=tx.vindi_bill_id,
                gateway_response=charge.model_dump(mode="json"),
            )

        return {
            "transaction_id": str(tx.id),
            "charge_status": charge.status,
            "status": "updated" if applied and applied[0] != tx.status else "unchanged",
        }

    def handle(self, command: RefreshPaymentStatusesCommand) -> dict[str, Any]:
        pending = self.transaction_repo.list_refreshable(command.limit)
        if not pending:
            return {"checked": 0, "updated": 0, "errors": 0, "results": []}

        vindi = self.vindi_client_factory()
        results: list[dict[str, Any]] = []
        for tx in pending:
            try:
                results.append(self._refresh_one(vindi, tx))
            except Exception as exc:
                # resposta malformada do gateway, registro sumido etc.
                logger.warning("refresh.charge_failed", transaction_id=str(tx.id), error=str(exc))
                results.append({"transaction_id": str(tx.id), "status": "error", "error": str(exc)})

        updated = sum(1 for r in results if r["status"] == "updated")
        errors = sum(1 for r in results if r["status"] == "error")
        logger.info("refresh.done", checked=len(results), updated=updated, errors=errors)
        return {"checked": len(results), "updated": updated, "errors": errors, "results": results}
