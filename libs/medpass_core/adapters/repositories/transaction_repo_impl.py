from __future__ import annotations

from medpass_core.adapters.repositories._orm import model_defaults
from medpass_core.core.domain.entities.transaction_entity import (
    TransactionEntity,
    TransactionStatus,
)
from medpass_core.core.domain.repositories.transaction_repository import TransactionRepository
from plugins.django_interface.models import Transaction as TransactionModel


class TransactionRepoImpl(TransactionRepository):
    def save(self, entity: TransactionEntity) -> TransactionEntity:
        m, _ = TransactionModel.objects.update_or_create(id=entity.id, defaults=model_defaults(entity))
        return TransactionEntity.from_model(m)

    def find_latest_for_subscription(self, vindi_subscription_id: int) -> TransactionEntity | None:
        m = (
            TransactionModel.objects.filter(vindi_subscription_id=vindi_subscription_id)
            .order_by("-created_at")
            .first()
        )
        return TransactionEntity.from_model(m) if m else None

    def find_by_bill(self, vindi_bill_id: int) -> TransactionEntity | None:
        m = TransactionModel.objects.filter(vindi_bill_id=vindi_bill_id).first()
        return TransactionEntity.from_model(m) if m else None

    def list_refreshable(self, limit: int) -> list[TransactionEntity]:
        qs = (
            TransactionModel.objects.filter(
                status__in=[TransactionStatus.PENDING, TransactionStatus.PROCESSING],
                vindi_charge_id__isnull=False,
            )
            .order_by("created_at")[:limit]
        )
        return [TransactionEntity.from_model(m) for m in qs]

    def set_status(self, transaction_id: str, status: str, gateway_response: dict | None = None) -> None:
        fields: dict = {"status": status}
        if gateway_response is not None:
            fields["gateway_response"] = gateway_response
        TransactionModel.objects.filter(id=transaction_id).update(**fields)
