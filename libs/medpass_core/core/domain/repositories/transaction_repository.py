from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.domain.entities.transaction_entity import TransactionEntity


class TransactionRepository(ABC):
    @abstractmethod
    def save(self, entity: TransactionEntity) -> TransactionEntity:
        ...

    @abstractmethod
    def find_latest_for_subscription(self, vindi_subscription_id: int) -> TransactionEntity | None:
        ...

    @abstractmethod
    def find_by_bill(self, vindi_bill_id: int) -> TransactionEntity | None:
        ...

    @abstractmethod
    def list_refreshable(self, limit: int) -> list[TransactionEntity]:
        """Transações pendentes/em processamento com charge conhecida."""
        ...

    @abstractmethod
    def set_status(self, transaction_id: str, status: str, gateway_response: dict | None = None) -> None:
        ...
