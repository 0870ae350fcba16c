from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.domain.entities.subscription_entity import SubscriptionEntity


class SubscriptionRepository(ABC):
    @abstractmethod
    def find_by_vindi_id(self, vindi_subscription_id: int) -> SubscriptionEntity | None:
        ...

    @abstractmethod
    def save(self, entity: SubscriptionEntity) -> SubscriptionEntity:
        ...

    @abstractmethod
    def set_status(self, subscription_id: str, status: str) -> None:
        ...
