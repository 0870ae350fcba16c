from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.notification_entity import NotificationEntity


class NotificationRepository(ABC):
    @abstractmethod
    def find_by_id(self, notification_id: str) -> NotificationEntity | None:
        ...

    @abstractmethod
    def save(self, entity: NotificationEntity) -> NotificationEntity:
        ...

    @abstractmethod
    def mark_read(self, notification_id: str) -> None:
        ...

    @abstractmethod
    def mark_all_read(self, user_id: str) -> int:
        """Retorna a quantidade de notificações alteradas."""
        ...

    @abstractmethod
    def delete(self, notification_id: str) -> None:
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[NotificationEntity]:
        ...
