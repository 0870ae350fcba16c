from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.domain.entities.webhook_event_entity import WebhookEventEntity


class WebhookEventRepository(ABC):
    @abstractmethod
    def get_or_create_locked(self, event_id: str, event_type: str, source: str, event_data: dict) -> tuple[WebhookEventEntity, bool]:
        """
        Registra o evento (append-only) e devolve a linha travada com
        SELECT ... FOR UPDATE. Deve ser chamado dentro de uma transação.
        """
        ...

    @abstractmethod
    def mark_processed(self, event_id: str) -> None:
        ...

    @abstractmethod
    def mark_failed(self, event_id: str, error_message: str) -> None:
        ...

    @abstractmethod
    def list_pending(self, limit: int, event_type: str | None = None) -> list[WebhookEventEntity]:
        """Eventos não processados (inclui os que falharam)."""
        ...
