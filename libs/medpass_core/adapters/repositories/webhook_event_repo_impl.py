from __future__ import annotations

from django.utils import timezone

from medpass_core.core.domain.entities.webhook_event_entity import WebhookEventEntity
from medpass_core.core.domain.repositories.webhook_event_repository import WebhookEventRepository
from plugins.django_interface.models import WebhookEvent as WebhookEventModel


class WebhookEventRepoImpl(WebhookEventRepository):
    def get_or_create_locked(
        self, event_id: str, event_type: str, source: str, event_data: dict
    ) -> tuple[WebhookEventEntity, bool]:
        _, created = WebhookEventModel.objects.get_or_create(
            event_id=event_id,
            defaults={"event_type": event_type, "source": source, "event_data": event_data},
        )
        m = WebhookEventModel.objects.select_for_update().get(event_id=event_id)
        return WebhookEventEntity.from_model(m), created

    def mark_processed(self, event_id: str) -> None:
        WebhookEventModel.objects.filter(event_id=event_id).update(
            processed=True, processed_at=timezone.now(), error_message=None
        )

    def mark_failed(self, event_id: str, error_message: str) -> None:
        WebhookEventModel.objects.filter(event_id=event_id).update(
            processed=False, error_message=error_message[:2000]
        )

    def list_pending(self, limit: int, event_type: str | None = None) -> list[WebhookEventEntity]:
        qs = WebhookEventModel.objects.filter(processed=False)
        if event_type:
            qs = qs.filter(event_type=event_type)
        return [WebhookEventEntity.from_model(m) for m in qs.order_by("created_at")[:limit]]
