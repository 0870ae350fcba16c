from __future__ import annotations

from django.db.models import Q

from medpass_core.adapters.repositories._orm import model_defaults, paginate
from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.notification_entity import NotificationEntity
from medpass_core.core.domain.repositories.notification_repository import NotificationRepository
from plugins.django_interface.models import Notification as NotificationModel


class NotificationRepoImpl(NotificationRepository):
    def find_by_id(self, notification_id: str) -> NotificationEntity | None:
        m = NotificationModel.objects.filter(id=notification_id).first()
        return NotificationEntity.from_model(m) if m else None

    def save(self, entity: NotificationEntity) -> NotificationEntity:
        m, _ = NotificationModel.objects.update_or_create(id=entity.id, defaults=model_defaults(entity))
        return NotificationEntity.from_model(m)

    def mark_read(self, notification_id: str) -> None:
        NotificationModel.objects.filter(id=notification_id).update(read=True)

    def mark_all_read(self, user_id: str) -> int:
        return NotificationModel.objects.filter(user_id=user_id, read=False).update(read=True)

    def delete(self, notification_id: str) -> None:
        NotificationModel.objects.filter(id=notification_id).delete()

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[NotificationEntity]:
        filtros = dict(filtros or {})
        # notificações são por usuário, não por unidade
        filtros.pop("unit_id", None)
        search = (filtros.pop("search", "") or "").strip()
        qs = NotificationModel.objects.filter(**filtros)
        if search:
            qs = qs.filter(Q(title__icontains=search) | Q(message__icontains=search))
        return paginate(qs.order_by("-created_at"), NotificationEntity, page, page_size)
