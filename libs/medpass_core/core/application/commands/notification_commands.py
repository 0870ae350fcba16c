from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from medpass_core.core.application.dtos.notification_dto import NotificationDTO, NotificationUpdateDTO


@dataclass(frozen=True)
class CreateNotificationCommand(CommandDTO):
    payload: NotificationDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class UpdateNotificationCommand(CommandDTO):
    id: str
    payload: NotificationUpdateDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class DeleteNotificationCommand(CommandDTO):
    id: str
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class MarkNotificationReadCommand(CommandDTO):
    id: str
    user_id: str


@dataclass(frozen=True)
class MarkAllNotificationsReadCommand(CommandDTO):
    user_id: str
