from pydantic import BaseModel


class NotificationDTO(BaseModel):
    user_id: str
    title: str
    message: str
    kind: str = "info"
    action_url: str | None = None
    action_label: str | None = None


class NotificationUpdateDTO(BaseModel):
    read: bool | None = None
    title: str | None = None
    message: str | None = None
