from dataclasses import dataclass, field
from typing import Any

from medpass_core.core.application.cqrs import CommandDTO


@dataclass(frozen=True)
class IngestGatewayWebhookCommand(CommandDTO):
    body: dict[str, Any]
    event_id: str | None = None
    raw_body: bytes = field(default=b"", repr=False)


@dataclass(frozen=True)
class IngestSignatureWebhookCommand(CommandDTO):
    body: dict[str, Any]


@dataclass(frozen=True)
class ReprocessWebhookEventsCommand(CommandDTO):
    limit: int = 50
    event_type: str | None = None
