from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from payment_billing.core.application.dtos.checkout_dto import CardDataDTO, CheckoutDTO


@dataclass(frozen=True)
class ProcessCheckoutCommand(CommandDTO):
    payload: CheckoutDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class TokenizeCardCommand(CommandDTO):
    card: CardDataDTO


@dataclass(frozen=True)
class RefreshPaymentStatusesCommand(CommandDTO):
    """Consulta no gateway as cobranças ainda pendentes."""
    limit: int = 100
