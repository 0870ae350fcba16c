from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO


@dataclass(frozen=True)
class CancelBeneficiaryCommand(CommandDTO):
    beneficiary_id: str
    reason: str
    user_id: str | None = None
    notes: str | None = None
    scope_unit_id: str | None = None
