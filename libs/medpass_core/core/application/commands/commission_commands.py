from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from medpass_core.core.application.dtos.commission_dto import CommissionDTO, CommissionUpdateDTO


@dataclass(frozen=True)
class CreateCommissionCommand(CommandDTO):
    payload: CommissionDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class UpdateCommissionCommand(CommandDTO):
    id: str
    payload: CommissionUpdateDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class DeleteCommissionCommand(CommandDTO):
    id: str
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class MarkCommissionPaidCommand(CommandDTO):
    """Somente a matriz marca comissões como pagas."""
    id: str
    requester_role: str
