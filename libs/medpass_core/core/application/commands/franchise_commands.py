from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from medpass_core.core.application.dtos.network_dtos import FranchiseDTO, FranchiseUpdateDTO


@dataclass(frozen=True)
class CreateFranchiseCommand(CommandDTO):
    payload: FranchiseDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class UpdateFranchiseCommand(CommandDTO):
    id: str
    payload: FranchiseUpdateDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class DeleteFranchiseCommand(CommandDTO):
    id: str
    scope_unit_id: str | None = None
