from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from medpass_core.core.application.dtos.network_dtos import UnitDTO, UnitUpdateDTO


@dataclass(frozen=True)
class CreateUnitCommand(CommandDTO):
    payload: UnitDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class UpdateUnitCommand(CommandDTO):
    id: str
    payload: UnitUpdateDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class DeleteUnitCommand(CommandDTO):
    id: str
    scope_unit_id: str | None = None
