from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from medpass_core.core.application.dtos.plan_dto import PlanDTO, PlanUpdateDTO


@dataclass(frozen=True)
class CreatePlanCommand(CommandDTO):
    payload: PlanDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class UpdatePlanCommand(CommandDTO):
    id: str
    payload: PlanUpdateDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class DeletePlanCommand(CommandDTO):
    id: str
    scope_unit_id: str | None = None
