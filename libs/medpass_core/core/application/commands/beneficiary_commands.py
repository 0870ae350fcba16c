from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from medpass_core.core.application.dtos.beneficiary_dto import BeneficiaryDTO, BeneficiaryUpdateDTO


@dataclass(frozen=True)
class CreateBeneficiaryCommand(CommandDTO):
    payload: BeneficiaryDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class UpdateBeneficiaryCommand(CommandDTO):
    id: str
    payload: BeneficiaryUpdateDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class DeleteBeneficiaryCommand(CommandDTO):
    id: str
    scope_unit_id: str | None = None
