from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO
from medpass_core.core.application.dtos.contract_dto import ContractDTO, ContractUpdateDTO


@dataclass(frozen=True)
class CreateContractCommand(CommandDTO):
    payload: ContractDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class UpdateContractCommand(CommandDTO):
    id: str
    payload: ContractUpdateDTO
    scope_unit_id: str | None = None


@dataclass(frozen=True)
class DeleteContractCommand(CommandDTO):
    id: str
    scope_unit_id: str | None = None
