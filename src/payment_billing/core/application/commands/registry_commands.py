from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO


@dataclass(frozen=True)
class NotifyRegistryAdhesionCommand(CommandDTO):
    beneficiary_id: str
    codigo_externo: str | None = None
    beneficiary_type: int = 1
    holder_cpf: str | None = None


@dataclass(frozen=True)
class NotifyRegistryCancellationCommand(CommandDTO):
    beneficiary_id: str


@dataclass(frozen=True)
class RetryRegistryAdhesionsCommand(CommandDTO):
    max_retries: int = 5
