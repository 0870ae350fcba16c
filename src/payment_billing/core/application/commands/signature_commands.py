from dataclasses import dataclass

from medpass_core.core.application.cqrs import CommandDTO


@dataclass(frozen=True)
class CreateSignatureContractCommand(CommandDTO):
    """Gera o contrato HTML e envia para assinatura eletrônica."""
    beneficiary_id: str
    scope_unit_id: str | None = None
