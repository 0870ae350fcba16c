from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class QueryRegistryBeneficiariesQuery:
    start: date
    end: date
    offset: int = 0
    cpf: str | None = None
