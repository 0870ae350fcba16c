from dataclasses import dataclass

from medpass_core.core.application.cqrs import QueryDTO


@dataclass(frozen=True)
class GetUserQuery(QueryDTO[dict]):
    """filtros: {"id": ...}"""
