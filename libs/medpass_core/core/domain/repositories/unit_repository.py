from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.unit_entity import UnitEntity


class UnitRepository(ABC):
    @abstractmethod
    def find_by_id(self, unit_id: str) -> UnitEntity | None:
        """Retorna o registro pelo ID interno."""
        ...

    @abstractmethod
    def save(self, entity: UnitEntity) -> UnitEntity:
        """Cria ou atualiza o registro."""
        ...

    @abstractmethod
    def deactivate(self, unit_id: str) -> None:
        """Soft-delete: marca o registro como inativo."""
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[UnitEntity]:
        """
        Retorna PagedResult aplicando filtros e paginação (page 1-based).
        """
        ...
