from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.franchise_entity import FranchiseEntity


class FranchiseRepository(ABC):
    @abstractmethod
    def find_by_id(self, franchise_id: str) -> FranchiseEntity | None:
        """Retorna o registro pelo ID interno."""
        ...

    @abstractmethod
    def save(self, entity: FranchiseEntity) -> FranchiseEntity:
        """Cria ou atualiza o registro."""
        ...

    @abstractmethod
    def deactivate(self, franchise_id: str) -> None:
        """Soft-delete: marca o registro como inativo."""
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[FranchiseEntity]:
        """
        Retorna PagedResult aplicando filtros e paginação (page 1-based).
        """
        ...
