from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.plan_entity import PlanEntity


class PlanRepository(ABC):
    @abstractmethod
    def find_by_id(self, plan_id: str) -> PlanEntity | None:
        """Retorna o registro pelo ID interno."""
        ...

    @abstractmethod
    def save(self, entity: PlanEntity) -> PlanEntity:
        """Cria ou atualiza o registro."""
        ...

    @abstractmethod
    def deactivate(self, plan_id: str) -> None:
        """Soft-delete: marca o registro como inativo."""
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[PlanEntity]:
        """
        Retorna PagedResult aplicando filtros e paginação (page 1-based).
        """
        ...

    @abstractmethod
    def list_active(self) -> list[PlanEntity]:
        """Planos ativos disponíveis para checkout."""
        ...
