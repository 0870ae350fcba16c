from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.commission_entity import CommissionEntity


class CommissionRepository(ABC):
    @abstractmethod
    def find_by_id(self, commission_id: str) -> CommissionEntity | None:
        ...

    @abstractmethod
    def save(self, entity: CommissionEntity) -> CommissionEntity:
        """
        Cria ou atualiza. A chave natural é
        (beneficiary_id, reference_month, commission_type).
        """
        ...

    @abstractmethod
    def mark_paid(self, commission_id: str) -> CommissionEntity:
        ...

    @abstractmethod
    def delete(self, commission_id: str) -> None:
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[CommissionEntity]:
        ...
