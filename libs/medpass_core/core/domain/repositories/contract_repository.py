from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.contract_entity import ContractEntity


class ContractRepository(ABC):
    @abstractmethod
    def find_by_id(self, contract_id: str) -> ContractEntity | None:
        ...

    @abstractmethod
    def find_by_document_id(self, document_id: str) -> ContractEntity | None:
        ...

    @abstractmethod
    def save(self, entity: ContractEntity) -> ContractEntity:
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[ContractEntity]:
        ...
