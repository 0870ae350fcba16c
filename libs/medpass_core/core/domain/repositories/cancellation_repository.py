from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.domain.entities.cancellation_entity import CancellationEntity


class CancellationRepository(ABC):
    @abstractmethod
    def add(self, entity: CancellationEntity) -> CancellationEntity:
        """Insere um cancelamento (nunca atualiza)."""
        ...

    @abstractmethod
    def list_by_beneficiary(self, beneficiary_id: str) -> list[CancellationEntity]:
        ...
