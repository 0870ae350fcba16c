from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.domain.entities.integration_log_entity import IntegrationLogEntity


class IntegrationLogRepository(ABC):
    @abstractmethod
    def add(self, entry: IntegrationLogEntity) -> IntegrationLogEntity:
        ...

    @abstractmethod
    def count_for(self, beneficiary_id: str, operation: str) -> int:
        ...
