from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.beneficiary_entity import BeneficiaryEntity


class BeneficiaryRepository(ABC):
    @abstractmethod
    def find_by_id(self, beneficiary_id: str) -> BeneficiaryEntity | None:
        """Retorna um beneficiário pelo ID interno."""
        ...

    @abstractmethod
    def find_by_cpf(self, cpf: str) -> BeneficiaryEntity | None:
        """Busca pelo CPF (apenas dígitos)."""
        ...

    @abstractmethod
    def find_by_vindi_subscription(self, vindi_subscription_id: int) -> BeneficiaryEntity | None:
        ...

    @abstractmethod
    def find_by_document_id(self, document_id: str) -> BeneficiaryEntity | None:
        """Beneficiário dono de um documento de assinatura eletrônica."""
        ...

    @abstractmethod
    def lock(self, beneficiary_id: str) -> BeneficiaryEntity:
        """
        Lê o beneficiário com SELECT ... FOR UPDATE.
        Deve ser chamado dentro de uma transação.
        """
        ...

    @abstractmethod
    def save(self, entity: BeneficiaryEntity) -> BeneficiaryEntity:
        """Cria ou atualiza um beneficiário."""
        ...

    @abstractmethod
    def update_fields(self, beneficiary_id: str, **fields) -> BeneficiaryEntity:
        """Atualização parcial (somente os campos informados)."""
        ...

    @abstractmethod
    def increment_registry_retry(self, beneficiary_id: str, **fields) -> None:
        """Incrementa `registry_retry_count` atomicamente e grava os campos extras."""
        ...

    @abstractmethod
    def deactivate(self, beneficiary_id: str) -> None:
        ...

    @abstractmethod
    def list_registry_failed(self, max_retries: int) -> list[BeneficiaryEntity]:
        """Beneficiários com falha no RMS ainda elegíveis a nova tentativa."""
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[BeneficiaryEntity]:
        ...
