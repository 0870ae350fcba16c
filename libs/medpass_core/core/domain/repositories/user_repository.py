from __future__ import annotations

from abc import ABC, abstractmethod

from medpass_core.core.domain.entities.user_entity import UserEntity


class UserRepository(ABC):
    @abstractmethod
    def find_by_id(self, user_id: str) -> UserEntity | None:
        ...

    @abstractmethod
    def find_by_email(self, email: str) -> UserEntity | None:
        ...

    @abstractmethod
    def list_headquarters(self) -> list[UserEntity]:
        """Usuários com papel matriz (destinatários de alertas globais)."""
        ...

    @abstractmethod
    def save(self, user: UserEntity) -> UserEntity:
        ...
