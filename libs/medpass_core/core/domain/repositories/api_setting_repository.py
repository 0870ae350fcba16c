from __future__ import annotations

from abc import ABC, abstractmethod


class ApiSettingRepository(ABC):
    @abstractmethod
    def get(self, name: str) -> str | None:
        ...

    @abstractmethod
    def get_many(self, names: list[str]) -> dict[str, str]:
        ...

    @abstractmethod
    def set(self, name: str, value: str) -> None:
        ...
