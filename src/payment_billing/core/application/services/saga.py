from __future__ import annotations

from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)


class CompensationStack:
    """
    Pilha de ações de desfazer para passos remotos de uma saga.

    `rollback()` executa em ordem inversa; falha de uma compensação é
    logada e não impede as demais.
    """

    def __init__(self, saga: str) -> None:
        self.saga = saga
        self._steps: list[tuple[str, Callable[[], None]]] = []

    def push(self, name: str, undo: Callable[[], None]) -> None:
        self._steps.append((name, undo))

    def rollback(self) -> list[str]:
        done: list[str] = []
        while self._steps:
            name, undo = self._steps.pop()
            try:
                undo()
                done.append(name)
                logger.info("saga.compensated", saga=self.saga, step=name)
            except Exception as exc:
                logger.warning("saga.compensation_failed", saga=self.saga, step=name, error=str(exc))
        return done

    def __len__(self) -> int:
        return len(self._steps)
