from __future__ import annotations

import math
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

import structlog

from medpass_core.core.domain.events.events import DomainEvent
from medpass_core.core.domain.services.event_dispatcher import EventDispatcher

# ───────────────────────────────────────────────
# CQRS: DTOs base, buses e resultado paginado
# ───────────────────────────────────────────────

C = TypeVar("C")  # Command type
Q = TypeVar("Q")  # Query filtros type
R = TypeVar("R")  # Query result type
T = TypeVar("T")  # PagedResult item type

logger = structlog.get_logger(__name__)


# ───────────────────────────────────────────────
# DTOs
# ───────────────────────────────────────────────
@dataclass(frozen=True)
class CommandDTO:
    """Base para todos comandos de escrita (Create/Update/Delete)."""


@dataclass(frozen=True)
class QueryDTO(Generic[Q]):
    """Base para consultas de leitura."""
    filtros: Q


@dataclass(frozen=True)
class PaginatedQueryDTO(Generic[Q]):
    """Consulta paginada: filtros + paginação."""
    filtros: Q
    page: int = 1
    page_size: int = 50


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """Resultado paginado padrão."""
    items: Sequence[T]
    total: int
    page: int
    page_size: int
    total_pages: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self, "total_pages", math.ceil(self.total / self.page_size) if self.page_size else 0
        )


# ───────────────────────────────────────────────
# Handlers Protocols
# ───────────────────────────────────────────────
class CommandHandler(Protocol, Generic[C]):
    def handle(self, command: C) -> Any:
        """Processa um comando e aplica mudanças de estado."""
        ...


class QueryHandler(Protocol, Generic[Q, R]):
    def handle(self, query: Q) -> R:
        """Processa uma consulta e retorna um resultado."""
        ...


# ───────────────────────────────────────────────
# Buses com log de duração
# ───────────────────────────────────────────────
class CommandBus:
    """Dispatcher de comandos com medição de performance."""

    def __init__(self) -> None:
        self._handlers: dict[type, CommandHandler] = {}

    def register(self, command_type: type[C], handler: CommandHandler[C]) -> None:
        self._handlers[command_type] = handler
        logger.debug("cqrs.command_registered", command=command_type.__name__)

    def dispatch(self, command: C) -> Any:
        handler = self._handlers.get(type(command))
        if not handler:
            raise ValueError(f"Nenhum handler para comando: {type(command).__name__}")
        start = time.perf_counter()
        logger.info("cqrs.command_start", command=type(command).__name__)
        result = handler.handle(command)
        logger.info(
            "cqrs.command_done",
            command=type(command).__name__,
            duration=f"{time.perf_counter() - start:.3f}s",
        )
        return result


class QueryBus:
    """Dispatcher de queries com medição de performance."""

    def __init__(self) -> None:
        self._handlers: dict[type, QueryHandler] = {}

    def register(self, query_type: type, handler: QueryHandler[Any, Any]) -> None:
        self._handlers[query_type] = handler
        logger.debug("cqrs.query_registered", query=query_type.__name__)

    def dispatch(self, query: Any) -> Any:
        handler = self._handlers.get(type(query))
        if not handler:
            raise ValueError(f"Nenhum handler para query: {type(query).__name__}")
        start = time.perf_counter()
        result = handler.handle(query)
        logger.debug(
            "cqrs.query_done",
            query=type(query).__name__,
            duration=f"{time.perf_counter() - start:.3f}s",
        )
        return result


class CommandBusImpl(CommandBus):
    """
    CommandBus que publica no EventDispatcher os eventos de domínio
    devolvidos pelos handlers (um evento ou uma lista de eventos).
    """

    def __init__(self, dispatcher: EventDispatcher):
        super().__init__()
        self.dispatcher = dispatcher

    def dispatch(self, command: Any) -> Any:
        result = super().dispatch(command)

        if isinstance(result, DomainEvent):
            self.dispatcher.dispatch(result)
        elif isinstance(result, list | tuple):
            for evt in result:
                if isinstance(evt, DomainEvent):
                    self.dispatcher.dispatch(evt)

        return result


class QueryBusImpl(QueryBus):
    """Implementação padrão de QueryBus."""
