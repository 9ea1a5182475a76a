from __future__ import annotations

import math
import threading
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

import structlog

from healthhub_core.adapters.observability.metrics import CQRS_DURATION, CQRS_MESSAGES
from healthhub_core.core.application.cancellation import cancellation_scope
from healthhub_core.core.domain.exceptions import HealthHubError, InternalError
from healthhub_core.core.domain.services.event_dispatcher import EventDispatcher

# ───────────────────────────────────────────────
# CQRS Genérico com Envelope de Paginação e Log de Performance
# ───────────────────────────────────────────────

# Type variables
C = TypeVar('C')  # Command type
Q = TypeVar('Q')  # Query type
R = TypeVar('R')  # Query result type
T = TypeVar('T')  # Envelope item type

# Logger
logger = structlog.get_logger(__name__)

# ───────────────────────────────────────────────
# DTOs
# ───────────────────────────────────────────────
@dataclass(frozen=True, kw_only=True)
class CommandDTO:
    """Base para todos comandos de escrita. Sempre identifica quem executa."""
    actor_id: str

@dataclass(frozen=True)
class QueryDTO:
    """Base para consultas de leitura."""
    pass

@dataclass(frozen=True)
class PageInfo:
    has_next_page: bool
    has_previous_page: bool
    start_cursor: str | None
    end_cursor: str | None

@dataclass(frozen=True)
class PaginationEnvelope(Generic[T]):
    """Forma única de resposta para toda operação de listagem."""
    nodes: Sequence[T]
    total_count: int
    page_info: PageInfo
    current_page: int
    total_pages: int


def build_envelope(
    nodes: Iterable[T],
    total_count: int,
    skip: int | None = None,
    take: int | None = None,
    page: int | None = None,
) -> PaginationEnvelope[T]:
    """
    Monta o envelope a partir de offset (`skip`/`take`) ou página (`page`/`take`).

    - take ausente = uma única página com tudo
    - flags de navegação derivam de current_page/total_pages
    - cursores são offsets em texto, apenas informativos
    """
    items = list(nodes)
    size = take if take is not None else total_count

    if skip is None:
        skip = (page - 1) * size if page is not None and size > 0 else 0

    total_pages = math.ceil(total_count / size) if size > 0 else 1

    if page is not None:
        current_page = page
    elif take is not None and take > 0:
        current_page = skip // take + 1
    else:
        current_page = 1

    return PaginationEnvelope(
        nodes=items,
        total_count=total_count,
        page_info=PageInfo(
            has_next_page=current_page < total_pages,
            has_previous_page=current_page > 1,
            start_cursor=str(skip),
            end_cursor=str(skip + len(items)),
        ),
        current_page=current_page,
        total_pages=total_pages,
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
# Buses com Logging e Métricas
# ───────────────────────────────────────────────
class _Bus:
    kind = "message"

    def __init__(self) -> None:
        self._handlers: dict[type, Any] = {}

    def register(self, message_type: type, handler: Any) -> None:
        self._handlers[message_type] = handler
        logger.debug("handler.registered", kind=self.kind, message=message_type.__name__)

    def dispatch(self, message: Any, cancel_event: threading.Event | None = None) -> Any:
        name = type(message).__name__
        handler = self._handlers.get(type(message))
        if not handler:
            raise ValueError(f"Nenhum handler para {self.kind}: {name}")

        start = time.perf_counter()
        logger.info(f"{self.kind}.executing", name=name)
        try:
            with cancellation_scope(cancel_event):
                result = handler.handle(message)
        except HealthHubError as e:
            CQRS_MESSAGES.labels(self.kind, name, e.code.lower()).inc()
            logger.warning(f"{self.kind}.rejected", name=name, code=e.code, error=e.message)
            raise
        except Exception as e:
            CQRS_MESSAGES.labels(self.kind, name, "error").inc()
            logger.error(f"{self.kind}.failed", name=name, error=str(e), exc_info=True)
            raise InternalError() from e
        finally:
            CQRS_DURATION.labels(self.kind, name).observe(time.perf_counter() - start)

        elapsed = time.perf_counter() - start
        CQRS_MESSAGES.labels(self.kind, name, "ok").inc()
        logger.info(f"{self.kind}.executed", name=name, duration=f"{elapsed:.3f}s")
        return result


class CommandBus(_Bus):
    """Dispatcher de comandos com medição de performance."""
    kind = "command"


class QueryBus(_Bus):
    """Dispatcher de queries com medição de performance."""
    kind = "query"

# ───────────────────────────────────────────────
# Service de Alto Nível
# ───────────────────────────────────────────────
class BaseService:
    """Orquestra execução de comandos e queries via buses."""
    def __init__(self, command_bus: CommandBus, query_bus: QueryBus) -> None:
        self.commands = command_bus
        self.queries = query_bus

    def execute(self, command: CommandDTO, cancel_event: threading.Event | None = None) -> Any:
        return self.commands.dispatch(command, cancel_event=cancel_event)

    def query(self, query: QueryDTO, cancel_event: threading.Event | None = None) -> Any:
        return self.queries.dispatch(query, cancel_event=cancel_event)

class CommandBusImpl(CommandBus):
    """
    CommandBus com acesso ao dispatcher de eventos: os handlers publicam
    os eventos de domínio após persistir; o bus mantém a referência para
    que assinantes (auditoria) sejam registrados no mesmo dispatcher.
    """
    def __init__(self, dispatcher: EventDispatcher):
        super().__init__()
        self.dispatcher = dispatcher

class QueryBusImpl(QueryBus):
    """
    Implementação padrão de QueryBus (herda toda a lógica de QueryBus).
    """
    pass
