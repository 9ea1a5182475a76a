from collections.abc import Callable

import structlog

from healthhub_core.core.domain.events.events import DomainEvent

logger = structlog.get_logger(__name__)


class EventDispatcher:
    """
    Dispatcher síncrono de eventos de domínio.

    Assinantes registrados para `DomainEvent` recebem todos os eventos
    (útil para auditoria); os demais recebem apenas o tipo exato.
    """
    def __init__(self) -> None:
        self._subs: dict[type[DomainEvent], list[Callable[[DomainEvent], None]]] = {}

    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        self._subs.setdefault(event_type, []).append(handler)
        logger.debug(
            "event.subscribed",
            event_type=event_type.__name__,
            handler_name=getattr(handler, "__name__", type(handler).__name__),
        )

    def dispatch(self, event: DomainEvent) -> None:
        handlers = [*self._subs.get(type(event), [])]
        if type(event) is not DomainEvent:
            handlers.extend(self._subs.get(DomainEvent, []))
        logger.info(
            "event.dispatch",
            event_name=type(event).__name__,
            listeners=len(handlers),
        )
        for h in handlers:
            # o efeito do comando já foi persistido: falha de assinante não o desfaz
            try:
                h(event)
            except Exception as e:
                logger.error(
                    "event.handler_error",
                    event_name=type(event).__name__,
                    handler_name=getattr(h, "__name__", type(h).__name__),
                    error=str(e),
                    exc_info=True,
                )
