"""
Escopo de cancelamento por chamada.

`CommandBus.dispatch(msg, cancel_event=...)` instala o evento em uma
ContextVar; os handlers chamam `raise_if_cancelled()` antes de cada
acesso ao storage.
"""
from __future__ import annotations

import contextvars
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from healthhub_core.core.domain.exceptions import OperationCancelledError

_cancel_event: contextvars.ContextVar[threading.Event | None] = contextvars.ContextVar(
    "cancel_event", default=None
)


@contextmanager
def cancellation_scope(event: threading.Event | None) -> Iterator[None]:
    token = _cancel_event.set(event)
    try:
        yield
    finally:
        _cancel_event.reset(token)


def is_cancelled() -> bool:
    event = _cancel_event.get()
    return event is not None and event.is_set()


def raise_if_cancelled() -> None:
    if is_cancelled():
        raise OperationCancelledError("Operation was cancelled")
