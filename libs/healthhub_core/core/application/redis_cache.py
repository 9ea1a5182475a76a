import contextlib
import functools
import pickle
from collections.abc import Callable
from typing import Any

import structlog
from redis import Redis
from redis.exceptions import RedisError

from healthhub_core.adapters.observability.metrics import QUERY_CACHE

Serializer = Callable[[Any], bytes]
Deserializer = Callable[[bytes], Any]

logger = structlog.get_logger(__name__)


def default_key(query: Any) -> str:
    # queries são dataclasses frozen: o repr contém a classe e todos os parâmetros
    return f"healthhub:query:{query!r}"


def cached_query(
    ttl_seconds: int | None = None,
    key_fn: Callable[[Any], str] | None = None,
    serializer: Serializer | None = None,
    deserializer: Deserializer | None = None,
):
    """
    Decorator para QueryHandler.handle (read-through em Redis):
      - usa o client injetado no handler (`self.cache`)
      - desligado por padrão (`QUERY_CACHE_ENABLED`) ou sem client
      - tenta carregar do Redis antes de chamar o handler original
      - se não existir, executa, armazena no cache e retorna
      - falha de leitura é logada e a query roda sem cache;
        falha de escrita é ignorada

    :param ttl_seconds: tempo de vida em cache (default: `QUERY_CACHE_TTL`)
    :param key_fn: função que recebe a query e retorna uma string de chave
    :param serializer: converte resultado em bytes (default: pickle.dumps)
    :param deserializer: converte bytes de volta em objeto (default: pickle.loads)
    """
    serializer = serializer or pickle.dumps
    deserializer = deserializer or pickle.loads
    key_fn = key_fn or default_key

    def decorator(handle_fn):
        @functools.wraps(handle_fn)
        def wrapped(self, query):
            from django.conf import settings

            redis: Redis | None = getattr(self, "cache", None)
            if redis is None or not getattr(settings, "QUERY_CACHE_ENABLED", False):
                return handle_fn(self, query)

            ttl = ttl_seconds or getattr(settings, "QUERY_CACHE_TTL", 300)
            key = key_fn(query)

            try:
                raw = redis.get(key)
            except RedisError as e:
                QUERY_CACHE.labels("error").inc()
                logger.warning("query_cache.read_failed", key=key, error=str(e))
                return handle_fn(self, query)

            if raw is not None:
                try:
                    result = deserializer(raw)
                except Exception:
                    logger.warning("query_cache.corrupted_entry", key=key)
                    with contextlib.suppress(RedisError):
                        redis.delete(key)
                else:
                    QUERY_CACHE.labels("hit").inc()
                    return result

            QUERY_CACHE.labels("miss").inc()
            result = handle_fn(self, query)
            with contextlib.suppress(Exception):
                redis.setex(key, ttl, serializer(result))
            return result
        return wrapped
    return decorator
