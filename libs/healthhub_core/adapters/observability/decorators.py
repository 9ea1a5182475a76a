import time
from functools import wraps

import structlog

logger = structlog.get_logger(__name__)


def track_http(view_name):
    """Loga duração e status de cada ação de ViewSet (métricas HTTP vêm do django-prometheus)."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(self, request, *args, **kwargs):
            start = time.perf_counter()
            resp = fn(self, request, *args, **kwargs)
            logger.info(
                "http.view",
                view=view_name,
                status=resp.status_code,
                duration=f"{time.perf_counter() - start:.3f}s",
            )
            return resp
        return wrapper
    return decorator
