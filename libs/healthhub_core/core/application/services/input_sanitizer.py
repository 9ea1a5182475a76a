from __future__ import annotations

import re
import uuid

import structlog

from healthhub_core.core.domain.exceptions import ValidationError

logger = structlog.get_logger(__name__)

SEARCH_TERM_MAX_LENGTH = 200
MAX_PAGE_SIZE = 1000
MAX_LIMIT = 10_000

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

_SQL_MARKERS = re.compile(
    r"--|/\*|\*/|;|@@"
    r"|n?char\(|n?varchar\("
    r"|sys\.|sysobjects|syscolumns"
    r"|\b(?:alter|begin|create|cursor|declare|delete|drop|end|exec|execute"
    r"|fetch|insert|kill|open|select|table|update)\s",
    re.IGNORECASE,
)

_XSS_MARKERS = re.compile(
    r"</?(?:script|iframe|object|embed|applet|form|input)"
    r"|javascript:"
    r"|on(?:load|error|click|mouseover|focus|blur)=",
    re.IGNORECASE,
)

_PATTERNS = (_CONTROL_CHARS, _SQL_MARKERS, _XSS_MARKERS)


class InputSanitizer:
    """
    Limpeza e validação de entrada na borda do core.

    A limpeza é um denylist aplicado repetidamente até o texto estabilizar,
    de modo que remover um marcador não forme outro (ex.: "-;-").
    O acesso ao banco continua parametrizado pelo ORM; isto é uma camada extra.
    """

    # ───────────────────────────── textos ─────────────────────────────
    def sanitize_search_term(self, value: str | None) -> str:
        if value is None or not value.strip():
            return ""
        cleaned = self._clean(value)[:SEARCH_TERM_MAX_LENGTH]
        logger.debug("sanitizer.search_term", original_length=len(value), length=len(cleaned))
        return cleaned

    def sanitize_query(self, value: str | None) -> str:
        """Como `sanitize_search_term`, sem truncar; vazio é sempre inválido."""
        if value is None or not value.strip():
            logger.warning("sanitizer.empty_query")
            raise ValidationError("Search query cannot be empty", details="query")
        cleaned = self._clean(value)
        logger.debug("sanitizer.query", original_length=len(value), length=len(cleaned))
        return cleaned

    @staticmethod
    def _clean(value: str) -> str:
        previous = None
        current = value
        while current != previous:
            previous = current
            for pattern in _PATTERNS:
                current = pattern.sub("", current)
        return current.strip()

    # ──────────────────────────── validações ────────────────────────────
    def is_valid_guid(self, value: object) -> bool:
        if value is None:
            return self._reject("guid", value=None)
        if isinstance(value, uuid.UUID):
            parsed = value
        else:
            try:
                parsed = uuid.UUID(str(value))
            except (ValueError, TypeError, AttributeError):
                return self._reject("guid", value=str(value)[:64])
        if parsed.int == 0:
            return self._reject("guid", value=str(parsed))
        return True

    def ensure_guid(self, value: object, field_name: str) -> uuid.UUID:
        if not self.is_valid_guid(value):
            raise ValidationError(f"{field_name} must be a valid identifier", details=field_name)
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))

    def is_valid_pagination(self, page: int | None, page_size: int | None) -> bool:
        if page is not None and page < 1:
            return self._reject("pagination", page=page, page_size=page_size)
        if page_size is not None and not 1 <= page_size <= MAX_PAGE_SIZE:
            return self._reject("pagination", page=page, page_size=page_size)
        logger.debug("sanitizer.pagination_ok", page=page, page_size=page_size)
        return True

    def is_valid_limit(self, limit: int | None) -> bool:
        if limit is None or 1 <= limit <= MAX_LIMIT:
            return True
        return self._reject("limit", limit=limit)

    def is_valid_age_range(self, min_age: int | None, max_age: int | None) -> bool:
        if (min_age is not None and min_age < 0) or (max_age is not None and max_age < 0):
            return self._reject("age_range", min_age=min_age, max_age=max_age)
        if min_age is not None and max_age is not None and min_age > max_age:
            return self._reject("age_range", min_age=min_age, max_age=max_age)
        return True

    @staticmethod
    def _reject(check: str, **context) -> bool:
        logger.warning("sanitizer.rejected", check=check, **context)
        return False
