from dataclasses import asdict, fields, is_dataclass
from datetime import datetime, timezone
from typing import Any, TypeVar

from healthhub_core.core.domain.exceptions import ValidationError

T = TypeVar("T")


def utcnow() -> datetime:
    """Relógio único do domínio: sempre timezone-aware em UTC."""
    return datetime.now(timezone.utc)


def require_text(value: str | None, field_name: str, max_length: int) -> str:
    """
    Normaliza um texto obrigatório: remove espaços das bordas,
    rejeita vazio e limita o tamanho.
    """
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} cannot be empty", details=field_name)
    cleaned = value.strip()
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{field_name} cannot exceed {max_length} characters", details=field_name
        )
    return cleaned


def optional_text(value: str | None, field_name: str, max_length: int) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{field_name} cannot exceed {max_length} characters", details=field_name
        )
    return cleaned


class EntityMixin:
    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        """
        Cria uma instância da entidade a partir de um dict,
        ignorando chaves que não são campos da dataclass.
        """
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_model(cls: type[T], model: Any) -> T:
        """
        Cria uma entidade a partir de um modelo Django.
        Usa os campos da dataclass para extrair atributos do model
        (FKs aparecem como `<campo>_id` no model, sem carregar a relação).
        """
        if not is_dataclass(cls):
            raise TypeError(f"{cls.__name__} deve ser um dataclass")
        return cls(**{f.name: getattr(model, f.name) for f in fields(cls)})
