from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DiagnosisFilter:
    """
    Filtros de GetDiagnoses. `type` é substring (case-insensitive)
    do texto do diagnóstico; limites de data são inclusivos sobre `created_at`.
    """
    type: str | None = None
    is_active: bool | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None


@dataclass(frozen=True)
class PatientSearchFilter:
    search_term: str
    min_age: int | None = None
    max_age: int | None = None
    has_recent_diagnosis: bool | None = None
