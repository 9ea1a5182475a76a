from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class PatientView:
    id: uuid.UUID
    first_name: str
    last_name: str
    full_name: str
    date_of_birth: date
    age: int
    last_diagnosis: str | None
    created_at: datetime
    updated_at: datetime | None
    version: int


@dataclass(frozen=True)
class DiagnosticResultView:
    id: uuid.UUID
    patient_id: uuid.UUID
    diagnosis: str
    notes: str | None
    timestamp_utc: datetime
    created_at: datetime
    is_active: bool
    patient: PatientView | None = None


@dataclass(frozen=True)
class PatientDetailView(PatientView):
    diagnostic_results: list[DiagnosticResultView] = field(default_factory=list)
