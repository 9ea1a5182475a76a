from __future__ import annotations

import calendar
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from healthhub_core.core.domain.entities._base import EntityMixin, require_text, utcnow
from healthhub_core.core.domain.entities.diagnostic_result_entity import DiagnosticResultEntity
from healthhub_core.core.domain.exceptions import ValidationError

NAME_MAX_LENGTH = 100


def _anniversary(born: date, years: int) -> date:
    """Aniversário `years` anos depois; 29/02 cai em 28/02 em ano não bissexto."""
    year = born.year + years
    day = min(born.day, calendar.monthrange(year, born.month)[1])
    return born.replace(year=year, day=day)


@dataclass(slots=True)
class PatientEntity(EntityMixin):
    """
    Paciente. Referencia seus resultados apenas por id:
    o conjunto de DiagnosticResults é carregado explicitamente
    pelos handlers e passado para os cálculos derivados.
    """
    id: uuid.UUID
    first_name: str
    last_name: str
    date_of_birth: date
    created_at: datetime
    updated_at: datetime | None = None
    version: int = 1

    # ───────────────────────── fábricas / mutações ─────────────────────────
    @classmethod
    def create(
        cls,
        first_name: str,
        last_name: str,
        date_of_birth: date,
        now: datetime | None = None,
    ) -> PatientEntity:
        now = now or utcnow()
        first, last = cls._validate_names(first_name, last_name)
        cls._validate_date_of_birth(date_of_birth, now)
        return cls(
            id=uuid.uuid4(),
            first_name=first,
            last_name=last,
            date_of_birth=date_of_birth,
            created_at=now,
        )

    def rename(self, first_name: str, last_name: str, now: datetime | None = None) -> None:
        # updated_at é renovado mesmo quando os nomes não mudam
        self.first_name, self.last_name = self._validate_names(first_name, last_name)
        self.updated_at = now or utcnow()

    def change_date_of_birth(self, date_of_birth: date, now: datetime | None = None) -> None:
        now = now or utcnow()
        self._validate_date_of_birth(date_of_birth, now)
        self.date_of_birth = date_of_birth
        self.updated_at = now

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now or utcnow()

    # ───────────────────────────── derivados ─────────────────────────────
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def age(self, as_of: date | None = None) -> int:
        as_of = as_of or utcnow().date()
        years = as_of.year - self.date_of_birth.year
        if as_of < _anniversary(self.date_of_birth, years):
            years -= 1
        return years

    def last_diagnosis(self, results: Iterable[DiagnosticResultEntity]) -> str | None:
        """
        Texto do resultado com maior `timestamp_utc`.
        Empate: vence o maior id (ordem textual do UUID).
        """
        own = [r for r in results if r.patient_id == self.id]
        if not own:
            return None
        latest = max(own, key=lambda r: (r.timestamp_utc, str(r.id)))
        return latest.diagnosis

    # ───────────────────────────── validação ─────────────────────────────
    @staticmethod
    def _validate_names(first_name: str, last_name: str) -> tuple[str, str]:
        return (
            require_text(first_name, "First name", NAME_MAX_LENGTH),
            require_text(last_name, "Last name", NAME_MAX_LENGTH),
        )

    @staticmethod
    def _validate_date_of_birth(date_of_birth: date | None, now: datetime) -> None:
        if date_of_birth is None:
            raise ValidationError("Date of birth is required", details="date_of_birth")
        if date_of_birth > now.date():
            raise ValidationError("Date of birth cannot be in the future", details="date_of_birth")
