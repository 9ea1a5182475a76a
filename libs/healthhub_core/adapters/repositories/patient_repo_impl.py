from __future__ import annotations

import calendar
import uuid
from collections.abc import Sequence
from datetime import date

from django.db import transaction
from django.db.models import Exists, F, OuterRef, Q, QuerySet
from django.utils import timezone

from healthhub_core.core.application.dtos.filters import PatientSearchFilter
from healthhub_core.core.domain.entities.patient_entity import PatientEntity
from healthhub_core.core.domain.exceptions import ConflictError, NotFoundError
from healthhub_core.core.domain.repositories.patient_repository import PatientRepository
from plugins.django_interface.models import (
    DiagnosticResult as DiagnosticResultModel,
)
from plugins.django_interface.models import (
    Patient as PatientModel,
)

ORDERING = ("last_name", "first_name", "id")


def _today() -> date:
    return timezone.now().date()


def _years_before(today: date, years: int) -> date:
    """
    Maior data de nascimento com idade >= `years` em `today`.
    Nascidos em 29/02 fazem aniversário em 28/02 nos anos não bissextos.
    """
    year = today.year - years
    if (today.month, today.day) == (2, 28) and calendar.isleap(year) and not calendar.isleap(today.year):
        return date(year, 2, 29)
    day = min(today.day, calendar.monthrange(year, today.month)[1])
    return today.replace(year=year, day=day)


def _has_results() -> Exists:
    return Exists(DiagnosticResultModel.objects.filter(patient_id=OuterRef("pk")))


def _term_filter(qs: QuerySet, search_term: str | None) -> QuerySet:
    """
    Nome, sobrenome ou qualquer diagnóstico vinculado (case-insensitive).
    O diagnóstico entra por subquery: a junção não duplica pacientes.
    """
    if not search_term:
        return qs
    by_diagnosis = DiagnosticResultModel.objects.filter(
        diagnosis__icontains=search_term
    ).values("patient_id")
    return qs.filter(
        Q(first_name__icontains=search_term)
        | Q(last_name__icontains=search_term)
        | Q(id__in=by_diagnosis)
    )


def _paginate(qs: QuerySet, page: int | None, page_size: int | None) -> QuerySet:
    if page_size is None:
        return qs
    offset = ((page or 1) - 1) * page_size
    return qs[offset : offset + page_size]


class PatientRepoImpl(PatientRepository):
    """
    Implementação Django do repositório de pacientes.

    Listagens e contagens compartilham o mesmo construtor de filtro,
    de modo que `total` sempre corresponde ao que a paginação enumera.
    """

    # ──────────────────────── filtros compartilhados ────────────────────────
    @staticmethod
    def _filtered_qs(search_term: str | None) -> QuerySet:
        return _term_filter(PatientModel.objects.all(), search_term)

    @staticmethod
    def _search_qs(filtros: PatientSearchFilter) -> QuerySet:
        qs = _term_filter(PatientModel.objects.all(), filtros.search_term)
        today = _today()
        if filtros.min_age is not None:
            # idade >= min  ⇔  nascido até hoje - min anos
            qs = qs.filter(date_of_birth__lte=_years_before(today, filtros.min_age))
        if filtros.max_age is not None:
            # idade <= max  ⇔  nascido depois de hoje - (max + 1) anos
            qs = qs.filter(date_of_birth__gt=_years_before(today, filtros.max_age + 1))
        if filtros.has_recent_diagnosis is True:
            qs = qs.filter(_has_results())
        elif filtros.has_recent_diagnosis is False:
            qs = qs.filter(~_has_results())
        return qs

    # ────────────────────────── consultas ──────────────────────────
    def find_by_id(self, patient_id: uuid.UUID) -> PatientEntity | None:
        model = PatientModel.objects.filter(id=patient_id).first()
        return PatientEntity.from_model(model) if model else None

    def find_all(self) -> list[PatientEntity]:
        return [PatientEntity.from_model(m) for m in PatientModel.objects.order_by(*ORDERING)]

    def find_filtered(
        self, search_term: str | None, page: int | None = None, page_size: int | None = None
    ) -> list[PatientEntity]:
        qs = self._filtered_qs(search_term).order_by(*ORDERING)
        return [PatientEntity.from_model(m) for m in _paginate(qs, page, page_size)]

    def count_filtered(self, search_term: str | None) -> int:
        return self._filtered_qs(search_term).count()

    def search(
        self, filtros: PatientSearchFilter, page: int | None = None, page_size: int | None = None
    ) -> list[PatientEntity]:
        qs = self._search_qs(filtros).order_by(*ORDERING)
        return [PatientEntity.from_model(m) for m in _paginate(qs, page, page_size)]

    def count_search(self, filtros: PatientSearchFilter) -> int:
        return self._search_qs(filtros).count()

    def find_by_ids(self, ids: Sequence[uuid.UUID]) -> list[PatientEntity]:
        if not ids:
            return []
        return [PatientEntity.from_model(m) for m in PatientModel.objects.filter(id__in=list(ids))]

    def exists(self, patient_id: uuid.UUID) -> bool:
        return PatientModel.objects.filter(id=patient_id).exists()

    def count(self) -> int:
        return PatientModel.objects.count()

    # ─────────────────────── persistência ───────────────────────
    def add(self, patient: PatientEntity) -> PatientEntity:
        model = PatientModel.objects.create(
            id=patient.id,
            first_name=patient.first_name,
            last_name=patient.last_name,
            date_of_birth=patient.date_of_birth,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
            version=patient.version,
        )
        return PatientEntity.from_model(model)

    @transaction.atomic
    def update(self, patient: PatientEntity) -> PatientEntity:
        """
        UPDATE condicionado à versão carregada; zero linhas afetadas
        significa que outra escrita venceu (ou o registro sumiu).
        """
        rows = PatientModel.objects.filter(id=patient.id, version=patient.version).update(
            first_name=patient.first_name,
            last_name=patient.last_name,
            date_of_birth=patient.date_of_birth,
            updated_at=patient.updated_at,
            version=F("version") + 1,
        )
        if rows == 0:
            if PatientModel.objects.filter(id=patient.id).exists():
                raise ConflictError(
                    f"Patient {patient.id} was modified concurrently", details=str(patient.id)
                )
            raise NotFoundError(f"Patient {patient.id} not found", details=str(patient.id))

        patient.version += 1
        return patient

    @transaction.atomic
    def delete(self, patient_id: uuid.UUID) -> bool:
        # CASCADE remove também os resultados diagnósticos
        _, per_model = PatientModel.objects.filter(id=patient_id).delete()
        return per_model.get(PatientModel._meta.label, 0) > 0
