from __future__ import annotations

import uuid
from collections.abc import Sequence

from django.db.models import QuerySet

from healthhub_core.core.application.dtos.filters import DiagnosisFilter
from healthhub_core.core.domain.entities.diagnostic_result_entity import DiagnosticResultEntity
from healthhub_core.core.domain.exceptions import NotFoundError
from healthhub_core.core.domain.repositories.diagnostic_result_repository import DiagnosticResultRepository
from plugins.django_interface.models import DiagnosticResult as DiagnosticResultModel

NEWEST_FIRST = ("-timestamp_utc", "-id")
NEWEST_CREATED_FIRST = ("-created_at", "-id")


class DiagnosticResultRepoImpl(DiagnosticResultRepository):
    """Implementação Django do repositório de resultados diagnósticos."""

    @staticmethod
    def _filtered_qs(filtros: DiagnosisFilter) -> QuerySet:
        qs = DiagnosticResultModel.objects.all()
        if filtros.type:
            qs = qs.filter(diagnosis__icontains=filtros.type)
        if filtros.is_active is not None:
            qs = qs.filter(is_active=filtros.is_active)
        if filtros.created_after is not None:
            qs = qs.filter(created_at__gte=filtros.created_after)
        if filtros.created_before is not None:
            qs = qs.filter(created_at__lte=filtros.created_before)
        return qs

    # ────────────────────────── consultas ──────────────────────────
    def find_by_id(self, result_id: uuid.UUID) -> DiagnosticResultEntity | None:
        model = DiagnosticResultModel.objects.filter(id=result_id).first()
        return DiagnosticResultEntity.from_model(model) if model else None

    def find_by_patient_id(
        self, patient_id: uuid.UUID, limit: int | None = None
    ) -> list[DiagnosticResultEntity]:
        qs = DiagnosticResultModel.objects.filter(patient_id=patient_id).order_by(*NEWEST_FIRST)
        if limit is not None:
            qs = qs[:limit]
        return [DiagnosticResultEntity.from_model(m) for m in qs]

    def count_by_patient_id(self, patient_id: uuid.UUID) -> int:
        return DiagnosticResultModel.objects.filter(patient_id=patient_id).count()

    def find_by_patient_ids(self, patient_ids: Sequence[uuid.UUID]) -> list[DiagnosticResultEntity]:
        if not patient_ids:
            return []
        qs = DiagnosticResultModel.objects.filter(patient_id__in=list(patient_ids)).order_by(*NEWEST_FIRST)
        return [DiagnosticResultEntity.from_model(m) for m in qs]

    def find_filtered(
        self, filtros: DiagnosisFilter, skip: int | None = None, take: int | None = None
    ) -> list[DiagnosticResultEntity]:
        qs = self._filtered_qs(filtros).order_by(*NEWEST_CREATED_FIRST)
        start = skip or 0
        qs = qs[start : start + take] if take is not None else qs[start:]
        return [DiagnosticResultEntity.from_model(m) for m in qs]

    def count_filtered(self, filtros: DiagnosisFilter) -> int:
        return self._filtered_qs(filtros).count()

    # ─────────────────────── persistência ───────────────────────
    def add(self, result: DiagnosticResultEntity) -> DiagnosticResultEntity:
        model = DiagnosticResultModel.objects.create(
            id=result.id,
            patient_id=result.patient_id,
            diagnosis=result.diagnosis,
            notes=result.notes,
            timestamp_utc=result.timestamp_utc,
            created_at=result.created_at,
            is_active=result.is_active,
        )
        return DiagnosticResultEntity.from_model(model)

    def update(self, result: DiagnosticResultEntity) -> DiagnosticResultEntity:
        # patient_id e diagnosis são imutáveis após a criação
        rows = DiagnosticResultModel.objects.filter(id=result.id).update(
            notes=result.notes,
            is_active=result.is_active,
        )
        if rows == 0:
            raise NotFoundError(f"Diagnostic result {result.id} not found", details=str(result.id))
        return result

    def delete(self, result_id: uuid.UUID) -> bool:
        deleted, _ = DiagnosticResultModel.objects.filter(id=result_id).delete()
        return deleted > 0
