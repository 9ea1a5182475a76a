from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from healthhub_core.core.application.dtos.views import (
    DiagnosticResultView,
    PatientDetailView,
    PatientView,
)
from healthhub_core.core.domain.entities.diagnostic_result_entity import DiagnosticResultEntity
from healthhub_core.core.domain.entities.patient_entity import PatientEntity


def to_patient_view(
    patient: PatientEntity,
    results: Sequence[DiagnosticResultEntity] = (),
    as_of: date | None = None,
) -> PatientView:
    return PatientView(
        id=patient.id,
        first_name=patient.first_name,
        last_name=patient.last_name,
        full_name=patient.full_name,
        date_of_birth=patient.date_of_birth,
        age=patient.age(as_of),
        last_diagnosis=patient.last_diagnosis(results),
        created_at=patient.created_at,
        updated_at=patient.updated_at,
        version=patient.version,
    )


def to_result_view(
    result: DiagnosticResultEntity, patient: PatientView | None = None
) -> DiagnosticResultView:
    return DiagnosticResultView(
        id=result.id,
        patient_id=result.patient_id,
        diagnosis=result.diagnosis,
        notes=result.notes,
        timestamp_utc=result.timestamp_utc,
        created_at=result.created_at,
        is_active=result.is_active,
        patient=patient,
    )


def to_patient_detail_view(
    patient: PatientEntity,
    results: Sequence[DiagnosticResultEntity],
    as_of: date | None = None,
) -> PatientDetailView:
    """`results` devem vir ordenados do mais recente para o mais antigo."""
    base = to_patient_view(patient, results, as_of)
    return PatientDetailView(
        **{f: getattr(base, f) for f in PatientView.__dataclass_fields__},
        diagnostic_results=[to_result_view(r) for r in results],
    )
