from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from healthhub_core.core.domain.entities._base import EntityMixin, optional_text, require_text, utcnow
from healthhub_core.core.domain.exceptions import ValidationError

DIAGNOSIS_MAX_LENGTH = 500
NOTES_MAX_LENGTH = 2000


@dataclass(slots=True)
class DiagnosticResultEntity(EntityMixin):
    id: uuid.UUID
    patient_id: uuid.UUID
    diagnosis: str
    timestamp_utc: datetime
    created_at: datetime
    notes: str | None = None
    is_active: bool = True

    @classmethod
    def create(
        cls,
        patient_id: uuid.UUID,
        diagnosis: str,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> DiagnosticResultEntity:
        """
        Valida apenas o formato. A existência do paciente é
        responsabilidade do handler, antes de chamar a fábrica.
        """
        if patient_id is None or patient_id == uuid.UUID(int=0):
            raise ValidationError("Patient ID cannot be empty", details="patient_id")
        now = now or utcnow()
        return cls(
            id=uuid.uuid4(),
            patient_id=patient_id,
            diagnosis=require_text(diagnosis, "Diagnosis", DIAGNOSIS_MAX_LENGTH),
            notes=optional_text(notes, "Notes", NOTES_MAX_LENGTH),
            timestamp_utc=now,
            created_at=now,
        )

    def update_notes(self, notes: str | None) -> None:
        self.notes = optional_text(notes, "Notes", NOTES_MAX_LENGTH)
