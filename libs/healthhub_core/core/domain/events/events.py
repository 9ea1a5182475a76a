from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from healthhub_core.core.domain.entities._base import utcnow


# ───────────────────────────────────────────────
# Event Base e Domain Events
# ───────────────────────────────────────────────
@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    actor_id: str
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    occurred_at: datetime = field(default_factory=utcnow)

    action: str = field(default="", init=False)
    entity: str = field(default="", init=False)

    @property
    def entity_id(self) -> str:
        raise NotImplementedError


# ╭──────────────────────────────────────────────╮
# │ 1. Pacientes                                │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True, kw_only=True)
class PatientCreatedEvent(DomainEvent):
    patient_id: uuid.UUID
    full_name: str
    action: str = field(default="CREATE", init=False)
    entity: str = field(default="Patient", init=False)

    @property
    def entity_id(self) -> str:
        return str(self.patient_id)


@dataclass(frozen=True, kw_only=True)
class PatientUpdatedEvent(DomainEvent):
    patient_id: uuid.UUID
    changed_fields: tuple[str, ...]
    action: str = field(default="UPDATE", init=False)
    entity: str = field(default="Patient", init=False)

    @property
    def entity_id(self) -> str:
        return str(self.patient_id)


@dataclass(frozen=True, kw_only=True)
class PatientDeletedEvent(DomainEvent):
    patient_id: uuid.UUID
    action: str = field(default="DELETE", init=False)
    entity: str = field(default="Patient", init=False)

    @property
    def entity_id(self) -> str:
        return str(self.patient_id)


# ╭──────────────────────────────────────────────╮
# │ 2. Resultados diagnósticos                  │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True, kw_only=True)
class DiagnosticResultAddedEvent(DomainEvent):
    result_id: uuid.UUID
    patient_id: uuid.UUID
    diagnosis: str
    action: str = field(default="CREATE", init=False)
    entity: str = field(default="DiagnosticResult", init=False)

    @property
    def entity_id(self) -> str:
        return str(self.result_id)


@dataclass(frozen=True, kw_only=True)
class DiagnosticResultUpdatedEvent(DomainEvent):
    result_id: uuid.UUID
    patient_id: uuid.UUID
    action: str = field(default="UPDATE", init=False)
    entity: str = field(default="DiagnosticResult", init=False)

    @property
    def entity_id(self) -> str:
        return str(self.result_id)
