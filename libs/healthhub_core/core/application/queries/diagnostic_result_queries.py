import uuid
from dataclasses import dataclass, field

from healthhub_core.core.application.cqrs import QueryDTO
from healthhub_core.core.application.dtos.filters import DiagnosisFilter


@dataclass(frozen=True)
class GetPatientDiagnosticResultsQuery(QueryDTO):
    patient_id: uuid.UUID
    limit: int | None = None


@dataclass(frozen=True)
class GetDiagnosesQuery(QueryDTO):
    """Paginação por offset (`skip`/`take`); ambos ausentes = sem paginação."""
    filtros: DiagnosisFilter = field(default_factory=DiagnosisFilter)
    skip: int | None = None
    take: int | None = None
