import uuid
from dataclasses import dataclass

from healthhub_core.core.application.cqrs import QueryDTO


@dataclass(frozen=True)
class GetPatientsQuery(QueryDTO):
    """
    Lista pacientes filtrando por nome/sobrenome/diagnóstico.
    Sem `page_size` a listagem não é paginada.
    """
    search_term: str | None = None
    page: int | None = None
    page_size: int | None = None


@dataclass(frozen=True)
class GetPatientByIdQuery(QueryDTO):
    patient_id: uuid.UUID


@dataclass(frozen=True)
class SearchPatientsQuery(QueryDTO):
    search_term: str
    min_age: int | None = None
    max_age: int | None = None
    has_recent_diagnosis: bool | None = None
    page: int | None = None
    page_size: int | None = None
