from collections.abc import Callable

import structlog
from redis import Redis

from healthhub_core.core.application.cancellation import raise_if_cancelled
from healthhub_core.core.application.cqrs import PaginationEnvelope, QueryHandler, build_envelope
from healthhub_core.core.application.dtos.filters import DiagnosisFilter, PatientSearchFilter
from healthhub_core.core.application.dtos.views import (
    DiagnosticResultView,
    PatientDetailView,
    PatientView,
)
from healthhub_core.core.application.queries.diagnostic_result_queries import (
    GetDiagnosesQuery,
    GetPatientDiagnosticResultsQuery,
)
from healthhub_core.core.application.queries.patient_queries import (
    GetPatientByIdQuery,
    GetPatientsQuery,
    SearchPatientsQuery,
)
from healthhub_core.core.application.redis_cache import cached_query
from healthhub_core.core.application.services.batch_loader import BatchLoader
from healthhub_core.core.application.services.input_sanitizer import MAX_PAGE_SIZE, InputSanitizer
from healthhub_core.core.application.services.view_mapper import (
    to_patient_detail_view,
    to_patient_view,
    to_result_view,
)
from healthhub_core.core.domain.entities.patient_entity import PatientEntity
from healthhub_core.core.domain.exceptions import NotFoundError, ValidationError
from healthhub_core.core.domain.repositories.diagnostic_result_repository import DiagnosticResultRepository
from healthhub_core.core.domain.repositories.patient_repository import PatientRepository

logger = structlog.get_logger(__name__)

LoaderFactory = Callable[[], BatchLoader]


def _patient_views(patients: list[PatientEntity], loader: BatchLoader) -> list[PatientView]:
    """Deriva `last_diagnosis` da página inteira com uma única consulta."""
    results = loader.load_results_by_patient(p.id for p in patients)
    return [to_patient_view(p, results.get(p.id, [])) for p in patients]


def _ensure_pagination(sanitizer: InputSanitizer, page: int | None, page_size: int | None) -> None:
    if not sanitizer.is_valid_pagination(page, page_size):
        raise ValidationError(
            f"Invalid pagination: page must be >= 1 and page size between 1 and {MAX_PAGE_SIZE}",
            details="pagination",
        )


# ╭──────────────────────────────────────────────╮
# │ 1. Pacientes                                 │
# ╰──────────────────────────────────────────────╯
class GetPatientsHandler(QueryHandler[GetPatientsQuery, PaginationEnvelope[PatientView]]):
    def __init__(
        self,
        repo: PatientRepository,
        loader_factory: LoaderFactory,
        sanitizer: InputSanitizer,
        cache: Redis | None = None,
    ):
        self.repo = repo
        self.loader_factory = loader_factory
        self.sanitizer = sanitizer
        self.cache = cache

    @cached_query()
    def handle(self, query: GetPatientsQuery) -> PaginationEnvelope[PatientView]:
        term = self.sanitizer.sanitize_search_term(query.search_term) or None
        _ensure_pagination(self.sanitizer, query.page, query.page_size)

        # sem page_size não há paginação; page sozinho é ignorado
        page = (query.page or 1) if query.page_size is not None else None

        raise_if_cancelled()
        patients = self.repo.find_filtered(term, page, query.page_size)
        raise_if_cancelled()
        total = self.repo.count_filtered(term)

        views = _patient_views(patients, self.loader_factory())
        return build_envelope(views, total, take=query.page_size, page=page)


class GetPatientByIdHandler(QueryHandler[GetPatientByIdQuery, PatientDetailView | None]):
    def __init__(
        self,
        repo: PatientRepository,
        result_repo: DiagnosticResultRepository,
        sanitizer: InputSanitizer,
        cache: Redis | None = None,
    ):
        self.repo = repo
        self.result_repo = result_repo
        self.sanitizer = sanitizer
        self.cache = cache

    @cached_query()
    def handle(self, query: GetPatientByIdQuery) -> PatientDetailView | None:
        patient_id = self.sanitizer.ensure_guid(query.patient_id, "patient_id")

        raise_if_cancelled()
        patient = self.repo.find_by_id(patient_id)
        if patient is None:
            return None

        raise_if_cancelled()
        results = self.result_repo.find_by_patient_id(patient_id)
        return to_patient_detail_view(patient, results)


class SearchPatientsHandler(QueryHandler[SearchPatientsQuery, PaginationEnvelope[PatientView]]):
    """Faixa etária e presença de diagnóstico são filtradas no storage."""
    def __init__(
        self,
        repo: PatientRepository,
        loader_factory: LoaderFactory,
        sanitizer: InputSanitizer,
        cache: Redis | None = None,
    ):
        self.repo = repo
        self.loader_factory = loader_factory
        self.sanitizer = sanitizer
        self.cache = cache

    @cached_query()
    def handle(self, query: SearchPatientsQuery) -> PaginationEnvelope[PatientView]:
        term = self.sanitizer.sanitize_query(query.search_term)
        if not self.sanitizer.is_valid_age_range(query.min_age, query.max_age):
            raise ValidationError(
                "Invalid age range: ages must be non-negative and min_age <= max_age",
                details="age_range",
            )
        _ensure_pagination(self.sanitizer, query.page, query.page_size)

        filtros = PatientSearchFilter(
            search_term=term,
            min_age=query.min_age,
            max_age=query.max_age,
            has_recent_diagnosis=query.has_recent_diagnosis,
        )
        page = (query.page or 1) if query.page_size is not None else None

        raise_if_cancelled()
        patients = self.repo.search(filtros, page, query.page_size)
        raise_if_cancelled()
        total = self.repo.count_search(filtros)

        views = _patient_views(patients, self.loader_factory())
        return build_envelope(views, total, take=query.page_size, page=page)


# ╭──────────────────────────────────────────────╮
# │ 2. Resultados diagnósticos                   │
# ╰──────────────────────────────────────────────╯
class GetPatientDiagnosticResultsHandler(
    QueryHandler[GetPatientDiagnosticResultsQuery, PaginationEnvelope[DiagnosticResultView]]
):
    def __init__(
        self,
        patient_repo: PatientRepository,
        result_repo: DiagnosticResultRepository,
        sanitizer: InputSanitizer,
        cache: Redis | None = None,
    ):
        self.patient_repo = patient_repo
        self.result_repo = result_repo
        self.sanitizer = sanitizer
        self.cache = cache

    @cached_query()
    def handle(self, query: GetPatientDiagnosticResultsQuery) -> PaginationEnvelope[DiagnosticResultView]:
        patient_id = self.sanitizer.ensure_guid(query.patient_id, "patient_id")
        if not self.sanitizer.is_valid_limit(query.limit):
            raise ValidationError("Invalid limit: must be between 1 and 10000", details="limit")

        raise_if_cancelled()
        if not self.patient_repo.exists(patient_id):
            raise NotFoundError(f"Patient {patient_id} not found", details=str(patient_id))

        raise_if_cancelled()
        results = self.result_repo.find_by_patient_id(patient_id, query.limit)
        total = self.result_repo.count_by_patient_id(patient_id)

        return build_envelope(
            [to_result_view(r) for r in results], total, skip=0, take=query.limit
        )


class GetDiagnosesHandler(QueryHandler[GetDiagnosesQuery, PaginationEnvelope[DiagnosticResultView]]):
    def __init__(
        self,
        result_repo: DiagnosticResultRepository,
        loader_factory: LoaderFactory,
        sanitizer: InputSanitizer,
    ):
        self.result_repo = result_repo
        self.loader_factory = loader_factory
        self.sanitizer = sanitizer

    def handle(self, query: GetDiagnosesQuery) -> PaginationEnvelope[DiagnosticResultView]:
        if query.skip is not None and query.skip < 0:
            raise ValidationError("Skip must be >= 0", details="skip")
        if query.take is not None and not 1 <= query.take <= MAX_PAGE_SIZE:
            raise ValidationError(f"Take must be between 1 and {MAX_PAGE_SIZE}", details="take")

        f = query.filtros
        filtros = DiagnosisFilter(
            type=self.sanitizer.sanitize_search_term(f.type) or None,
            is_active=f.is_active,
            created_after=f.created_after,
            created_before=f.created_before,
        )

        raise_if_cancelled()
        results = self.result_repo.find_filtered(filtros, query.skip, query.take)
        raise_if_cancelled()
        total = self.result_repo.count_filtered(filtros)

        # resumo do paciente (com último diagnóstico) em duas consultas, não N
        loader = self.loader_factory()
        patient_ids = [r.patient_id for r in results]
        patients = loader.load_patients(patient_ids)
        history = loader.load_results_by_patient(patient_ids)
        summaries = {
            pid: to_patient_view(p, history.get(pid, []))
            for pid, p in patients.items()
            if p is not None
        }

        views = [to_result_view(r, summaries.get(r.patient_id)) for r in results]
        logger.debug("diagnoses.listed", returned=len(views), total=total)
        return build_envelope(views, total, skip=query.skip, take=query.take)
