# ╭────────────────────────────────────────────────────────────────────────────╮
# │  ViewSets REST – Pacientes e Resultados Diagnósticos                       │
# │                                                                            │
# │  • Parâmetros tipados → mix-in centralizado (erro vira VALIDATION_ERROR)   │
# │  • Toda mutação leva o actor_id do token (request.user.id)                 │
# │  • Toda listagem devolve o mesmo envelope de paginação                     │
# │  • Métrica trace      → decorator `track_http`                             │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

from datetime import datetime, time, timezone

from django.conf import settings
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from healthhub_core.adapters.config.composition_root import setup_di_container_from_settings
from healthhub_core.adapters.observability.decorators import track_http
from healthhub_core.core.application.commands.diagnostic_result_commands import (
    AddDiagnosticResultCommand,
    UpdateDiagnosticResultCommand,
)
from healthhub_core.core.application.commands.patient_commands import (
    CreatePatientCommand,
    DeletePatientCommand,
    UpdatePatientCommand,
)
from healthhub_core.core.application.cqrs import CommandBusImpl, QueryBusImpl
from healthhub_core.core.application.dtos.diagnostic_result_dto import (
    AddDiagnosticResultDTO,
    UpdateDiagnosticResultDTO,
)
from healthhub_core.core.application.dtos.filters import DiagnosisFilter
from healthhub_core.core.application.dtos.patient_dto import CreatePatientDTO, UpdatePatientDTO
from healthhub_core.core.application.queries.diagnostic_result_queries import (
    GetDiagnosesQuery,
    GetPatientDiagnosticResultsQuery,
)
from healthhub_core.core.application.queries.patient_queries import (
    GetPatientByIdQuery,
    GetPatientsQuery,
    SearchPatientsQuery,
)
from healthhub_core.core.domain.exceptions import NotFoundError, ValidationError

from ..serializers import (
    DiagnosticResultEnvelopeSerializer,
    DiagnosticResultSerializer,
    PatientDetailSerializer,
    PatientEnvelopeSerializer,
    PatientSerializer,
)

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


# ───────────────────────────────  CQRS Buses  ────────────────────────────────
def command_bus() -> CommandBusImpl:
    return setup_di_container_from_settings(settings).command_bus()


def query_bus() -> QueryBusImpl:
    return setup_di_container_from_settings(settings).query_bus()


# ╭──────────────────────────────────────────────────────────────────────────╮
# │ Helper mix-in – parâmetros de query string                               │
# ╰──────────────────────────────────────────────────────────────────────────╯
class QueryParamsMixin:
    """Converte query params; valores malformados viram ValidationError."""

    @staticmethod
    def _int(request, name: str) -> int | None:
        raw = request.query_params.get(name)
        if raw in (None, ""):
            return None
        try:
            return int(raw)
        except ValueError:
            raise ValidationError(f"'{name}' must be an integer", details=name) from None

    @staticmethod
    def _bool(request, name: str) -> bool | None:
        raw = request.query_params.get(name)
        if raw in (None, ""):
            return None
        value = raw.strip().lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        raise ValidationError(f"'{name}' must be a boolean", details=name)

    @staticmethod
    def _datetime(request, name: str, end_of_day: bool = False) -> datetime | None:
        """Aceita ISO-8601 completo ou apenas a data (início/fim do dia, UTC)."""
        raw = request.query_params.get(name)
        if raw in (None, ""):
            return None
        try:
            value = parse_datetime(raw)
            if value is None:
                day = parse_date(raw)
                if day is None:
                    raise ValueError(raw)
                value = datetime.combine(day, time.max if end_of_day else time.min)
        except ValueError:
            raise ValidationError(f"'{name}' must be an ISO-8601 date or datetime", details=name) from None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    @staticmethod
    def _actor(request) -> str:
        return str(request.user.id)


# ────────────────────────────────
# Pacientes
# ────────────────────────────────
class PatientViewSet(QueryParamsMixin, viewsets.ViewSet):

    @track_http("PatientViewSet_list")
    def list(self, request):
        env = query_bus().dispatch(
            GetPatientsQuery(
                search_term=request.query_params.get("search"),
                page=self._int(request, "page"),
                page_size=self._int(request, "page_size"),
            )
        )
        return Response(PatientEnvelopeSerializer(env).data)

    @track_http("PatientViewSet_create")
    def create(self, request):
        dto = CreatePatientDTO.model_validate(request.data)
        view = command_bus().dispatch(CreatePatientCommand(actor_id=self._actor(request), payload=dto))
        return Response(PatientSerializer(view).data, status=status.HTTP_201_CREATED)

    @track_http("PatientViewSet_retrieve")
    def retrieve(self, request, pk=None):
        detail = query_bus().dispatch(GetPatientByIdQuery(patient_id=pk))
        if detail is None:
            raise NotFoundError(f"Patient {pk} not found", details=str(pk))
        return Response(PatientDetailSerializer(detail).data)

    @track_http("PatientViewSet_partial_update")
    def partial_update(self, request, pk=None):
        dto = UpdatePatientDTO.model_validate(request.data)
        view = command_bus().dispatch(
            UpdatePatientCommand(actor_id=self._actor(request), id=pk, payload=dto)
        )
        return Response(PatientSerializer(view).data)

    @track_http("PatientViewSet_destroy")
    def destroy(self, request, pk=None):
        deleted = command_bus().dispatch(DeletePatientCommand(actor_id=self._actor(request), id=pk))
        return Response({"deleted": deleted}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path="search")
    @track_http("PatientViewSet_search")
    def search(self, request):
        env = query_bus().dispatch(
            SearchPatientsQuery(
                search_term=request.query_params.get("q", ""),
                min_age=self._int(request, "min_age"),
                max_age=self._int(request, "max_age"),
                has_recent_diagnosis=self._bool(request, "has_recent_diagnosis"),
                page=self._int(request, "page"),
                page_size=self._int(request, "page_size"),
            )
        )
        return Response(PatientEnvelopeSerializer(env).data)

    @action(detail=True, methods=["get", "post"], url_path="diagnostic-results")
    @track_http("PatientViewSet_diagnostic_results")
    def diagnostic_results(self, request, pk=None):
        if request.method == "POST":
            dto = AddDiagnosticResultDTO.model_validate(request.data)
            view = command_bus().dispatch(
                AddDiagnosticResultCommand(actor_id=self._actor(request), patient_id=pk, payload=dto)
            )
            return Response(DiagnosticResultSerializer(view).data, status=status.HTTP_201_CREATED)

        env = query_bus().dispatch(
            GetPatientDiagnosticResultsQuery(patient_id=pk, limit=self._int(request, "limit"))
        )
        return Response(DiagnosticResultEnvelopeSerializer(env).data)


# ────────────────────────────────
# Diagnósticos (listagem com filtros)
# ────────────────────────────────
class DiagnosisViewSet(QueryParamsMixin, viewsets.ViewSet):

    @track_http("DiagnosisViewSet_list")
    def list(self, request):
        filtros = DiagnosisFilter(
            type=request.query_params.get("type"),
            is_active=self._bool(request, "is_active"),
            created_after=self._datetime(request, "created_after"),
            created_before=self._datetime(request, "created_before", end_of_day=True),
        )
        env = query_bus().dispatch(
            GetDiagnosesQuery(
                filtros=filtros,
                skip=self._int(request, "skip"),
                take=self._int(request, "take"),
            )
        )
        return Response(DiagnosticResultEnvelopeSerializer(env).data)


# ────────────────────────────────
# Resultados diagnósticos (notas)
# ────────────────────────────────
class DiagnosticResultViewSet(QueryParamsMixin, viewsets.ViewSet):

    @track_http("DiagnosticResultViewSet_partial_update")
    def partial_update(self, request, pk=None):
        dto = UpdateDiagnosticResultDTO.model_validate(request.data)
        view = command_bus().dispatch(
            UpdateDiagnosticResultCommand(actor_id=self._actor(request), id=pk, payload=dto)
        )
        return Response(DiagnosticResultSerializer(view).data)
