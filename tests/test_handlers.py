"""Handlers de comando e consulta sobre o banco (via buses do container)."""
import threading
import uuid
from datetime import date, datetime, timedelta, timezone

from django.test import TestCase

from healthhub_core.adapters.repositories.diagnostic_result_repo_impl import DiagnosticResultRepoImpl
from healthhub_core.adapters.repositories.patient_repo_impl import PatientRepoImpl
from healthhub_core.core.application.commands.diagnostic_result_commands import UpdateDiagnosticResultCommand
from healthhub_core.core.application.commands.patient_commands import (
    DeletePatientCommand,
    UpdatePatientCommand,
)
from healthhub_core.core.application.dtos.diagnostic_result_dto import UpdateDiagnosticResultDTO
from healthhub_core.core.application.dtos.filters import DiagnosisFilter
from healthhub_core.core.application.dtos.patient_dto import UpdatePatientDTO
from healthhub_core.core.application.queries.diagnostic_result_queries import (
    GetDiagnosesQuery,
    GetPatientDiagnosticResultsQuery,
)
from healthhub_core.core.application.queries.patient_queries import (
    GetPatientByIdQuery,
    GetPatientsQuery,
    SearchPatientsQuery,
)
from healthhub_core.core.domain.entities.diagnostic_result_entity import DiagnosticResultEntity
from healthhub_core.core.domain.exceptions import (
    ConflictError,
    NotFoundError,
    OperationCancelledError,
    ValidationError,
)
from plugins.django_interface.models import DiagnosticResult, Patient
from tests.helpers.factories import ACTOR, add_result, container, create_patient


def _years_ago(years: int, extra_days: int = 0) -> date:
    today = datetime.now(timezone.utc).date()
    return today.replace(year=today.year - years, day=min(today.day, 28)) - timedelta(days=extra_days)


class PatientCommandTests(TestCase):
    def setUp(self) -> None:
        self.commands = container().command_bus()
        self.queries = container().query_bus()

    def test_create_persists_patient(self) -> None:
        view = create_patient("Jan", "Novák")
        self.assertEqual(view.full_name, "Jan Novák")
        self.assertIsNone(view.last_diagnosis)
        self.assertEqual(view.version, 1)
        self.assertTrue(Patient.objects.filter(id=view.id).exists())

    def test_create_rejects_blank_name(self) -> None:
        with self.assertRaises(ValidationError):
            create_patient("  ", "Novák")
        self.assertEqual(Patient.objects.count(), 0)

    def test_add_result_then_detail_shows_it(self) -> None:
        patient = create_patient("Jan", "Novák", date(1980, 1, 1))
        add_result(patient.id, "Chřipka", "Mild")

        detail = self.queries.dispatch(GetPatientByIdQuery(patient_id=patient.id))

        self.assertEqual(len(detail.diagnostic_results), 1)
        self.assertEqual(detail.diagnostic_results[0].notes, "Mild")
        self.assertEqual(detail.last_diagnosis, "Chřipka")

    def test_add_result_for_missing_patient(self) -> None:
        with self.assertRaises(NotFoundError):
            add_result(uuid.uuid4(), "Chřipka")

    def test_update_renames_and_bumps_version(self) -> None:
        patient = create_patient("Jan", "Novák")
        view = self.commands.dispatch(
            UpdatePatientCommand(actor_id=ACTOR, id=patient.id, payload=UpdatePatientDTO(first_name="Jana"))
        )
        self.assertEqual(view.full_name, "Jana Novák")
        self.assertEqual(view.version, 2)
        self.assertIsNotNone(view.updated_at)

    def test_update_with_empty_payload_touches(self) -> None:
        patient = create_patient("Jan", "Novák")
        view = self.commands.dispatch(
            UpdatePatientCommand(actor_id=ACTOR, id=patient.id, payload=UpdatePatientDTO())
        )
        self.assertIsNotNone(view.updated_at)
        self.assertEqual(view.first_name, "Jan")

    def test_update_rejects_future_birth_date(self) -> None:
        patient = create_patient("Jan", "Novák")
        with self.assertRaises(ValidationError):
            self.commands.dispatch(
                UpdatePatientCommand(
                    actor_id=ACTOR,
                    id=patient.id,
                    payload=UpdatePatientDTO(date_of_birth=date.today() + timedelta(days=2)),
                )
            )

    def test_update_missing_patient(self) -> None:
        with self.assertRaises(NotFoundError):
            self.commands.dispatch(
                UpdatePatientCommand(actor_id=ACTOR, id=uuid.uuid4(), payload=UpdatePatientDTO(first_name="X"))
            )

    def test_stale_version_raises_conflict(self) -> None:
        patient = create_patient("Jan", "Novák")
        repo = PatientRepoImpl()
        first, stale = repo.find_by_id(patient.id), repo.find_by_id(patient.id)

        first.rename("Jana", "Novák")
        repo.update(first)
        stale.rename("Johana", "Novák")

        with self.assertRaises(ConflictError):
            repo.update(stale)
        self.assertEqual(Patient.objects.get(id=patient.id).first_name, "Jana")

    def test_delete_is_idempotent_and_cascades(self) -> None:
        patient = create_patient("Jan", "Novák")
        add_result(patient.id, "Chřipka")

        first = self.commands.dispatch(DeletePatientCommand(actor_id=ACTOR, id=patient.id))
        second = self.commands.dispatch(DeletePatientCommand(actor_id=ACTOR, id=patient.id))

        self.assertTrue(first)
        self.assertFalse(second)
        self.assertFalse(DiagnosticResult.objects.filter(patient_id=patient.id).exists())

    def test_delete_rejects_nil_id(self) -> None:
        with self.assertRaises(ValidationError):
            self.commands.dispatch(DeletePatientCommand(actor_id=ACTOR, id=uuid.UUID(int=0)))

    def test_cancelled_update_leaves_row_untouched(self) -> None:
        patient = create_patient("Jan", "Novák")
        event = threading.Event()
        event.set()
        with self.assertRaises(OperationCancelledError):
            self.commands.dispatch(
                UpdatePatientCommand(actor_id=ACTOR, id=patient.id, payload=UpdatePatientDTO(first_name="X")),
                cancel_event=event,
            )
        self.assertEqual(Patient.objects.get(id=patient.id).version, 1)


class DiagnosticResultCommandTests(TestCase):
    def setUp(self) -> None:
        self.commands = container().command_bus()

    def test_update_notes_keeps_diagnosis(self) -> None:
        patient = create_patient("Jan", "Novák")
        result = add_result(patient.id, "Chřipka", "Mild")

        view = self.commands.dispatch(
            UpdateDiagnosticResultCommand(
                actor_id=ACTOR,
                id=result.id,
                payload=UpdateDiagnosticResultDTO(notes="Severe", diagnosis="Angína"),
            )
        )

        self.assertEqual(view.notes, "Severe")
        self.assertEqual(view.diagnosis, "Chřipka")
        self.assertEqual(DiagnosticResult.objects.get(id=result.id).diagnosis, "Chřipka")

    def test_update_without_notes_keeps_notes(self) -> None:
        patient = create_patient("Jan", "Novák")
        result = add_result(patient.id, "Chřipka", "Mild")
        view = self.commands.dispatch(
            UpdateDiagnosticResultCommand(actor_id=ACTOR, id=result.id, payload=UpdateDiagnosticResultDTO())
        )
        self.assertEqual(view.notes, "Mild")

    def test_update_missing_result(self) -> None:
        with self.assertRaises(NotFoundError):
            self.commands.dispatch(
                UpdateDiagnosticResultCommand(
                    actor_id=ACTOR, id=uuid.uuid4(), payload=UpdateDiagnosticResultDTO(notes="x")
                )
            )


class PatientQueryTests(TestCase):
    def setUp(self) -> None:
        self.queries = container().query_bus()

    def test_search_term_filters_by_name(self) -> None:
        create_patient("Jan", "Novák")
        create_patient("Petr", "Svoboda")

        env = self.queries.dispatch(GetPatientsQuery(search_term="Jan", page=1, page_size=10))

        self.assertEqual(env.total_count, 1)
        self.assertEqual([p.full_name for p in env.nodes], ["Jan Novák"])
        self.assertFalse(env.page_info.has_next_page)

    def test_search_term_matches_diagnosis(self) -> None:
        patient = create_patient("Jan", "Novák")
        create_patient("Petr", "Svoboda")
        add_result(patient.id, "Diabetes type 2")

        env = self.queries.dispatch(GetPatientsQuery(search_term="diab"))

        self.assertEqual([p.id for p in env.nodes], [patient.id])
        self.assertEqual(env.nodes[0].last_diagnosis, "Diabetes type 2")

    def test_second_page(self) -> None:
        for i in range(15):
            create_patient(f"Name{i:02d}", "Tester")

        env = self.queries.dispatch(GetPatientsQuery(page=2, page_size=10))

        self.assertEqual(len(env.nodes), 5)
        self.assertEqual(env.total_count, 15)
        self.assertEqual(env.current_page, 2)
        self.assertEqual(env.total_pages, 2)
        self.assertTrue(env.page_info.has_previous_page)
        self.assertFalse(env.page_info.has_next_page)

    def test_invalid_page_size(self) -> None:
        with self.assertRaises(ValidationError):
            self.queries.dispatch(GetPatientsQuery(page=1, page_size=1001))

    def test_get_by_id_missing_returns_none(self) -> None:
        self.assertIsNone(self.queries.dispatch(GetPatientByIdQuery(patient_id=uuid.uuid4())))

    def test_search_requires_term(self) -> None:
        with self.assertRaises(ValidationError):
            self.queries.dispatch(SearchPatientsQuery(search_term="  "))

    def test_search_filters_by_age(self) -> None:
        young = create_patient("Ana", "Young", _years_ago(20))
        create_patient("Ana", "Old", _years_ago(70))

        env = self.queries.dispatch(SearchPatientsQuery(search_term="Ana", min_age=18, max_age=30))

        self.assertEqual([p.id for p in env.nodes], [young.id])

    def test_search_rejects_inverted_age_range(self) -> None:
        with self.assertRaises(ValidationError):
            self.queries.dispatch(SearchPatientsQuery(search_term="Ana", min_age=40, max_age=30))

    def test_search_by_diagnosis_presence(self) -> None:
        sick = create_patient("Ana", "Sick")
        healthy = create_patient("Ana", "Healthy")
        add_result(sick.id, "Chřipka")

        with_dx = self.queries.dispatch(SearchPatientsQuery(search_term="Ana", has_recent_diagnosis=True))
        without_dx = self.queries.dispatch(SearchPatientsQuery(search_term="Ana", has_recent_diagnosis=False))

        self.assertEqual([p.id for p in with_dx.nodes], [sick.id])
        self.assertEqual([p.id for p in without_dx.nodes], [healthy.id])


class DiagnosticResultQueryTests(TestCase):
    def setUp(self) -> None:
        self.queries = container().query_bus()
        self.patient = create_patient("Jan", "Novák")
        self.results = [add_result(self.patient.id, d) for d in ("Chřipka", "Angína", "Chřipka B")]

    def test_patient_results_with_limit(self) -> None:
        env = self.queries.dispatch(GetPatientDiagnosticResultsQuery(patient_id=self.patient.id, limit=2))
        self.assertEqual(len(env.nodes), 2)
        self.assertEqual(env.total_count, 3)
        self.assertTrue(env.page_info.has_next_page)

    def test_patient_results_for_missing_patient(self) -> None:
        with self.assertRaises(NotFoundError):
            self.queries.dispatch(GetPatientDiagnosticResultsQuery(patient_id=uuid.uuid4()))

    def test_patient_results_rejects_bad_limit(self) -> None:
        with self.assertRaises(ValidationError):
            self.queries.dispatch(GetPatientDiagnosticResultsQuery(patient_id=self.patient.id, limit=0))

    def test_diagnoses_filtered_by_type(self) -> None:
        env = self.queries.dispatch(GetDiagnosesQuery(filtros=DiagnosisFilter(type="chřipka")))
        self.assertEqual(env.total_count, 2)
        self.assertTrue(all("Chřipka" in r.diagnosis for r in env.nodes))
        self.assertEqual(env.nodes[0].patient.id, self.patient.id)

    def test_diagnoses_filtered_by_active_flag(self) -> None:
        DiagnosticResult.objects.filter(id=self.results[0].id).update(is_active=False)
        env = self.queries.dispatch(GetDiagnosesQuery(filtros=DiagnosisFilter(is_active=False)))
        self.assertEqual([r.id for r in env.nodes], [self.results[0].id])

    def test_diagnoses_offset_paging(self) -> None:
        env = self.queries.dispatch(GetDiagnosesQuery(skip=2, take=2))
        self.assertEqual(len(env.nodes), 1)
        self.assertEqual(env.current_page, 2)
        self.assertTrue(env.page_info.has_previous_page)
        self.assertFalse(env.page_info.has_next_page)

    def test_diagnoses_rejects_negative_skip(self) -> None:
        with self.assertRaises(ValidationError):
            self.queries.dispatch(GetDiagnosesQuery(skip=-1))


class DiagnosisDateBoundsTests(TestCase):
    def setUp(self) -> None:
        self.queries = container().query_bus()
        patient = create_patient("Jan", "Novák")
        repo = DiagnosticResultRepoImpl()
        self.moments = [datetime(2024, 3, day, 10, 0, tzinfo=timezone.utc) for day in (1, 2, 3)]
        self.ids = [
            repo.add(DiagnosticResultEntity.create(patient.id, f"Dx {i}", now=at)).id
            for i, at in enumerate(self.moments)
        ]

    def _ids(self, **bounds) -> set:
        env = self.queries.dispatch(GetDiagnosesQuery(filtros=DiagnosisFilter(**bounds)))
        return {r.id for r in env.nodes}

    def test_bounds_are_inclusive(self) -> None:
        middle = self.moments[1]
        self.assertEqual(self._ids(created_after=middle, created_before=middle), {self.ids[1]})

    def test_open_ended_bounds(self) -> None:
        self.assertEqual(self._ids(created_after=self.moments[1]), set(self.ids[1:]))
        self.assertEqual(self._ids(created_before=self.moments[1]), set(self.ids[:2]))
