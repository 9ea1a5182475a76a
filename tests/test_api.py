"""Rotas REST: formato camelCase, envelope de paginação e corpo de erro."""
import uuid
from datetime import datetime, timezone

from django.test import TestCase

from healthhub_core.adapters.repositories.diagnostic_result_repo_impl import DiagnosticResultRepoImpl
from healthhub_core.adapters.security.jwt_service import JWTService
from healthhub_core.core.domain.entities.diagnostic_result_entity import DiagnosticResultEntity


class ApiTestCase(TestCase):
    def setUp(self) -> None:
        self.auth = {"HTTP_AUTHORIZATION": f"Bearer {JWTService.create_token('doctor')}"}

    def post(self, url, data):
        return self.client.post(url, data, content_type="application/json", **self.auth)

    def patch(self, url, data):
        return self.client.patch(url, data, content_type="application/json", **self.auth)

    def get(self, url, params=None):
        return self.client.get(url, params or {}, **self.auth)

    def create_patient(self, first="Jan", last="Novák", born="1980-01-01") -> dict:
        resp = self.post("/api/patients", {"firstName": first, "lastName": last, "dateOfBirth": born})
        self.assertEqual(resp.status_code, 201, resp.content)
        return resp.json()


class PatientApiTests(ApiTestCase):
    def test_create_returns_camel_case_view(self) -> None:
        body = self.create_patient()
        self.assertEqual(body["fullName"], "Jan Novák")
        self.assertEqual(body["dateOfBirth"], "1980-01-01")
        self.assertIsNone(body["lastDiagnosis"])
        self.assertEqual(body["version"], 1)

    def test_list_returns_envelope(self) -> None:
        self.create_patient("Jan", "Novák")
        self.create_patient("Petr", "Svoboda")

        resp = self.get("/api/patients", {"search": "Jan", "page": 1, "page_size": 10})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["totalCount"], 1)
        self.assertEqual(body["currentPage"], 1)
        self.assertEqual(body["nodes"][0]["firstName"], "Jan")
        self.assertEqual(
            set(body["pageInfo"]), {"hasNextPage", "hasPreviousPage", "startCursor", "endCursor"}
        )

    def test_retrieve_includes_results(self) -> None:
        patient = self.create_patient()
        add = self.post(f"/api/patients/{patient['id']}/diagnostic-results", {"diagnosis": "Chřipka", "notes": "Mild"})
        self.assertEqual(add.status_code, 201)

        resp = self.get(f"/api/patients/{patient['id']}")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["lastDiagnosis"], "Chřipka")
        self.assertEqual(body["diagnosticResults"][0]["notes"], "Mild")

    def test_retrieve_unknown_patient_is_not_found(self) -> None:
        resp = self.get(f"/api/patients/{uuid.uuid4()}")
        self.assertEqual(resp.status_code, 404)
        error = resp.json()["error"]
        self.assertEqual(error["code"], "NOT_FOUND")
        self.assertEqual(set(error), {"code", "message", "details", "timestamp", "path"})
        self.assertTrue(error["path"].startswith("/api/patients/"))

    def test_malformed_id_is_validation_error(self) -> None:
        resp = self.get("/api/patients/not-a-guid")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")

    def test_missing_field_is_validation_error(self) -> None:
        resp = self.post("/api/patients", {"firstName": "Jan", "dateOfBirth": "1980-01-01"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")

    def test_partial_update(self) -> None:
        patient = self.create_patient()
        resp = self.patch(f"/api/patients/{patient['id']}", {"lastName": "Dvořák"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["fullName"], "Jan Dvořák")
        self.assertEqual(resp.json()["version"], 2)

    def test_delete_twice(self) -> None:
        patient = self.create_patient()
        first = self.client.delete(f"/api/patients/{patient['id']}", **self.auth)
        second = self.client.delete(f"/api/patients/{patient['id']}", **self.auth)
        self.assertEqual(first.json(), {"deleted": True})
        self.assertEqual(second.json(), {"deleted": False})

    def test_page_size_over_limit(self) -> None:
        resp = self.get("/api/patients", {"page": 1, "page_size": 1001})
        self.assertEqual(resp.status_code, 400)

    def test_non_numeric_page(self) -> None:
        resp = self.get("/api/patients", {"page": "two"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["details"], "page")

    def test_search_action(self) -> None:
        self.create_patient("Ana", "Young", "2000-01-01")
        resp = self.get("/api/patients/search", {"q": "Ana", "has_recent_diagnosis": "false"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["totalCount"], 1)

    def test_search_without_term(self) -> None:
        resp = self.get("/api/patients/search")
        self.assertEqual(resp.status_code, 400)


class DiagnosisApiTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.patient = self.create_patient()
        url = f"/api/patients/{self.patient['id']}/diagnostic-results"
        self.result = self.post(url, {"diagnosis": "Chřipka"}).json()
        self.post(url, {"diagnosis": "Angína"})

    def test_patient_results_list(self) -> None:
        resp = self.get(f"/api/patients/{self.patient['id']}/diagnostic-results", {"limit": 1})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["totalCount"], 2)
        self.assertEqual(len(body["nodes"]), 1)

    def test_diagnoses_with_patient_summary(self) -> None:
        resp = self.get("/api/diagnoses", {"type": "Angína", "is_active": "true"})
        self.assertEqual(resp.status_code, 200)
        node = resp.json()["nodes"][0]
        self.assertEqual(node["diagnosis"], "Angína")
        self.assertEqual(node["patient"]["id"], self.patient["id"])

    def test_diagnoses_bad_boolean(self) -> None:
        resp = self.get("/api/diagnoses", {"is_active": "maybe"})
        self.assertEqual(resp.status_code, 400)

    def test_update_notes(self) -> None:
        resp = self.patch(f"/api/diagnostic-results/{self.result['id']}", {"notes": "Recovered"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["notes"], "Recovered")
        self.assertEqual(resp.json()["diagnosis"], "Chřipka")



class DiagnosisDateFilterApiTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        patient = self.create_patient()
        repo = DiagnosticResultRepoImpl()
        self.ids = [
            str(repo.add(DiagnosticResultEntity.create(uuid.UUID(patient["id"]), f"Dx {day}", now=at)).id)
            for day, at in (
                (1, datetime(2024, 3, 1, 23, 59, 59, tzinfo=timezone.utc)),
                (2, datetime(2024, 3, 2, 0, 0, tzinfo=timezone.utc)),
                (3, datetime(2024, 3, 2, 23, 59, 59, 999999, tzinfo=timezone.utc)),
                (4, datetime(2024, 3, 3, 0, 0, tzinfo=timezone.utc)),
            )
        ]

    def test_date_only_bounds_cover_whole_day(self) -> None:
        resp = self.get("/api/diagnoses", {"created_after": "2024-03-02", "created_before": "2024-03-02"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual({n["id"] for n in resp.json()["nodes"]}, set(self.ids[1:3]))

    def test_full_datetime_bound_is_inclusive(self) -> None:
        resp = self.get("/api/diagnoses", {"created_before": "2024-03-02T00:00:00Z"})
        self.assertEqual({n["id"] for n in resp.json()["nodes"]}, set(self.ids[:2]))

    def test_malformed_date_is_validation_error(self) -> None:
        resp = self.get("/api/diagnoses", {"created_after": "yesterday"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["details"], "created_after")

class HealthCheckTests(TestCase):
    def test_healthz_is_public(self) -> None:
        resp = self.client.get("/api/healthz/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})
