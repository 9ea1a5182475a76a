from __future__ import annotations

import uuid
from collections.abc import Iterable

import structlog

from healthhub_core.core.application.cancellation import raise_if_cancelled
from healthhub_core.core.domain.entities.diagnostic_result_entity import DiagnosticResultEntity
from healthhub_core.core.domain.entities.patient_entity import PatientEntity
from healthhub_core.core.domain.repositories.diagnostic_result_repository import DiagnosticResultRepository
from healthhub_core.core.domain.repositories.patient_repository import PatientRepository

logger = structlog.get_logger(__name__)


def _unique(ids: Iterable[uuid.UUID]) -> list[uuid.UUID]:
    return list(dict.fromkeys(ids))


class BatchLoader:
    """
    Carrega entidades relacionadas de vários ids com uma única ida ao storage.
    Uma instância por requisição (Factory no container).
    """
    def __init__(
        self,
        patient_repo: PatientRepository,
        result_repo: DiagnosticResultRepository,
    ) -> None:
        self.patient_repo = patient_repo
        self.result_repo = result_repo

    def load_patients(self, ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, PatientEntity | None]:
        keys = _unique(ids)
        if not keys:
            return {}
        raise_if_cancelled()
        found = {p.id: p for p in self.patient_repo.find_by_ids(keys)}
        logger.debug("batch_loader.patients", requested=len(keys), found=len(found))
        return {k: found.get(k) for k in keys}

    def load_results_by_patient(
        self, ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, list[DiagnosticResultEntity]]:
        keys = _unique(ids)
        if not keys:
            return {}
        raise_if_cancelled()
        grouped: dict[uuid.UUID, list[DiagnosticResultEntity]] = {k: [] for k in keys}
        results = self.result_repo.find_by_patient_ids(keys)
        for r in results:
            if r.patient_id in grouped:
                grouped[r.patient_id].append(r)
        logger.debug("batch_loader.results", requested=len(keys), found=len(results))
        return grouped
