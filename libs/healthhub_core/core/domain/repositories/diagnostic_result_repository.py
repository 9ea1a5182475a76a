from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence

from healthhub_core.core.application.dtos.filters import DiagnosisFilter
from healthhub_core.core.domain.entities.diagnostic_result_entity import DiagnosticResultEntity


class DiagnosticResultRepository(ABC):
    @abstractmethod
    def find_by_id(self, result_id: uuid.UUID) -> DiagnosticResultEntity | None:
        ...

    @abstractmethod
    def find_by_patient_id(
        self, patient_id: uuid.UUID, limit: int | None = None
    ) -> list[DiagnosticResultEntity]:
        """Resultados do paciente, mais recentes (`timestamp_utc`) primeiro."""
        ...

    @abstractmethod
    def count_by_patient_id(self, patient_id: uuid.UUID) -> int:
        ...

    @abstractmethod
    def find_by_patient_ids(self, patient_ids: Sequence[uuid.UUID]) -> list[DiagnosticResultEntity]:
        """Todos os resultados dos pacientes informados, em uma única consulta."""
        ...

    @abstractmethod
    def find_filtered(
        self, filtros: DiagnosisFilter, skip: int | None = None, take: int | None = None
    ) -> list[DiagnosticResultEntity]:
        """Resultados filtrados, mais recentes (`created_at`) primeiro."""
        ...

    @abstractmethod
    def count_filtered(self, filtros: DiagnosisFilter) -> int:
        ...

    @abstractmethod
    def add(self, result: DiagnosticResultEntity) -> DiagnosticResultEntity:
        ...

    @abstractmethod
    def update(self, result: DiagnosticResultEntity) -> DiagnosticResultEntity:
        ...

    @abstractmethod
    def delete(self, result_id: uuid.UUID) -> bool:
        ...
