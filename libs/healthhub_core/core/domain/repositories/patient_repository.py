from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence

from healthhub_core.core.application.dtos.filters import PatientSearchFilter
from healthhub_core.core.domain.entities.patient_entity import PatientEntity


class PatientRepository(ABC):
    @abstractmethod
    def find_by_id(self, patient_id: uuid.UUID) -> PatientEntity | None:
        """Retorna um paciente pelo ID ou None."""
        ...

    @abstractmethod
    def find_all(self) -> list[PatientEntity]:
        ...

    @abstractmethod
    def find_filtered(
        self, search_term: str | None, page: int | None = None, page_size: int | None = None
    ) -> list[PatientEntity]:
        """
        Pacientes cujo primeiro nome, sobrenome ou algum diagnóstico
        contém `search_term` (case-insensitive), sem duplicatas,
        ordenados por sobrenome/nome.

        - page: número da página (1-based)
        - page_size: quantidade por página; None devolve tudo
        """
        ...

    @abstractmethod
    def count_filtered(self, search_term: str | None) -> int:
        """Total com o mesmo filtro de `find_filtered`."""
        ...

    @abstractmethod
    def search(
        self, filtros: PatientSearchFilter, page: int | None = None, page_size: int | None = None
    ) -> list[PatientEntity]:
        """Busca com faixa etária e presença de diagnóstico avaliadas no storage."""
        ...

    @abstractmethod
    def count_search(self, filtros: PatientSearchFilter) -> int:
        ...

    @abstractmethod
    def find_by_ids(self, ids: Sequence[uuid.UUID]) -> list[PatientEntity]:
        """Uma única consulta; ids inexistentes simplesmente não aparecem."""
        ...

    @abstractmethod
    def add(self, patient: PatientEntity) -> PatientEntity:
        ...

    @abstractmethod
    def update(self, patient: PatientEntity) -> PatientEntity:
        """
        Persiste o paciente condicionado à `version` carregada.
        Levanta ConflictError se outra escrita venceu; NotFoundError se sumiu.
        """
        ...

    @abstractmethod
    def delete(self, patient_id: uuid.UUID) -> bool:
        """Remove o paciente e seus resultados. False quando não existe."""
        ...

    @abstractmethod
    def exists(self, patient_id: uuid.UUID) -> bool:
        ...

    @abstractmethod
    def count(self) -> int:
        ...
