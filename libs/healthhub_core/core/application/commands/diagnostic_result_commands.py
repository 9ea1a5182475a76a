import uuid
from dataclasses import dataclass

from healthhub_core.core.application.cqrs import CommandDTO
from healthhub_core.core.application.dtos.diagnostic_result_dto import (
    AddDiagnosticResultDTO,
    UpdateDiagnosticResultDTO,
)


@dataclass(frozen=True, kw_only=True)
class AddDiagnosticResultCommand(CommandDTO):
    patient_id: uuid.UUID
    payload: AddDiagnosticResultDTO

@dataclass(frozen=True, kw_only=True)
class UpdateDiagnosticResultCommand(CommandDTO):
    id: uuid.UUID
    payload: UpdateDiagnosticResultDTO
