import uuid
from dataclasses import dataclass

from healthhub_core.core.application.cqrs import CommandDTO
from healthhub_core.core.application.dtos.patient_dto import CreatePatientDTO, UpdatePatientDTO


@dataclass(frozen=True, kw_only=True)
class CreatePatientCommand(CommandDTO):
    payload: CreatePatientDTO

@dataclass(frozen=True, kw_only=True)
class UpdatePatientCommand(CommandDTO):
    id: uuid.UUID
    payload: UpdatePatientDTO

@dataclass(frozen=True, kw_only=True)
class DeletePatientCommand(CommandDTO):
    id: uuid.UUID
