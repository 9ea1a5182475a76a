from healthhub_core.core.application.cancellation import raise_if_cancelled
from healthhub_core.core.application.commands.patient_commands import (
    CreatePatientCommand,
    DeletePatientCommand,
    UpdatePatientCommand,
)
from healthhub_core.core.application.cqrs import CommandHandler
from healthhub_core.core.application.dtos.views import PatientView
from healthhub_core.core.application.services.input_sanitizer import InputSanitizer
from healthhub_core.core.application.services.view_mapper import to_patient_view
from healthhub_core.core.domain.entities.patient_entity import PatientEntity
from healthhub_core.core.domain.events.events import (
    PatientCreatedEvent,
    PatientDeletedEvent,
    PatientUpdatedEvent,
)
from healthhub_core.core.domain.exceptions import NotFoundError
from healthhub_core.core.domain.repositories.diagnostic_result_repository import DiagnosticResultRepository
from healthhub_core.core.domain.repositories.patient_repository import PatientRepository
from healthhub_core.core.domain.services.event_dispatcher import EventDispatcher


# ╭──────────────────────────────────────────────╮
# │ 1. Criação                                   │
# ╰──────────────────────────────────────────────╯
class CreatePatientHandler(CommandHandler[CreatePatientCommand]):
    def __init__(self, repo: PatientRepository, dispatcher: EventDispatcher):
        self.repo = repo
        self.dispatcher = dispatcher

    def handle(self, command: CreatePatientCommand) -> PatientView:
        dto = command.payload
        entity = PatientEntity.create(dto.first_name, dto.last_name, dto.date_of_birth)

        raise_if_cancelled()
        saved = self.repo.add(entity)

        self.dispatcher.dispatch(
            PatientCreatedEvent(
                actor_id=command.actor_id,
                patient_id=saved.id,
                full_name=saved.full_name,
            )
        )
        return to_patient_view(saved)


# ╭──────────────────────────────────────────────╮
# │ 2. Atualização parcial                       │
# ╰──────────────────────────────────────────────╯
class UpdatePatientHandler(CommandHandler[UpdatePatientCommand]):
    def __init__(
        self,
        repo: PatientRepository,
        result_repo: DiagnosticResultRepository,
        dispatcher: EventDispatcher,
        sanitizer: InputSanitizer,
    ):
        self.repo = repo
        self.result_repo = result_repo
        self.dispatcher = dispatcher
        self.sanitizer = sanitizer

    def handle(self, command: UpdatePatientCommand) -> PatientView:
        patient_id = self.sanitizer.ensure_guid(command.id, "patient_id")
        dto = command.payload

        raise_if_cancelled()
        patient = self.repo.find_by_id(patient_id)
        if patient is None:
            raise NotFoundError(f"Patient {patient_id} not found", details=str(patient_id))

        changed: list[str] = []
        if dto.first_name is not None or dto.last_name is not None:
            # ambos os nomes são revalidados juntos
            patient.rename(
                dto.first_name if dto.first_name is not None else patient.first_name,
                dto.last_name if dto.last_name is not None else patient.last_name,
            )
            changed += [f for f in ("first_name", "last_name") if getattr(dto, f) is not None]
        if dto.date_of_birth is not None:
            patient.change_date_of_birth(dto.date_of_birth)
            changed.append("date_of_birth")
        if not changed:
            patient.touch()

        raise_if_cancelled()
        saved = self.repo.update(patient)
        results = self.result_repo.find_by_patient_id(saved.id)

        self.dispatcher.dispatch(
            PatientUpdatedEvent(
                actor_id=command.actor_id,
                patient_id=saved.id,
                changed_fields=tuple(changed),
            )
        )
        return to_patient_view(saved, results)


# ╭──────────────────────────────────────────────╮
# │ 3. Remoção (idempotente)                     │
# ╰──────────────────────────────────────────────╯
class DeletePatientHandler(CommandHandler[DeletePatientCommand]):
    def __init__(
        self,
        repo: PatientRepository,
        dispatcher: EventDispatcher,
        sanitizer: InputSanitizer,
    ):
        self.repo = repo
        self.dispatcher = dispatcher
        self.sanitizer = sanitizer

    def handle(self, command: DeletePatientCommand) -> bool:
        patient_id = self.sanitizer.ensure_guid(command.id, "patient_id")

        raise_if_cancelled()
        deleted = self.repo.delete(patient_id)
        if deleted:
            self.dispatcher.dispatch(
                PatientDeletedEvent(actor_id=command.actor_id, patient_id=patient_id)
            )
        return deleted
