import structlog

from healthhub_core.core.application.cancellation import raise_if_cancelled
from healthhub_core.core.application.commands.diagnostic_result_commands import (
    AddDiagnosticResultCommand,
    UpdateDiagnosticResultCommand,
)
from healthhub_core.core.application.cqrs import CommandHandler
from healthhub_core.core.application.dtos.views import DiagnosticResultView
from healthhub_core.core.application.services.input_sanitizer import InputSanitizer
from healthhub_core.core.application.services.view_mapper import to_result_view
from healthhub_core.core.domain.entities.diagnostic_result_entity import DiagnosticResultEntity
from healthhub_core.core.domain.events.events import (
    DiagnosticResultAddedEvent,
    DiagnosticResultUpdatedEvent,
)
from healthhub_core.core.domain.exceptions import NotFoundError
from healthhub_core.core.domain.repositories.diagnostic_result_repository import DiagnosticResultRepository
from healthhub_core.core.domain.repositories.patient_repository import PatientRepository
from healthhub_core.core.domain.services.event_dispatcher import EventDispatcher

logger = structlog.get_logger(__name__)


class AddDiagnosticResultHandler(CommandHandler[AddDiagnosticResultCommand]):
    def __init__(
        self,
        patient_repo: PatientRepository,
        result_repo: DiagnosticResultRepository,
        dispatcher: EventDispatcher,
        sanitizer: InputSanitizer,
    ):
        self.patient_repo = patient_repo
        self.result_repo = result_repo
        self.dispatcher = dispatcher
        self.sanitizer = sanitizer

    def handle(self, command: AddDiagnosticResultCommand) -> DiagnosticResultView:
        patient_id = self.sanitizer.ensure_guid(command.patient_id, "patient_id")
        dto = command.payload

        raise_if_cancelled()
        if not self.patient_repo.exists(patient_id):
            raise NotFoundError(f"Patient {patient_id} not found", details=str(patient_id))

        entity = DiagnosticResultEntity.create(patient_id, dto.diagnosis, dto.notes)

        raise_if_cancelled()
        saved = self.result_repo.add(entity)

        self.dispatcher.dispatch(
            DiagnosticResultAddedEvent(
                actor_id=command.actor_id,
                result_id=saved.id,
                patient_id=saved.patient_id,
                diagnosis=saved.diagnosis,
            )
        )
        return to_result_view(saved)


class UpdateDiagnosticResultHandler(CommandHandler[UpdateDiagnosticResultCommand]):
    """Apenas `notes` é mutável; o texto do diagnóstico é fixo após a criação."""
    def __init__(
        self,
        result_repo: DiagnosticResultRepository,
        dispatcher: EventDispatcher,
        sanitizer: InputSanitizer,
    ):
        self.result_repo = result_repo
        self.dispatcher = dispatcher
        self.sanitizer = sanitizer

    def handle(self, command: UpdateDiagnosticResultCommand) -> DiagnosticResultView:
        result_id = self.sanitizer.ensure_guid(command.id, "diagnostic_result_id")
        dto = command.payload

        raise_if_cancelled()
        result = self.result_repo.find_by_id(result_id)
        if result is None:
            raise NotFoundError(f"Diagnostic result {result_id} not found", details=str(result_id))

        if dto.diagnosis is not None and dto.diagnosis != result.diagnosis:
            logger.warning(
                "diagnostic_result.diagnosis_change_ignored",
                result_id=str(result_id),
                actor_id=command.actor_id,
            )
        if "notes" in dto.model_fields_set:
            result.update_notes(dto.notes)

        raise_if_cancelled()
        saved = self.result_repo.update(result)

        self.dispatcher.dispatch(
            DiagnosticResultUpdatedEvent(
                actor_id=command.actor_id,
                result_id=saved.id,
                patient_id=saved.patient_id,
            )
        )
        return to_result_view(saved)
