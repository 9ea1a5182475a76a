import structlog

from healthhub_core.core.domain.events.events import DomainEvent

audit_logger = structlog.get_logger("healthhub.audit")


class AuditLogSubscriber:
    """Registra toda mutação com o autor explícito (`actor_id`)."""

    def __call__(self, event: DomainEvent) -> None:
        audit_logger.info(
            "audit",
            action=event.action,
            entity=event.entity,
            entity_id=event.entity_id,
            actor_id=event.actor_id,
            event_id=str(event.event_id),
            occurred_at=event.occurred_at.isoformat(),
        )
