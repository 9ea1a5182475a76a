"""Buses CQRS, cancelamento e dispatcher de eventos."""
import threading
import uuid
from dataclasses import dataclass
from datetime import date
from unittest import mock

from django.test import SimpleTestCase

from healthhub_core.core.application.cancellation import is_cancelled, raise_if_cancelled
from healthhub_core.core.application.commands.patient_commands import CreatePatientCommand
from healthhub_core.core.application.cqrs import CommandBusImpl, QueryBusImpl, QueryDTO
from healthhub_core.core.application.dtos.patient_dto import CreatePatientDTO
from healthhub_core.core.application.handlers.patient_handlers import CreatePatientHandler
from healthhub_core.core.application.services.audit_subscriber import AuditLogSubscriber
from healthhub_core.core.domain.events.events import (
    DomainEvent,
    PatientCreatedEvent,
    PatientDeletedEvent,
)
from healthhub_core.core.domain.exceptions import (
    InternalError,
    NotFoundError,
    OperationCancelledError,
)
from healthhub_core.core.domain.services.event_dispatcher import EventDispatcher


@dataclass(frozen=True)
class PingQuery(QueryDTO):
    value: int = 0


class _Handler:
    def __init__(self, fn):
        self.fn = fn

    def handle(self, query):
        return self.fn(query)


def _raise(exc):
    def fn(_):
        raise exc
    return fn


class BusTests(SimpleTestCase):
    def setUp(self) -> None:
        self.bus = QueryBusImpl()

    def test_dispatch_returns_handler_result(self) -> None:
        self.bus.register(PingQuery, _Handler(lambda q: q.value + 1))
        self.assertEqual(self.bus.dispatch(PingQuery(value=41)), 42)

    def test_unknown_message_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            self.bus.dispatch(PingQuery())

    def test_domain_errors_pass_through(self) -> None:
        self.bus.register(PingQuery, _Handler(_raise(NotFoundError("gone"))))
        with self.assertRaises(NotFoundError):
            self.bus.dispatch(PingQuery())

    def test_unexpected_errors_become_internal_error(self) -> None:
        boom = RuntimeError("db exploded")
        self.bus.register(PingQuery, _Handler(_raise(boom)))
        with self.assertRaises(InternalError) as ctx:
            self.bus.dispatch(PingQuery())
        self.assertIs(ctx.exception.__cause__, boom)
        self.assertNotIn("db exploded", ctx.exception.message)

    def test_cancel_event_is_visible_inside_handler(self) -> None:
        def handler(_):
            raise_if_cancelled()
            return "done"

        self.bus.register(PingQuery, _Handler(handler))
        event = threading.Event()
        self.assertEqual(self.bus.dispatch(PingQuery(), cancel_event=event), "done")

        event.set()
        with self.assertRaises(OperationCancelledError):
            self.bus.dispatch(PingQuery(), cancel_event=event)
        self.assertFalse(is_cancelled())


class CancelledCommandTests(SimpleTestCase):
    def test_cancelled_create_does_not_persist_or_publish(self) -> None:
        repo = mock.Mock()
        dispatcher = mock.Mock()
        bus = CommandBusImpl(dispatcher)
        bus.register(CreatePatientCommand, CreatePatientHandler(repo, dispatcher))
        event = threading.Event()
        event.set()

        with self.assertRaises(OperationCancelledError):
            bus.dispatch(
                CreatePatientCommand(
                    actor_id="u1",
                    payload=CreatePatientDTO(first_name="Jan", last_name="Novák", date_of_birth=date(1980, 1, 1)),
                ),
                cancel_event=event,
            )
        repo.add.assert_not_called()
        dispatcher.dispatch.assert_not_called()


class EventDispatcherTests(SimpleTestCase):
    def test_exact_and_catch_all_subscribers(self) -> None:
        dispatcher = EventDispatcher()
        exact, catch_all = mock.Mock(), mock.Mock()
        dispatcher.subscribe(PatientCreatedEvent, exact)
        dispatcher.subscribe(DomainEvent, catch_all)

        created = PatientCreatedEvent(actor_id="u1", patient_id=uuid.uuid4(), full_name="Jan Novák")
        deleted = PatientDeletedEvent(actor_id="u1", patient_id=uuid.uuid4())
        dispatcher.dispatch(created)
        dispatcher.dispatch(deleted)

        exact.assert_called_once_with(created)
        self.assertEqual(catch_all.call_args_list, [mock.call(created), mock.call(deleted)])

    def test_failing_subscriber_does_not_stop_others(self) -> None:
        dispatcher = EventDispatcher()
        after = mock.Mock()
        dispatcher.subscribe(DomainEvent, mock.Mock(side_effect=RuntimeError("x")))
        dispatcher.subscribe(DomainEvent, after)

        event = PatientDeletedEvent(actor_id="u1", patient_id=uuid.uuid4())
        dispatcher.dispatch(event)
        after.assert_called_once_with(event)


class AuditLogSubscriberTests(SimpleTestCase):
    def test_audit_entry_carries_actor(self) -> None:
        pid = uuid.uuid4()
        event = PatientCreatedEvent(actor_id="doctor-7", patient_id=pid, full_name="Jan Novák")
        with mock.patch(
            "healthhub_core.core.application.services.audit_subscriber.audit_logger"
        ) as audit:
            AuditLogSubscriber()(event)

        audit.info.assert_called_once()
        kwargs = audit.info.call_args.kwargs
        self.assertEqual(kwargs["actor_id"], "doctor-7")
        self.assertEqual(kwargs["action"], "CREATE")
        self.assertEqual(kwargs["entity"], "Patient")
        self.assertEqual(kwargs["entity_id"], str(pid))
