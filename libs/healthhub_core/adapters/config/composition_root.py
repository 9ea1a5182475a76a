from dependency_injector import containers, providers

container = None

def setup_di_container_from_settings(settings):
    """Inicializa o DI container após o Django já estar com settings carregados."""
    global container  # noqa: PLW0603
    if container is not None:
        return container

    # ------- IMPORTS QUE USAM DJANGO MODELS -------
    import redis
    import structlog

    from healthhub_core.adapters.repositories.diagnostic_result_repo_impl import DiagnosticResultRepoImpl
    from healthhub_core.adapters.repositories.patient_repo_impl import PatientRepoImpl

    # Commands
    from healthhub_core.core.application.commands.diagnostic_result_commands import (
        AddDiagnosticResultCommand,
        UpdateDiagnosticResultCommand,
    )
    from healthhub_core.core.application.commands.patient_commands import (
        CreatePatientCommand,
        DeletePatientCommand,
        UpdatePatientCommand,
    )

    # CQRS buses
    from healthhub_core.core.application.cqrs import CommandBusImpl, QueryBusImpl

    # Handlers (comandos)
    from healthhub_core.core.application.handlers.diagnostic_result_handlers import (
        AddDiagnosticResultHandler,
        UpdateDiagnosticResultHandler,
    )
    from healthhub_core.core.application.handlers.patient_handlers import (
        CreatePatientHandler,
        DeletePatientHandler,
        UpdatePatientHandler,
    )

    # Handlers (queries)
    from healthhub_core.core.application.handlers.query_handlers import (
        GetDiagnosesHandler,
        GetPatientByIdHandler,
        GetPatientDiagnosticResultsHandler,
        GetPatientsHandler,
        SearchPatientsHandler,
    )

    # Queries
    from healthhub_core.core.application.queries.diagnostic_result_queries import (
        GetDiagnosesQuery,
        GetPatientDiagnosticResultsQuery,
    )
    from healthhub_core.core.application.queries.patient_queries import (
        GetPatientByIdQuery,
        GetPatientsQuery,
        SearchPatientsQuery,
    )

    # Serviços
    from healthhub_core.core.application.services.audit_subscriber import AuditLogSubscriber
    from healthhub_core.core.application.services.batch_loader import BatchLoader
    from healthhub_core.core.application.services.input_sanitizer import InputSanitizer
    from healthhub_core.core.domain.events.events import DomainEvent
    from healthhub_core.core.domain.services.event_dispatcher import EventDispatcher

    # ─────────────────────────────────────────────────────────
    # Construção do container DI
    # ─────────────────────────────────────────────────────────
    class Container(containers.DeclarativeContainer):
        config = providers.Configuration()

        # Infra
        logger           = providers.Singleton(structlog.get_logger)
        event_dispatcher = providers.Singleton(EventDispatcher)
        audit_subscriber = providers.Singleton(AuditLogSubscriber)

        # CQRS
        command_bus = providers.Singleton(CommandBusImpl, dispatcher=event_dispatcher)
        query_bus   = providers.Singleton(QueryBusImpl)

        # Redis (cache de queries)
        redis_client = providers.Singleton(
            redis.Redis,
            host=config.redis.host,
            port=config.redis.port,
            db=config.redis.db,
            password=config.redis.password,
        )

        # Implementações de Repositórios
        patient_repo = providers.Singleton(PatientRepoImpl)
        result_repo  = providers.Singleton(DiagnosticResultRepoImpl)

        # Serviços
        sanitizer    = providers.Singleton(InputSanitizer)
        # uma instância por requisição
        batch_loader = providers.Factory(
            BatchLoader,
            patient_repo=patient_repo,
            result_repo=result_repo,
        )

        # Handlers (comandos)
        create_patient_handler = providers.Factory(
            CreatePatientHandler, repo=patient_repo, dispatcher=event_dispatcher
        )
        update_patient_handler = providers.Factory(
            UpdatePatientHandler,
            repo=patient_repo,
            result_repo=result_repo,
            dispatcher=event_dispatcher,
            sanitizer=sanitizer,
        )
        delete_patient_handler = providers.Factory(
            DeletePatientHandler, repo=patient_repo, dispatcher=event_dispatcher, sanitizer=sanitizer
        )
        add_result_handler = providers.Factory(
            AddDiagnosticResultHandler,
            patient_repo=patient_repo,
            result_repo=result_repo,
            dispatcher=event_dispatcher,
            sanitizer=sanitizer,
        )
        update_result_handler = providers.Factory(
            UpdateDiagnosticResultHandler,
            result_repo=result_repo,
            dispatcher=event_dispatcher,
            sanitizer=sanitizer,
        )

        # Handlers (queries)
        get_patients_handler = providers.Factory(
            GetPatientsHandler,
            repo=patient_repo,
            loader_factory=batch_loader.provider,
            sanitizer=sanitizer,
            cache=redis_client,
        )
        get_patient_handler = providers.Factory(
            GetPatientByIdHandler,
            repo=patient_repo,
            result_repo=result_repo,
            sanitizer=sanitizer,
            cache=redis_client,
        )
        search_patients_handler = providers.Factory(
            SearchPatientsHandler,
            repo=patient_repo,
            loader_factory=batch_loader.provider,
            sanitizer=sanitizer,
            cache=redis_client,
        )
        get_patient_results_handler = providers.Factory(
            GetPatientDiagnosticResultsHandler,
            patient_repo=patient_repo,
            result_repo=result_repo,
            sanitizer=sanitizer,
            cache=redis_client,
        )
        get_diagnoses_handler = providers.Factory(
            GetDiagnosesHandler,
            result_repo=result_repo,
            loader_factory=batch_loader.provider,
            sanitizer=sanitizer,
        )

        def init(self):
            # Auditoria: escuta todos os eventos de domínio
            self.event_dispatcher().subscribe(DomainEvent, self.audit_subscriber())

            # Bus de comandos
            cmd_bus = self.command_bus()
            cmd_bus.register(CreatePatientCommand, self.create_patient_handler())
            cmd_bus.register(UpdatePatientCommand, self.update_patient_handler())
            cmd_bus.register(DeletePatientCommand, self.delete_patient_handler())
            cmd_bus.register(AddDiagnosticResultCommand, self.add_result_handler())
            cmd_bus.register(UpdateDiagnosticResultCommand, self.update_result_handler())

            # Bus de queries
            qry_bus = self.query_bus()
            qry_bus.register(GetPatientsQuery, self.get_patients_handler())
            qry_bus.register(GetPatientByIdQuery, self.get_patient_handler())
            qry_bus.register(SearchPatientsQuery, self.search_patients_handler())
            qry_bus.register(GetPatientDiagnosticResultsQuery, self.get_patient_results_handler())
            qry_bus.register(GetDiagnosesQuery, self.get_diagnoses_handler())

    # ------- INSTANCIAÇÃO E CONFIG -------
    container = Container()
    container.config.redis.host.from_value(settings.REDIS_HOST)
    container.config.redis.port.from_value(settings.REDIS_PORT)
    container.config.redis.db.from_value(settings.REDIS_DB)
    container.config.redis.password.from_value(settings.REDIS_PASSWORD)
    Container.init(container)
    structlog.get_logger(__name__).info("di_container.ready")
    return container
