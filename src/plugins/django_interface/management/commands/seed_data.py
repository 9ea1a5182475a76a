from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from healthhub_core.adapters.config.composition_root import setup_di_container_from_settings
from healthhub_core.core.application.commands.diagnostic_result_commands import AddDiagnosticResultCommand
from healthhub_core.core.application.commands.patient_commands import CreatePatientCommand
from healthhub_core.core.application.dtos.diagnostic_result_dto import AddDiagnosticResultDTO
from healthhub_core.core.application.dtos.patient_dto import CreatePatientDTO
from plugins.django_interface.models import Patient

FIRST_NAMES = ["Jan", "Petr", "Eva", "Jana", "Tomáš", "Lucie", "Martin", "Tereza"]
LAST_NAMES = ["Novák", "Svoboda", "Dvořák", "Černý", "Procházka", "Kučera"]
DIAGNOSES = ["Chřipka", "Angína", "Hypertenze", "Diabetes type 2", "Astma", "Migréna"]


class Command(BaseCommand):
    help = (
        "Popula pacientes e resultados diagnósticos de exemplo (desenvolvimento).\n"
        "ATENÇÃO: recusa rodar com pacientes existentes, a menos que --force."
    )

    def add_arguments(self, parser) -> None:
        parser.add_argument("--patients", type=int, default=20, help="Quantidade de pacientes.")
        parser.add_argument(
            "--max-results", type=int, default=3,
            help="Máximo de resultados diagnósticos por paciente.",
        )
        parser.add_argument("--seed", type=int, help="Semente do gerador (saída reprodutível).")
        parser.add_argument("--actor", default="seed", help="actor_id registrado na auditoria.")
        parser.add_argument("--force", action="store_true", help="Executa mesmo com pacientes no banco.")

    @transaction.atomic
    def handle(self, *args: Any, **opt: Any) -> None:
        if opt["patients"] < 1 or opt["max_results"] < 0:
            raise CommandError("--patients deve ser >= 1 e --max-results >= 0.")
        if Patient.objects.exists() and not opt["force"]:
            raise CommandError("Já existem pacientes no banco. Para reexecutar use --force.")

        rng = random.Random(opt["seed"])
        cmd_bus = setup_di_container_from_settings(settings).command_bus()
        today = date.today()
        results = 0

        self.stdout.write(self.style.WARNING("--- INICIANDO SEED ---"))
        for _ in range(opt["patients"]):
            patient = cmd_bus.dispatch(
                CreatePatientCommand(
                    actor_id=opt["actor"],
                    payload=CreatePatientDTO(
                        first_name=rng.choice(FIRST_NAMES),
                        last_name=rng.choice(LAST_NAMES),
                        date_of_birth=today - timedelta(days=rng.randint(365, 90 * 365)),
                    ),
                )
            )
            for diagnosis in rng.sample(DIAGNOSES, rng.randint(0, min(opt["max_results"], len(DIAGNOSES)))):
                cmd_bus.dispatch(
                    AddDiagnosticResultCommand(
                        actor_id=opt["actor"],
                        patient_id=patient.id,
                        payload=AddDiagnosticResultDTO(diagnosis=diagnosis),
                    )
                )
                results += 1

        self.stdout.write(
            self.style.SUCCESS(f"🎉 {opt['patients']} pacientes e {results} resultados criados.")
        )
