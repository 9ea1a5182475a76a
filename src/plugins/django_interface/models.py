"""
Dominio → ORM

⚑ IDs UUID gerados no domínio (o ORM apenas persiste)
⚑ Resultado diagnóstico pertence a um paciente (FK CASCADE)
⚑ `version` em pacientes para controle otimista de concorrência
"""

from __future__ import annotations

import uuid

from django.db import models
from django.db.models import Index


# ╭──────────────────────────────────────────────╮
# │ 1. Pacientes                                │
# ╰──────────────────────────────────────────────╯
class Patient(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField()
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "patients"
        ordering = ["last_name", "first_name"]
        indexes = [
            Index(fields=["last_name", "first_name"], name="patient_name_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"


# ╭──────────────────────────────────────────────╮
# │ 2. Resultados diagnósticos                  │
# ╰──────────────────────────────────────────────╯
class DiagnosticResult(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(
        Patient, on_delete=models.CASCADE, related_name="diagnostic_results"
    )
    diagnosis = models.CharField(max_length=500)
    notes = models.TextField(max_length=2000, null=True, blank=True)
    timestamp_utc = models.DateTimeField()
    created_at = models.DateTimeField()
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "diagnostic_results"
        ordering = ["-timestamp_utc"]
        indexes = [
            Index(fields=["patient", "-timestamp_utc"], name="diag_patient_ts_idx"),
            Index(fields=["-created_at"], name="diag_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.diagnosis} ({self.patient_id})"
