"""Comando de seed para desenvolvimento."""
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from plugins.django_interface.models import DiagnosticResult, Patient


class SeedDataCommandTests(TestCase):
    def test_seed_creates_patients(self) -> None:
        out = StringIO()
        call_command("seed_data", patients=5, max_results=2, seed=7, stdout=out)
        self.assertEqual(Patient.objects.count(), 5)
        self.assertLessEqual(DiagnosticResult.objects.count(), 10)
        self.assertIn("5 pacientes", out.getvalue())

    def test_seed_refuses_populated_database_without_force(self) -> None:
        call_command("seed_data", patients=1, stdout=StringIO())
        with self.assertRaises(CommandError):
            call_command("seed_data", patients=1, stdout=StringIO())
        call_command("seed_data", patients=1, force=True, stdout=StringIO())
        self.assertEqual(Patient.objects.count(), 2)
