import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('date_of_birth', models.DateField()),
                ('created_at', models.DateTimeField()),
                ('updated_at', models.DateTimeField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=1)),
            ],
            options={
                'db_table': 'patients',
                'ordering': ['last_name', 'first_name'],
                'indexes': [models.Index(fields=['last_name', 'first_name'], name='patient_name_idx')],
            },
        ),
        migrations.CreateModel(
            name='DiagnosticResult',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('diagnosis', models.CharField(max_length=500)),
                ('notes', models.TextField(blank=True, max_length=2000, null=True)),
                ('timestamp_utc', models.DateTimeField()),
                ('created_at', models.DateTimeField()),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='diagnostic_results', to='django_interface.patient')),
            ],
            options={
                'db_table': 'diagnostic_results',
                'ordering': ['-timestamp_utc'],
                'indexes': [
                    models.Index(fields=['patient', '-timestamp_utc'], name='diag_patient_ts_idx'),
                    models.Index(fields=['-created_at'], name='diag_created_idx'),
                ],
            },
        ),
    ]
