"""
Admin site registry
-------------------
Registra os modelos de forma dinâmica a partir de um único dicionário.
"""

import structlog
from django.contrib import admin as django_admin

from . import models

logger = structlog.get_logger(__name__)

# ╭──────────────────────────────────────────────╮
# │ Configuração de cada ModelAdmin             │
# ╰──────────────────────────────────────────────╯
MODEL_ADMIN_REGISTRY: dict[type[models.models.Model], dict] = {
    models.Patient: dict(
        list_display=("last_name", "first_name", "date_of_birth", "created_at", "version"),
        search_fields=("first_name", "last_name"),
        readonly_fields=("version",),
    ),
    models.DiagnosticResult: dict(
        list_display=("patient", "diagnosis", "timestamp_utc", "is_active"),
        list_filter=("is_active",),
        search_fields=("diagnosis",),
    ),
}

# ╭──────────────────────────────────────────────╮
# │ Registro dinâmico                           │
# ╰──────────────────────────────────────────────╯
for model, opts in MODEL_ADMIN_REGISTRY.items():
    admin_class = type(f"{model.__name__}Admin", (django_admin.ModelAdmin,), opts)
    django_admin.site.register(model, admin_class)
    logger.debug("Registered model in admin", model=model.__name__)
