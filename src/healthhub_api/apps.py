from django.apps import AppConfig


class HealthHubConfig(AppConfig):
    name = "healthhub_api"
    verbose_name = "HealthHub API"

    def ready(self):
        from django.conf import settings

        # ─── DI container ──────────────────────────────────────────
        from healthhub_core.adapters.config.composition_root import (
            setup_di_container_from_settings,
        )

        setup_di_container_from_settings(settings)
