from rest_framework.routers import DefaultRouter

from .views.core_views import (
    DiagnosisViewSet,
    DiagnosticResultViewSet,
    PatientViewSet,
)

# lista de (rota, ViewSet)
RESOURCES = [
    ("patients",           PatientViewSet),
    ("diagnoses",          DiagnosisViewSet),
    ("diagnostic-results", DiagnosticResultViewSet),
]

def build_router() -> DefaultRouter:
    router = DefaultRouter(trailing_slash=False)
    for prefix, viewset in RESOURCES:
        router.register(prefix, viewset, basename=prefix.replace('-', '_'))
    return router
