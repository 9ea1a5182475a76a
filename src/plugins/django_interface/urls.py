from django.conf import settings
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from .routers import build_router
from .views.auth_views import HealthCheckView, TokenView

swagger_permissions = [permissions.IsAuthenticated] if not settings.DEBUG else [permissions.AllowAny]

schema_view = get_schema_view(
    openapi.Info(
        title="HealthHub",
        default_version="v1",
        description="Pacientes e resultados diagnósticos sobre CQRS + Bus",
        license=openapi.License(name="BSD License"),
    ),
    public=settings.DEBUG,
    permission_classes=swagger_permissions,
)

router = build_router()

urlpatterns = [
    path("auth/token", TokenView.as_view(), name="auth-token"),
    path("healthz/", HealthCheckView.as_view(), name="healthz"),

    path("swagger/",     schema_view.with_ui("swagger", cache_timeout=0), name="swagger-ui"),
    path("swagger.json", schema_view.without_ui(cache_timeout=0),         name="swagger-json"),
    path("redoc/",       schema_view.with_ui("redoc",   cache_timeout=0), name="redoc-ui"),

    # rotas CRUD
    path("", include(router.urls)),
]
