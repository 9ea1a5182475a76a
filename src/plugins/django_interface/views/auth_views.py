import structlog
from django.conf import settings
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from healthhub_core.adapters.security.jwt_service import JWTService
from plugins.django_interface.serializers import TokenRequestSerializer

logger = structlog.get_logger(__name__)


class TokenView(APIView):
    """
    POST /api/auth/token: emite um bearer JWT para qualquer
    username/password não vazios (não há armazenamento de usuários).
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = TokenRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data["username"]

        token = JWTService.create_token(
            subject=username,
            expires_in=settings.JWT_EXPIRES_IN,
            username=username,
        )
        logger.info("auth.token_issued", subject=username)
        return Response(
            {
                "access_token": token,
                "token_type": "Bearer",
                "expires_in": int(settings.JWT_EXPIRES_IN),
            },
            status=status.HTTP_200_OK,
        )


class HealthCheckView(APIView):
    """
    Rota GET /api/healthz/: retorna status 200 se a API estiver viva.
    """
    permission_classes = []
    authentication_classes = []

    def get(self, request):
        return Response({"status": "ok"}, status=status.HTTP_200_OK)
