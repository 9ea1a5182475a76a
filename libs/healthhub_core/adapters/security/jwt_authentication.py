import jwt
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from healthhub_core.adapters.security.jwt_service import JWTService


class SimpleUser:
    """
    Representa um usuário mínimo compatível com DRF.
    O `id` (claim 'sub') é o actor_id repassado aos comandos.
    """
    def __init__(self, id: str, username: str | None = None):
        self.id = id
        self.username = username or id
        self.is_authenticated = True

    def __str__(self):
        return f"<SimpleUser id={self.id}>"

class JWTAuthentication(BaseAuthentication):
    """
    Lê o header Authorization: Bearer <token>,
    valida com o JWTService e retorna (user, token).
    """
    keyword = "Bearer"

    def authenticate(self, request):
        header = request.headers.get("Authorization", "")
        parts = header.split()

        if len(parts) != 2 or parts[0].lower() != self.keyword.lower():
            return None

        token = parts[1]
        try:
            payload = JWTService.decode_token(token)
        except jwt.PyJWTError as e:
            raise exceptions.AuthenticationFailed(f"Invalid token: {e}") from e

        user_id = payload.get("sub")
        if not user_id:
            raise exceptions.AuthenticationFailed("Token does not carry the 'sub' claim.")

        return (SimpleUser(id=user_id, username=payload.get("username")), token)

    def authenticate_header(self, request):
        # presença do header faz o DRF responder 401 em vez de 403
        return f'{self.keyword} realm="api"'
