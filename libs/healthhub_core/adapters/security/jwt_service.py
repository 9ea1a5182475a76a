from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings


class JWTService:
    """
    Serviço de criação e validação de tokens JWT.
    `iss`/`aud` só são emitidos e exigidos quando configurados.
    """

    @staticmethod
    def create_token(subject: str, expires_in: int | None = None, **claims) -> str:
        """Gera um token JWT com claim 'sub' e expiração."""
        now = datetime.now(timezone.utc)
        ttl = int(expires_in if expires_in is not None else settings.JWT_EXPIRES_IN)
        payload = {
            "sub": str(subject),
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
            **claims,
        }
        if settings.JWT_ISSUER:
            payload["iss"] = settings.JWT_ISSUER
        if settings.JWT_AUDIENCE:
            payload["aud"] = settings.JWT_AUDIENCE

        # PyJWT retorna str no v2+
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> dict:
        """
        Decodifica e valida o token JWT, retornando o payload.
        Lança jwt.PyJWTError se inválido ou expirado.
        """
        options = {}
        if settings.JWT_ISSUER:
            options["issuer"] = settings.JWT_ISSUER
        if settings.JWT_AUDIENCE:
            options["audience"] = settings.JWT_AUDIENCE
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            **options,
        )
