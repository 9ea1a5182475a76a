class HealthHubError(Exception):
    """
    Classe base para todas as exceções de domínio.

    Cada subclasse carrega um `code` estável (usado pela camada HTTP para
    escolher o status) e uma mensagem legível para o chamador.
    """
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, str | None]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(HealthHubError):
    """Entrada malformada ou fora do intervalo."""
    code = "VALIDATION_ERROR"


class NotFoundError(HealthHubError):
    """Entidade referenciada não existe."""
    code = "NOT_FOUND"


class UnauthorizedError(HealthHubError):
    """Chamador sem permissão. Produzido pela borda de autenticação."""
    code = "UNAUTHORIZED"


class RateLimitError(HealthHubError):
    """Reservado: nenhuma operação do core dispara este erro hoje."""
    code = "RATE_LIMIT_EXCEEDED"


class ConflictError(HealthHubError):
    """Atualização concorrente detectada (versão desatualizada)."""
    code = "CONFLICT"


class OperationCancelledError(HealthHubError):
    """O chamador cancelou a operação antes do término."""
    code = "CANCELLED"


class InternalError(HealthHubError):
    """
    Qualquer falha inesperada. A mensagem é sempre genérica;
    o detalhe fica apenas no log do servidor.
    """
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "An unexpected error occurred", details: str | None = None) -> None:
        super().__init__(message, details)
