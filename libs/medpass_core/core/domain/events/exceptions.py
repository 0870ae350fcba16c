class DomainError(Exception):
    """Classe base para erros de regra de negócio."""

    default_message = "Erro de domínio."

    def __init__(self, message: str | None = None, **details) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(DomainError):
    """Entrada malformada, detectada antes de qualquer I/O."""
    default_message = "Dados inválidos."


class NotFoundError(DomainError):
    """Registro inexistente ou fora do escopo do usuário."""
    default_message = "Registro não encontrado."


class PlanNotFoundError(NotFoundError):
    default_message = "Plano não encontrado"


class BusinessRuleError(DomainError):
    """Operação válida sintaticamente, mas proibida pelo estado atual."""
    default_message = "Operação não permitida."


class DuplicateError(DomainError):
    """
    Violação de unicidade na persistência.
    Ex.: CPF de beneficiário já cadastrado.
    """
    default_message = "Registro duplicado."


class PermissionDeniedError(DomainError):
    default_message = "Permissão negada."


class ConfigurationError(DomainError):
    """Chave de API / URL ausente. Falha imediata com mensagem explícita."""
    default_message = "Configuração ausente."
