"""Exceções específicas do domínio"""


class BigGestorError(Exception):
    """Exceção base do BIG Gestor"""

    pass


class StorageWriteError(BigGestorError):
    """Falha ao gravar um documento no armazenamento remoto"""

    def __init__(self, owner_key: str, collection_key: str, reason: str = "") -> None:
        self.owner_key = owner_key
        self.collection_key = collection_key
        message = f"failed to write {owner_key}/{collection_key}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class AuthProviderError(BigGestorError):
    """Erro retornado pelo provedor de autenticação (Firebase, modo offline)"""

    pass


class ValidationError(BigGestorError):
    """Dados inválidos detectados antes de qualquer mutação.

    A mensagem já é a string em português exibida ao usuário.
    """

    pass


class ImportDataError(BigGestorError):
    """Arquivo de backup inválido"""

    pass


class AssistantError(BigGestorError):
    """Erro na chamada ao modelo generativo"""

    pass


class AssistantThrottledError(AssistantError):
    """Chamada bloqueada pelo intervalo mínimo entre requisições"""

    def __init__(self, retry_after: float) -> None:
        self.retry_after = retry_after
        super().__init__(f"assistant throttled, retry in {retry_after:.0f}s")
