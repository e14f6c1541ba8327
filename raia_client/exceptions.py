# raia_client/exceptions.py


class RaiaClientError(Exception):
    """Base de todos os erros do cliente"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(RaiaClientError):
    """A API respondeu com erro (status HTTP + mensagem do envelope)"""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        return f"[{self.status}] {self.message}"


class UnauthorizedError(ApiError):
    """401/403 - sessão inválida, o estado da aplicação deve fazer logout"""


class TransportError(RaiaClientError):
    """Falha de rede antes de existir uma resposta HTTP"""
