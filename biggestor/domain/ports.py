"""Ports - interfaces dos serviços externos (ABC)

Cada port define o contrato com um backend externo. Os adapters herdam estas
ABCs e implementam todos os métodos abstratos; uma implementação incompleta
falha já na instanciação.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from biggestor.domain.models import AssistantReply, Client, Job, User


class DataStore(ABC):
    """Armazenamento de documentos JSON por (dono, coleção) (GCS, local)"""

    @abstractmethod
    def get(self, owner_key: str, collection_key: str) -> Any | None:
        """Lê o documento. Retorna None se não existir ou se a leitura falhar"""
        pass

    @abstractmethod
    def set(self, owner_key: str, collection_key: str, data: Any) -> None:
        """Substitui o documento inteiro"""
        pass

    @abstractmethod
    def delete(self, owner_key: str, collection_key: str) -> None:
        """Remove o documento"""
        pass


class KeyValueStorage(ABC):
    """Armazenamento chave/valor de strings no dispositivo (equivalente ao localStorage)"""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass


class AuthProvider(ABC):
    """Provedor de autenticação hospedado (Firebase Auth, modo offline).

    Falhas do provedor são levantadas como AuthProviderError.
    """

    @abstractmethod
    def current_user(self) -> User | None:
        """Usuário da sessão restaurada, se houver"""
        pass

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> User:
        pass

    @abstractmethod
    def sign_up(self, email: str, password: str, username: str) -> User:
        pass

    @abstractmethod
    def sign_out(self) -> None:
        pass

    @abstractmethod
    def update_password(self, user: User, new_password: str) -> None:
        pass


class ContentGenerator(ABC):
    """IA generativa (Gemini)"""

    @abstractmethod
    def draft_contract(self, job: Job, client: Client) -> str:
        """Gera o texto de um contrato de prestação de serviços"""
        pass

    @abstractmethod
    def draft_proposal(self, job: Job, client: Client) -> str:
        """Gera o texto de uma proposta comercial"""
        pass

    @abstractmethod
    def chat(self, query: str, jobs: list[Job], clients: list[Client]) -> AssistantReply:
        """Responde ao usuário, podendo devolver chamadas de ferramentas"""
        pass


class Toaster(ABC):
    """Feedback ao usuário (toasts da interface)"""

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass
