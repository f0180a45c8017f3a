"""Fixtures compartilhadas

- MagicMock(spec=ABC) preserva a assinatura dos Ports
- store/local_storage usam os adapters offline reais sobre um diretório temporário
"""

from unittest.mock import MagicMock

import pytest

from biggestor.adapters.local_storage import LocalDataStore, LocalStorage
from biggestor.domain.models import (
    SYSTEM_USER_ID,
    Client,
    Job,
    JobStatus,
    ServiceType,
    User,
)
from biggestor.domain.ports import AuthProvider, ContentGenerator, DataStore, Toaster
from biggestor.services.app_data import AppDataService

FIXED_NOW = "2026-03-10T12:00:00.000Z"


def fixed_now() -> str:
    return FIXED_NOW


# ========== Dados de exemplo ==========


@pytest.fixture
def user() -> User:
    """Usuário logado"""
    return User(id="uid-ana", username="ana", email="ana@example.com")


@pytest.fixture
def teammate() -> User:
    """Colega de equipe declarado nas configurações"""
    return User(id="uid-beto", username="Beto", email="beto@example.com")


@pytest.fixture
def sample_client() -> Client:
    return Client(
        id="client-1",
        name="TechCorp",
        email="contato@techcorp.com",
        created_at="2026-01-05T10:00:00.000Z",
    )


@pytest.fixture
def sample_job(user, sample_client) -> Job:
    return Job(
        id="job-1",
        name="Vídeo Institucional",
        client_id=sample_client.id,
        service_type=ServiceType.VIDEO.value,
        value=3000.0,
        deadline="2026-03-20T23:59:59.000Z",
        status=JobStatus.PRODUCTION,
        created_at="2026-02-01T10:00:00.000Z",
        owner_id=user.id,
        owner_username=user.username,
    )


# ========== Adapters ==========


@pytest.fixture
def local_storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "local")


@pytest.fixture
def store(local_storage) -> LocalDataStore:
    return LocalDataStore(local_storage)


@pytest.fixture
def mock_toaster() -> MagicMock:
    """Toaster que registra as chamadas"""
    return MagicMock(spec=Toaster)


@pytest.fixture
def mock_store() -> MagicMock:
    """DataStore vazio"""
    mock = MagicMock(spec=DataStore)
    mock.get.return_value = None
    return mock


@pytest.fixture
def mock_provider() -> MagicMock:
    mock = MagicMock(spec=AuthProvider)
    mock.current_user.return_value = None
    return mock


@pytest.fixture
def mock_generator() -> MagicMock:
    return MagicMock(spec=ContentGenerator)


# ========== Serviços ==========


def seed_existing_account(store: DataStore, user: User, jobs=(), clients=(), contracts=()) -> None:
    """Grava dados suficientes para a conta não ser tratada como nova"""
    store.set(user.id, "settings", {"userName": user.username.title()})
    store.set(user.id, "jobs", [j.to_dict() for j in jobs])
    store.set(user.id, "clients", [c.to_dict() for c in clients])
    store.set(user.id, "contracts", [c.to_dict() for c in contracts])
    store.set(SYSTEM_USER_ID, "users", [user.to_dict()])


@pytest.fixture
def app_data(store, mock_toaster, user, sample_job, sample_client) -> AppDataService:
    """AppDataService carregado com 1 cliente e 1 job"""
    seed_existing_account(store, user, jobs=[sample_job], clients=[sample_client])
    service = AppDataService(store, mock_toaster, user, now=fixed_now)
    service.load()
    return service
