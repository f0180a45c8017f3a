"""Factory - montagem das dependências

Monta adapters e serviços a partir do AppConfig. Sem bucket configurado,
tudo roda no modo offline (armazenamento e autenticação locais).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from biggestor.adapters.local_auth import LocalAuthProvider
from biggestor.adapters.local_storage import LocalDataStore, LocalStorage
from biggestor.config import AppConfig
from biggestor.domain.errors import AssistantError
from biggestor.domain.models import AssistantReply, Client, Job
from biggestor.domain.ports import (
    AuthProvider,
    ContentGenerator,
    DataStore,
    KeyValueStorage,
    Toaster,
)
from biggestor.services.admin import BugReportManager, LicenseManager
from biggestor.services.app_data import AppDataService
from biggestor.services.assistant import AssistantService
from biggestor.services.auth import AuthService
from biggestor.services.session import SessionManager

logger = logging.getLogger(__name__)


@dataclass
class Application:
    """Serviços montados para um processo"""

    config: AppConfig
    store: DataStore
    local_storage: KeyValueStorage
    toaster: Toaster
    auth: AuthService
    session: SessionManager
    content_generator: ContentGenerator
    licenses: LicenseManager
    bug_reports: BugReportManager

    def assistant(self) -> AssistantService:
        """Assistente ligado aos dados da sessão atual"""
        app_data = self.session.app_data
        if app_data is None:
            raise RuntimeError("assistant requires an authenticated session")
        return AssistantService(self.content_generator, app_data)


def create_application(
    config: AppConfig | None = None, toaster: Toaster | None = None
) -> Application:
    """
    Monta a aplicação.

    Args:
        config: configuração (None = ler das variáveis de ambiente)
        toaster: destino dos toasts (padrão: log)

    Raises:
        ValueError: configuração obrigatória ausente
    """
    if config is None:
        config = AppConfig.from_env()

    logger.info(
        "Creating application: remote=%s, bucket=%s",
        config.remote_enabled,
        config.gcs_bucket_name or "-",
    )

    local_storage = LocalStorage(config.local_data_dir)
    toaster = toaster or _LoggingToaster()

    # 1. Armazenamento e autenticação
    if config.remote_enabled:
        from biggestor.adapters.cloud_storage import GCSDataStore
        from biggestor.adapters.firebase_auth import FirebaseAuthProvider, get_firebase_app

        store: DataStore = GCSDataStore(config.gcs_bucket_name)
        provider: AuthProvider = FirebaseAuthProvider(
            api_key=config.firebase_api_key,
            app=get_firebase_app(config.project_id),
        )
        logger.info("Remote persistence enabled (GCS + Firebase Auth)")
    else:
        store = LocalDataStore(local_storage)
        provider = LocalAuthProvider(store, local_storage)
        logger.warning("GCS_BUCKET_NAME not set, running in offline mode (%s)", config.local_data_dir)

    # 2. IA generativa (opcional)
    content_generator = _create_content_generator(config)

    # 3. Serviços
    auth = AuthService(
        provider=provider,
        store=store,
        local_storage=local_storage,
        registration_key=config.registration_license_key,
    )
    session = SessionManager(
        auth=auth,
        store=store,
        local_storage=local_storage,
        toaster=toaster,
        app_data_factory=lambda user: AppDataService(store, toaster, user),
    )

    application = Application(
        config=config,
        store=store,
        local_storage=local_storage,
        toaster=toaster,
        auth=auth,
        session=session,
        content_generator=content_generator,
        licenses=LicenseManager(store),
        bug_reports=BugReportManager(store),
    )
    logger.info("Application created successfully")
    return application


def _create_content_generator(config: AppConfig) -> ContentGenerator:
    if not (config.gemini_api_key or config.project_id):
        logger.warning("GEMINI_API_KEY/PROJECT_ID not set, AI assistant disabled")
        return _NullContentGenerator()

    from google import genai

    from biggestor.adapters.gemini import GeminiContentGenerator

    if config.gemini_api_key:
        client = genai.Client(api_key=config.gemini_api_key)
    else:
        client = genai.Client(
            vertexai=True,
            project=config.project_id,
            location=config.vertex_ai_location,
        )
    return GeminiContentGenerator(
        client=client,
        model=config.gemini_model,
        min_interval=config.ai_min_interval_seconds,
    )


# Null Object / log (quando não há backend ou interface)


class _LoggingToaster(Toaster):
    """Toaster que só registra no log (uso em CLI e scripts)"""

    def success(self, message: str) -> None:
        logger.info("[toast] %s", message)

    def error(self, message: str) -> None:
        logger.error("[toast] %s", message)


class _NullContentGenerator(ContentGenerator):
    """ContentGenerator sem API key: o assistente responde que não está configurado"""

    MESSAGE = "Desculpe, o assistente de IA não está configurado corretamente (API Key ausente)."

    def draft_contract(self, job: Job, client: Client) -> str:
        raise AssistantError("AI assistant not configured")

    def draft_proposal(self, job: Job, client: Client) -> str:
        raise AssistantError("AI assistant not configured")

    def chat(self, query: str, jobs: list[Job], clients: list[Client]) -> AssistantReply:
        logger.debug("NullContentGenerator: chat skipped (Gemini not configured)")
        return AssistantReply(text=self.MESSAGE)
