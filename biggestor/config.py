"""Configuração - leitura tipada das variáveis de ambiente"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv


@dataclass(frozen=True)
class AppConfig:
    """Configuração da aplicação"""
    gcs_bucket_name: str = ""
    project_id: str = ""
    firebase_api_key: str = ""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    vertex_ai_location: str = "us-central1"
    local_data_dir: str = ".big_local"
    registration_license_key: str = "BIG-MASTER-KEY"
    ai_min_interval_seconds: float = 60.0

    @property
    def remote_enabled(self) -> bool:
        """Persistência remota ativa quando há um bucket configurado"""
        return bool(self.gcs_bucket_name)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Lê a configuração das variáveis de ambiente"""
        load_dotenv()

        gcs_bucket_name = os.getenv("GCS_BUCKET_NAME", "")
        firebase_api_key = os.getenv("FIREBASE_API_KEY", "")
        if gcs_bucket_name and not firebase_api_key:
            raise ValueError("FIREBASE_API_KEY is not set in environment")

        interval = os.getenv("AI_MIN_INTERVAL_SECONDS", "60")
        try:
            ai_min_interval_seconds = float(interval)
        except ValueError:
            raise ValueError(f"AI_MIN_INTERVAL_SECONDS must be a number: {interval}")

        return cls(
            gcs_bucket_name=gcs_bucket_name,
            project_id=os.getenv("PROJECT_ID", ""),
            firebase_api_key=firebase_api_key,
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            vertex_ai_location=os.getenv("VERTEX_AI_LOCATION", "us-central1"),
            local_data_dir=os.getenv("LOCAL_DATA_DIR", ".big_local"),
            registration_license_key=os.getenv(
                "REGISTRATION_LICENSE_KEY", "BIG-MASTER-KEY"
            ),
            ai_min_interval_seconds=ai_min_interval_seconds,
        )
