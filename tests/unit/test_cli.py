"""Testes da CLI e da factory"""

import json
from unittest.mock import patch

import pytest

from biggestor.adapters.cloud_storage import GCSDataStore
from biggestor.adapters.firebase_auth import FirebaseAuthProvider
from biggestor.adapters.gemini import GeminiContentGenerator
from biggestor.adapters.local_auth import LocalAuthProvider
from biggestor.adapters.local_storage import LocalDataStore
from biggestor.config import AppConfig
from biggestor.entrypoints.cli import build_parser, run
from biggestor.entrypoints.factory import Application, create_application


@pytest.fixture
def app(tmp_path, mock_toaster) -> Application:
    config = AppConfig(local_data_dir=str(tmp_path / "data"))
    return create_application(config, toaster=mock_toaster)


@pytest.fixture
def registered(app):
    """Conta offline já cadastrada e com sessão salva"""
    assert app.auth.register("nova", "nova@example.com", "segredo", "BIG-MASTER-KEY") is None
    return app


def parse(*argv):
    return build_parser().parse_args(list(argv))


class TestFactory:
    def test_offline_mode_without_bucket(self, app):
        assert isinstance(app.store, LocalDataStore)
        assert isinstance(app.auth._provider, LocalAuthProvider)

    def test_remote_mode_with_bucket(self, tmp_path, mock_toaster):
        """Bucket configurado: GCS + Firebase; API key: Gemini"""
        config = AppConfig(
            gcs_bucket_name="big-data",
            firebase_api_key="web-key",
            gemini_api_key="gemini-key",
            local_data_dir=str(tmp_path / "data"),
        )
        with (
            patch("biggestor.adapters.cloud_storage.storage.Client") as mock_storage_client,
            patch("biggestor.adapters.firebase_auth.get_firebase_app"),
            patch("google.genai.Client") as mock_genai_client,
        ):
            app = create_application(config, toaster=mock_toaster)

        assert isinstance(app.store, GCSDataStore)
        assert isinstance(app.auth._provider, FirebaseAuthProvider)
        assert isinstance(app.content_generator, GeminiContentGenerator)
        mock_storage_client.return_value.bucket.assert_called_once_with("big-data")
        mock_genai_client.assert_called_once_with(api_key="gemini-key")

    def test_assistant_requires_session(self, app):
        with pytest.raises(RuntimeError):
            app.assistant()

    def test_assistant_without_api_key(self, registered):
        result = registered.assistant().ask("Oi")

        assert "não está configurado" in result.message


class TestRun:
    def test_requires_username_without_session(self, app):
        assert run(app, parse("summary")) == 1

    def test_wrong_password(self, registered):
        assert run(registered, parse("-u", "nova", "-p", "errada", "summary")) == 1

    def test_summary_uses_saved_session(self, registered, capsys):
        assert run(registered, parse("summary")) == 0

        output = capsys.readouterr().out
        assert "Vídeo Promocional TechCorp" in output
        assert "R$ 1.800,00" in output

    def test_export_and_import(self, registered, tmp_path):
        # Act
        assert run(registered, parse("export", "--output", str(tmp_path / "backups"))) == 0
        [backup] = (tmp_path / "backups").glob("big_backup_*.json")
        payload = json.loads(backup.read_text(encoding="utf-8"))

        # Assert
        assert len(payload["data"]["jobs"]) == 5
        assert run(registered, parse("import", str(backup))) == 0

    def test_import_invalid_file(self, registered, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("[]", encoding="utf-8")

        assert run(registered, parse("import", str(bad))) == 1

    def test_notifications_mark_read(self, registered, capsys):
        assert run(registered, parse("notifications")) == 0
        app_data = registered.session.app_data
        job = next(j for j in app_data.jobs if j.name.startswith("Site Institucional"))

        assert run(registered, parse("notifications", "--mark-read", f"overdue-{job.id}")) == 0

        assert f"overdue-{job.id}" in registered.session.notifications.read_ids
        lines = capsys.readouterr().out.splitlines()
        assert f"  [overdue] overdue-{job.id}: " in "\n".join(lines)

    def test_licenses_restricted_to_admin(self, registered):
        assert run(registered, parse("licenses", "list")) == 1

    def test_admin_generates_license(self, app, capsys):
        assert run(app, parse("-u", "luizmellol", "-p", "big123", "licenses", "generate")) == 0

        key = capsys.readouterr().out.strip().splitlines()[-1]
        assert key.startswith("BIG-")
        assert [lic.key for lic in app.licenses.list()] == [key]
