"""Testes do AuthService"""

from unittest.mock import MagicMock

import pytest

from biggestor.adapters.local_auth import LocalAuthProvider
from biggestor.domain.errors import AuthProviderError, StorageWriteError
from biggestor.domain.models import SYSTEM_USER_ID, License, LicenseStatus, User
from biggestor.domain.ports import DataStore
from biggestor.services.auth import (
    BRANDING_SPLASH_KEY,
    BYPASS_PASSWORD,
    BYPASS_USERNAME,
    MSG_INVALID_CREDENTIALS,
    MSG_INVALID_LICENSE,
    MSG_NOT_AUTHENTICATED,
    MSG_REGISTER_FAILED,
    MSG_REVOKED,
    MSG_USER_NOT_FOUND,
    MSG_USERNAME_TAKEN,
    MSG_WRONG_OLD_PASSWORD,
    AuthService,
    AuthState,
)
from tests.conftest import FIXED_NOW, fixed_now


@pytest.fixture
def auth(mock_provider, store, local_storage):
    return AuthService(
        provider=mock_provider,
        store=store,
        local_storage=local_storage,
        registration_key="BIG-MASTER-KEY",
        now=fixed_now,
    )


@pytest.fixture
def directory(store, user):
    store.set(SYSTEM_USER_ID, "users", [user.to_dict()])


def licenses(store):
    return [License.from_dict(lic) for lic in store.get(SYSTEM_USER_ID, "licenses") or []]


class TestRestoreSession:
    def test_starts_loading(self, auth):
        assert auth.state == AuthState.LOADING

    def test_without_session(self, auth):
        auth.restore_session()

        assert auth.state == AuthState.UNAUTHENTICATED
        assert auth.current_user is None

    def test_with_session_notifies_listeners(self, auth, mock_provider, user):
        # Arrange
        mock_provider.current_user.return_value = user
        listener = MagicMock()
        auth.subscribe(listener)

        # Act
        auth.restore_session()

        # Assert
        assert auth.current_user == user
        listener.assert_called_once_with(AuthState.AUTHENTICATED, user)

    def test_unsubscribe(self, auth):
        listener = MagicMock()
        unsubscribe = auth.subscribe(listener)

        unsubscribe()
        auth.restore_session()

        listener.assert_not_called()


class TestLogin:
    def test_by_username(self, auth, mock_provider, user, directory):
        mock_provider.sign_in_with_password.return_value = User(
            id=user.id, username="", email=user.email
        )

        error = auth.login("ANA", "segredo")

        assert error is None
        assert auth.state == AuthState.AUTHENTICATED
        assert auth.current_user.username == "ana"
        mock_provider.sign_in_with_password.assert_called_once_with(user.email, "segredo")

    def test_by_email(self, auth, mock_provider, user, directory):
        mock_provider.sign_in_with_password.return_value = user

        assert auth.login(" ana@example.com ", "segredo") is None
        mock_provider.sign_in_with_password.assert_called_once_with("ana@example.com", "segredo")

    def test_unknown_username(self, auth, mock_provider, directory):
        assert auth.login("ninguem", "segredo") == MSG_USER_NOT_FOUND
        mock_provider.sign_in_with_password.assert_not_called()

    def test_wrong_password(self, auth, mock_provider, directory):
        mock_provider.sign_in_with_password.side_effect = AuthProviderError(
            "INVALID_LOGIN_CREDENTIALS"
        )

        assert auth.login("ana", "errada") == MSG_INVALID_CREDENTIALS
        assert auth.state == AuthState.LOADING

    def test_revoked_license_blocks_login(self, auth, mock_provider, store, user, directory):
        # Arrange
        store.set(
            SYSTEM_USER_ID,
            "licenses",
            [{"key": "BIG-1", "status": "revoked", "usedBy": "ana", "createdAt": "", "createdBy": ""}],
        )
        mock_provider.sign_in_with_password.return_value = user

        # Act
        error = auth.login("ana", "segredo")

        # Assert
        assert error == MSG_REVOKED
        assert auth.current_user is None
        mock_provider.sign_out.assert_called_once()


class TestAdminBypass:
    def test_first_access_provisions_account(self, auth, mock_provider, store):
        # Arrange
        mock_provider.sign_in_with_password.side_effect = AuthProviderError("INVALID_LOGIN_CREDENTIALS")
        mock_provider.sign_up.return_value = User(id="uid-admin", username="", email="x")

        # Act
        error = auth.login(BYPASS_USERNAME, BYPASS_PASSWORD)

        # Assert
        assert error is None
        assert auth.current_user.username == BYPASS_USERNAME
        assert [u["id"] for u in store.get(SYSTEM_USER_ID, "users")] == ["uid-admin"]

    def test_existing_account_is_not_duplicated(self, auth, mock_provider, store):
        admin = User(id="uid-admin", username=BYPASS_USERNAME, email="luizmellol@big.app")
        store.set(SYSTEM_USER_ID, "users", [admin.to_dict()])
        mock_provider.sign_in_with_password.return_value = admin

        assert auth.login(BYPASS_USERNAME, BYPASS_PASSWORD) is None
        assert len(store.get(SYSTEM_USER_ID, "users")) == 1
        mock_provider.sign_up.assert_not_called()

    def test_revoked_license_does_not_block_admin(self, auth, mock_provider, store):
        # Arrange
        admin = User(id="uid-admin", username=BYPASS_USERNAME, email="luizmellol@big.app")
        store.set(SYSTEM_USER_ID, "users", [admin.to_dict()])
        store.set(
            SYSTEM_USER_ID,
            "licenses",
            [
                {
                    "key": "BIG-ADM",
                    "status": "revoked",
                    "usedBy": BYPASS_USERNAME,
                    "createdAt": "",
                    "createdBy": "",
                }
            ],
        )
        mock_provider.sign_in_with_password.return_value = admin

        # Act
        error = auth.login(BYPASS_USERNAME, BYPASS_PASSWORD)

        # Assert
        assert error is None
        assert auth.state == AuthState.AUTHENTICATED
        assert auth.current_user.username == BYPASS_USERNAME
        mock_provider.sign_out.assert_not_called()


class TestRegister:
    def test_master_key_registers_and_logs_in(self, auth, mock_provider, store, user, directory):
        # Arrange
        new_user = User(id="uid-nova", username="nova", email="nova@example.com")
        mock_provider.sign_up.return_value = new_user

        # Act
        error = auth.register("nova", "nova@example.com", "segredo", "BIG-MASTER-KEY")

        # Assert
        assert error is None
        assert auth.current_user == new_user
        assert [u["id"] for u in store.get(SYSTEM_USER_ID, "users")] == [user.id, new_user.id]
        [lic] = licenses(store)
        assert lic.status == LicenseStatus.USED
        assert lic.created_by == "system"
        assert lic.used_by == "nova"
        assert lic.used_at == FIXED_NOW

    def test_issued_license_is_consumed(self, auth, mock_provider, store):
        store.set(
            SYSTEM_USER_ID,
            "licenses",
            [License("BIG-AAAA-BBBB-CCCC", LicenseStatus.ACTIVE, "t", "luizmellol").to_dict()],
        )
        mock_provider.sign_up.return_value = User(id="uid-nova", username="nova", email="n@e.com")

        assert auth.register("nova", "n@e.com", "segredo", "BIG-AAAA-BBBB-CCCC") is None

        [lic] = licenses(store)
        assert lic.status == LicenseStatus.USED
        assert lic.used_by == "nova"

    @pytest.mark.parametrize("status", ["used", "revoked"])
    def test_inactive_license_is_rejected(self, auth, mock_provider, store, status):
        store.set(
            SYSTEM_USER_ID,
            "licenses",
            [{"key": "BIG-1", "status": status, "createdAt": "t", "createdBy": "admin"}],
        )

        assert auth.register("nova", "n@e.com", "segredo", "BIG-1") == MSG_INVALID_LICENSE
        mock_provider.sign_up.assert_not_called()

    def test_unknown_license(self, auth, mock_provider, store, user, directory):
        # Act
        error = auth.register("nova", "n@e.com", "segredo", "QUALQUER")

        # Assert
        assert error == MSG_INVALID_LICENSE
        mock_provider.sign_up.assert_not_called()
        assert store.get(SYSTEM_USER_ID, "users") == [user.to_dict()]
        assert store.get(SYSTEM_USER_ID, "licenses") is None
        assert auth.current_user is None

    def test_username_taken(self, auth, mock_provider, directory):
        assert auth.register("Ana", "outra@e.com", "segredo", "BIG-MASTER-KEY") == MSG_USERNAME_TAKEN
        mock_provider.sign_up.assert_not_called()

    def test_validation_message_returned(self, auth):
        assert auth.register("nova", "n@e.com", "123", "BIG-MASTER-KEY") == (
            "A senha deve ter pelo menos 6 caracteres."
        )

    def test_provider_failure(self, auth, mock_provider, store):
        mock_provider.sign_up.side_effect = AuthProviderError("EMAIL_EXISTS")

        assert auth.register("nova", "n@e.com", "segredo", "BIG-MASTER-KEY") == MSG_REGISTER_FAILED
        assert store.get(SYSTEM_USER_ID, "licenses") is None

    def test_record_failure_logs_orphaned_account(self, mock_provider, local_storage, caplog):
        """Falha ao gravar o diretório deixa a conta do provedor registrada no log"""
        # Arrange
        failing_store = MagicMock(spec=DataStore)
        failing_store.get.return_value = None
        failing_store.set.side_effect = StorageWriteError(SYSTEM_USER_ID, "licenses", "timeout")
        mock_provider.sign_up.return_value = User(id="uid-nova", username="nova", email="n@e.com")
        service = AuthService(
            provider=mock_provider,
            store=failing_store,
            local_storage=local_storage,
            registration_key="BIG-MASTER-KEY",
            now=fixed_now,
        )

        # Act
        error = service.register("nova", "n@e.com", "segredo", "BIG-MASTER-KEY")

        # Assert
        assert error == MSG_REGISTER_FAILED
        assert service.current_user is None
        mock_provider.sign_out.assert_called_once()
        [record] = [r for r in caplog.records if "orphaned" in r.getMessage()]
        assert "uid-nova" in record.getMessage()
        assert record.extra_fields == {
            "event": "orphaned_account",
            "uid": "uid-nova",
            "email": "n@e.com",
        }


class TestLogout:
    def test_clears_session_and_splash_flag(self, auth, mock_provider, local_storage, user):
        mock_provider.current_user.return_value = user
        auth.restore_session()
        local_storage.set_item(BRANDING_SPLASH_KEY, "true")

        auth.logout()

        assert auth.state == AuthState.UNAUTHENTICATED
        assert local_storage.get_item(BRANDING_SPLASH_KEY) is None
        mock_provider.sign_out.assert_called_once()


class TestChangePassword:
    @pytest.fixture
    def logged_in(self, auth, mock_provider, user):
        mock_provider.current_user.return_value = user
        auth.restore_session()
        return auth

    def test_requires_session(self, auth):
        assert auth.change_password("velha", "nova123") == MSG_NOT_AUTHENTICATED

    def test_success(self, logged_in, mock_provider, user):
        assert logged_in.change_password("velha", "nova123") is None
        mock_provider.sign_in_with_password.assert_called_once_with(user.email, "velha")
        mock_provider.update_password.assert_called_once_with(user, "nova123")

    def test_wrong_old_password(self, logged_in, mock_provider):
        mock_provider.sign_in_with_password.side_effect = AuthProviderError("INVALID_PASSWORD")

        assert logged_in.change_password("errada", "nova123") == MSG_WRONG_OLD_PASSWORD
        mock_provider.update_password.assert_not_called()

    def test_short_new_password(self, logged_in, mock_provider):
        assert logged_in.change_password("velha", "123") == "A senha deve ter pelo menos 6 caracteres."
        mock_provider.sign_in_with_password.assert_not_called()


class TestOfflineFlow:
    """AuthService + LocalAuthProvider (modo offline completo)"""

    def test_register_logout_login(self, store, local_storage):
        # Arrange
        provider = LocalAuthProvider(store, local_storage)
        auth = AuthService(provider, store, local_storage, now=fixed_now)
        assert auth.register("nova", "nova@example.com", "segredo", "BIG-MASTER-KEY") is None
        auth.logout()

        # Act
        error = auth.login("nova", "segredo")

        # Assert
        assert error is None
        assert auth.current_user.email == "nova@example.com"
        assert provider.current_user() == auth.current_user

    def test_wrong_password_offline(self, store, local_storage):
        provider = LocalAuthProvider(store, local_storage)
        auth = AuthService(provider, store, local_storage, now=fixed_now)
        auth.register("nova", "nova@example.com", "segredo", "BIG-MASTER-KEY")
        auth.logout()

        assert auth.login("nova@example.com", "errada") == MSG_INVALID_CREDENTIALS
