"""Testes do LocalAuthProvider"""

import pytest

from biggestor.adapters.local_auth import OFFLINE_USERS_KEY, SESSION_KEY, LocalAuthProvider
from biggestor.domain.errors import AuthProviderError
from biggestor.domain.models import SYSTEM_USER_ID


@pytest.fixture
def provider(store, local_storage):
    return LocalAuthProvider(store, local_storage)


class TestSignUp:
    def test_creates_account_with_hashed_password(self, provider, store):
        user = provider.sign_up("nova@example.com", "segredo", "nova")

        [account] = store.get(SYSTEM_USER_ID, OFFLINE_USERS_KEY)
        assert account["id"] == user.id
        assert account["username"] == "nova"
        assert account["passwordHash"].startswith("$2")
        assert "segredo" not in account["passwordHash"]

    def test_opens_session(self, provider):
        user = provider.sign_up("nova@example.com", "segredo", "nova")

        assert provider.current_user() == user

    def test_duplicate_email_case_insensitive(self, provider):
        provider.sign_up("nova@example.com", "segredo", "nova")

        with pytest.raises(AuthProviderError, match="EMAIL_EXISTS"):
            provider.sign_up("NOVA@example.com", "outra123", "nova2")


class TestSignIn:
    def test_valid_credentials(self, provider):
        created = provider.sign_up("nova@example.com", "segredo", "nova")
        provider.sign_out()

        assert provider.sign_in_with_password("nova@example.com", "segredo") == created
        assert provider.current_user() == created

    @pytest.mark.parametrize("email, password", [("nova@example.com", "errada"), ("x@y.com", "segredo")])
    def test_invalid_credentials(self, provider, email, password):
        provider.sign_up("nova@example.com", "segredo", "nova")

        with pytest.raises(AuthProviderError, match="INVALID_LOGIN_CREDENTIALS"):
            provider.sign_in_with_password(email, password)


def test_sign_out_clears_session(provider, local_storage):
    provider.sign_up("nova@example.com", "segredo", "nova")

    provider.sign_out()

    assert provider.current_user() is None
    assert local_storage.get_item(SESSION_KEY) is None


def test_corrupt_session_is_discarded(provider, local_storage):
    local_storage.set_item(SESSION_KEY, "{x")

    assert provider.current_user() is None
    assert local_storage.get_item(SESSION_KEY) is None


class TestUpdatePassword:
    def test_new_password_replaces_old(self, provider):
        user = provider.sign_up("nova@example.com", "segredo", "nova")

        provider.update_password(user, "novasenha")

        with pytest.raises(AuthProviderError):
            provider.sign_in_with_password("nova@example.com", "segredo")
        assert provider.sign_in_with_password("nova@example.com", "novasenha").id == user.id

    def test_unknown_user(self, provider, user):
        with pytest.raises(AuthProviderError, match="USER_NOT_FOUND"):
            provider.update_password(user, "novasenha")
