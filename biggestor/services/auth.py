"""AuthService - máquina de estados da autenticação

Estados: LOADING -> UNAUTHENTICATED | AUTHENTICATED(user).
Cada transição notifica os listeners (ver SessionManager).

Os erros de login/cadastro/troca de senha são devolvidos como strings em
português para exibição direta; nunca são levantados.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from enum import Enum

from biggestor.domain.errors import AuthProviderError, BigGestorError, ValidationError
from biggestor.domain.models import SYSTEM_USER_ID, License, LicenseStatus, User
from biggestor.domain.ports import AuthProvider, DataStore, KeyValueStorage
from biggestor.services.dates import utc_now_iso
from biggestor.services.validation import validate_new_password, validate_registration

logger = logging.getLogger(__name__)

USERS = "users"
LICENSES = "licenses"
BRANDING_SPLASH_KEY = "brandingSplashShown"

# Conta administrativa: dispensa licença e é criada no primeiro acesso
BYPASS_USERNAME = "luizmellol"
BYPASS_PASSWORD = "big123"
BYPASS_EMAIL = "luizmellol@big.app"

MSG_USER_NOT_FOUND = "Usuário não encontrado."
MSG_INVALID_CREDENTIALS = "Email ou senha inválidos."
MSG_REVOKED = (
    "Seu acesso a este sistema foi revogado pelo administrador. "
    "Entre em contato para regularizar."
)
MSG_INVALID_LICENSE = "Chave de licença inválida ou já utilizada."
MSG_USERNAME_TAKEN = "Este nome de usuário já está em uso."
MSG_REGISTER_FAILED = "Erro ao registrar."
MSG_NOT_AUTHENTICATED = "Não autenticado"
MSG_WRONG_OLD_PASSWORD = "Senha antiga incorreta."
MSG_PASSWORD_UPDATE_FAILED = "Erro ao atualizar senha."


class AuthState(Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


AuthListener = Callable[[AuthState, "User | None"], None]


class AuthService:
    def __init__(
        self,
        provider: AuthProvider,
        store: DataStore,
        local_storage: KeyValueStorage,
        registration_key: str = "BIG-MASTER-KEY",
        now: Callable[[], str] = utc_now_iso,
    ) -> None:
        """
        Args:
            provider: provedor de autenticação (Firebase ou offline)
            store: armazenamento do diretório de usuários e das licenças
            local_storage: armazenamento local (flag da tela de abertura)
            registration_key: chave mestra aceita no cadastro
            now: gerador de timestamps ISO8601
        """
        self._provider = provider
        self._store = store
        self._local = local_storage
        self._registration_key = registration_key
        self._now = now
        self._state = AuthState.LOADING
        self._user: User | None = None
        self._listeners: list[AuthListener] = []

    # ── Estado ───────────────────────────────────────────────────────────────

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def current_user(self) -> User | None:
        return self._user

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Registra um listener; retorna a função que cancela a inscrição"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, state: AuthState, user: User | None = None) -> None:
        self._state = state
        self._user = user
        logger.info("Auth state: %s (uid=%s)", state.value, user.id if user else None)
        for listener in list(self._listeners):
            listener(state, user)

    def restore_session(self) -> None:
        """Sai de LOADING usando a sessão guardada pelo provedor, se houver"""
        user = self._provider.current_user()
        if user is None:
            self._transition(AuthState.UNAUTHENTICATED)
        else:
            self._transition(AuthState.AUTHENTICATED, user)

    # ── Diretório e licenças ─────────────────────────────────────────────────

    def _directory(self) -> list[User]:
        return [User.from_dict(u) for u in self._store.get(SYSTEM_USER_ID, USERS) or []]

    def _licenses(self) -> list[License]:
        return [License.from_dict(lic) for lic in self._store.get(SYSTEM_USER_ID, LICENSES) or []]

    def _add_to_directory(self, user: User) -> None:
        directory = self._directory()
        if any(u.id == user.id for u in directory):
            return
        directory.append(user)
        self._store.set(SYSTEM_USER_ID, USERS, [u.to_dict() for u in directory])

    def _is_revoked(self, username: str) -> bool:
        return any(
            lic.used_by == username and lic.status == LicenseStatus.REVOKED
            for lic in self._licenses()
        )

    # ── Operações ────────────────────────────────────────────────────────────

    def login(self, identifier: str, password: str) -> str | None:
        """
        Login por username ou email.

        Returns:
            None em caso de sucesso, ou a mensagem de erro
        """
        identifier = identifier.strip()
        if identifier.lower() == BYPASS_USERNAME and password == BYPASS_PASSWORD:
            return self._bypass_login(password)

        directory = self._directory()
        if "@" not in identifier:
            found = next((u for u in directory if u.username.lower() == identifier.lower()), None)
            if found is None:
                return MSG_USER_NOT_FOUND
            email, username = found.email, found.username
        else:
            found = next((u for u in directory if u.email.lower() == identifier.lower()), None)
            email, username = identifier, found.username if found else ""

        try:
            user = self._provider.sign_in_with_password(email, password)
        except AuthProviderError as e:
            logger.info("Login rejected: identifier=%s, reason=%s", identifier, e)
            return MSG_INVALID_CREDENTIALS

        username = username or user.username
        if username and user.username != username:
            user = replace(user, username=username)

        if self._is_revoked(username):
            logger.warning("Login blocked, license revoked: username=%s", username)
            self._safe_sign_out()
            return MSG_REVOKED

        self._transition(AuthState.AUTHENTICATED, user)
        return None

    def _bypass_login(self, password: str) -> str | None:
        """Conta administrativa: sem verificação de licença, criada no primeiro uso"""
        try:
            user = self._provider.sign_in_with_password(BYPASS_EMAIL, password)
        except AuthProviderError:
            logger.info("Provisioning admin account: %s", BYPASS_USERNAME)
            try:
                user = self._provider.sign_up(BYPASS_EMAIL, password, BYPASS_USERNAME)
            except AuthProviderError as e:
                logger.error("Failed to provision admin account: %s", e)
                return MSG_INVALID_CREDENTIALS

        user = replace(user, username=BYPASS_USERNAME)
        try:
            self._add_to_directory(user)
        except BigGestorError as e:
            logger.error("Failed to add admin account to directory: %s", e)

        self._transition(AuthState.AUTHENTICATED, user)
        return None

    def register(self, username: str, email: str, password: str, license_key: str) -> str | None:
        """
        Cadastra uma conta nova e já a autentica.

        A chave precisa ser a chave mestra configurada ou uma licença gerada
        pelo administrador que ainda esteja ativa.
        """
        username, email, license_key = username.strip(), email.strip(), license_key.strip()
        try:
            validate_registration(username, email, password, license_key)
        except ValidationError as e:
            return str(e)

        licenses = self._licenses()
        issued = next(
            (lic for lic in licenses if lic.key == license_key and lic.status == LicenseStatus.ACTIVE),
            None,
        )
        if license_key != self._registration_key and issued is None:
            logger.info("Registration rejected, invalid license: username=%s", username)
            return MSG_INVALID_LICENSE

        directory = self._directory()
        if any(u.username.lower() == username.lower() for u in directory):
            return MSG_USERNAME_TAKEN

        try:
            user = self._provider.sign_up(email, password, username)
        except AuthProviderError as e:
            logger.warning("Registration failed: username=%s, reason=%s", username, e)
            return MSG_REGISTER_FAILED

        now = self._now()
        if issued is not None:
            licenses = [
                replace(lic, status=LicenseStatus.USED, used_by=username, used_at=now)
                if lic.key == issued.key
                else lic
                for lic in licenses
            ]
        else:
            licenses.append(
                License(
                    key=license_key,
                    status=LicenseStatus.USED,
                    created_at=now,
                    created_by="system",
                    used_by=username,
                    used_at=now,
                )
            )

        try:
            self._store.set(SYSTEM_USER_ID, LICENSES, [lic.to_dict() for lic in licenses])
            self._store.set(
                SYSTEM_USER_ID, USERS, [u.to_dict() for u in [*directory, user]]
            )
        except BigGestorError as e:
            # a conta já existe no provedor; remoção manual pelo administrador
            logger.error(
                "Failed to record registration, provider account orphaned: uid=%s, username=%s, email=%s, error=%s",
                user.id,
                username,
                email,
                e,
                extra={"extra_fields": {"event": "orphaned_account", "uid": user.id, "email": email}},
            )
            self._safe_sign_out()
            return MSG_REGISTER_FAILED

        logger.info(
            "User registered: uid=%s, username=%s",
            user.id,
            username,
            extra={"extra_fields": {"event": "user_registered", "uid": user.id}},
        )
        self._transition(AuthState.AUTHENTICATED, user)
        return None

    def logout(self) -> None:
        self._safe_sign_out()
        self._local.remove_item(BRANDING_SPLASH_KEY)
        self._transition(AuthState.UNAUTHENTICATED)

    def change_password(self, old_password: str, new_password: str) -> str | None:
        """Confirma a senha atual com um novo login e então troca a senha"""
        user = self._user
        if self._state != AuthState.AUTHENTICATED or user is None:
            return MSG_NOT_AUTHENTICATED
        try:
            validate_new_password(new_password)
        except ValidationError as e:
            return str(e)

        try:
            self._provider.sign_in_with_password(user.email, old_password)
        except AuthProviderError:
            return MSG_WRONG_OLD_PASSWORD

        try:
            self._provider.update_password(user, new_password)
        except AuthProviderError as e:
            logger.error("Password update failed: uid=%s, error=%s", user.id, e)
            return MSG_PASSWORD_UPDATE_FAILED
        return None

    def _safe_sign_out(self) -> None:
        try:
            self._provider.sign_out()
        except AuthProviderError as e:
            logger.warning("Provider sign-out failed: %s", e)
