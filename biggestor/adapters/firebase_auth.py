"""Firebase Auth Adapter

Implementação do AuthProvider sobre o Firebase Authentication.

- Cadastro e troca de senha: Firebase Admin SDK (firebase_admin.auth)
- Login por email/senha: Identity Toolkit REST (accounts:signInWithPassword),
  já que o Admin SDK não verifica senhas
"""

from __future__ import annotations

import logging
import os

import firebase_admin
import firebase_admin.auth as fb_auth
import requests
from firebase_admin import credentials as fb_creds
from firebase_admin.exceptions import FirebaseError

from biggestor.domain.errors import AuthProviderError
from biggestor.domain.models import User
from biggestor.domain.ports import AuthProvider

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
REQUEST_TIMEOUT = 15


def get_firebase_app(project_id: str = "") -> firebase_admin.App:
    """Inicializa o Firebase Admin uma única vez por processo"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        cred = fb_creds.ApplicationDefault()
        project_id = project_id or os.environ.get("PROJECT_ID", "")
        app = firebase_admin.initialize_app(
            cred,
            options={"projectId": project_id} if project_id else {},
        )
        logger.info("Firebase Admin initialized project=%s", project_id)
        return app


class FirebaseAuthProvider(AuthProvider):
    """
    AuthProvider sobre Firebase.

    A sessão (usuário logado) fica em memória durante a vida do processo.
    """

    def __init__(
        self,
        api_key: str,
        app: firebase_admin.App | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Args:
            api_key: Web API key do projeto Firebase
            app: app do Firebase Admin já inicializado (padrão: get_firebase_app())
            session: sessão HTTP (injetável nos testes)
        """
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self._app = app
        self._http = session or requests.Session()
        self._current: User | None = None

    @property
    def app(self) -> firebase_admin.App:
        if self._app is None:
            self._app = get_firebase_app()
        return self._app

    def current_user(self) -> User | None:
        return self._current

    def sign_in_with_password(self, email: str, password: str) -> User:
        """
        Verifica email/senha no Identity Toolkit.

        Raises:
            AuthProviderError: credenciais inválidas ou falha de rede
        """
        try:
            response = self._http.post(
                SIGN_IN_URL,
                params={"key": self._api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error("Sign-in request failed: email=%s, error=%s", email, e)
            raise AuthProviderError(f"sign-in request failed: {e}") from e

        if response.status_code != 200:
            reason = _error_code(response)
            logger.info("Sign-in rejected: email=%s, reason=%s", email, reason)
            raise AuthProviderError(reason)

        body = response.json()
        user = User(
            id=body["localId"],
            username=body.get("displayName") or "",
            email=body.get("email", email),
        )
        self._current = user
        logger.info("Signed in: uid=%s", user.id)
        return user

    def sign_up(self, email: str, password: str, username: str) -> User:
        """
        Cria a conta pelo Admin SDK e abre a sessão.

        Raises:
            AuthProviderError: email já cadastrado, senha fraca etc.
        """
        try:
            record = fb_auth.create_user(
                email=email,
                password=password,
                display_name=username,
                app=self.app,
            )
        except (FirebaseError, ValueError) as e:
            logger.warning("Sign-up failed: email=%s, error=%s", email, e)
            raise AuthProviderError(str(e)) from e

        user = User(id=record.uid, username=username, email=email)
        self._current = user
        logger.info("Signed up: uid=%s, username=%s", user.id, username)
        return user

    def sign_out(self) -> None:
        if self._current is not None:
            logger.info("Signed out: uid=%s", self._current.id)
        self._current = None

    def update_password(self, user: User, new_password: str) -> None:
        try:
            fb_auth.update_user(user.id, password=new_password, app=self.app)
        except (FirebaseError, ValueError) as e:
            logger.warning("Password update failed: uid=%s, error=%s", user.id, e)
            raise AuthProviderError(str(e)) from e
        logger.info("Password updated: uid=%s", user.id)


def _error_code(response: requests.Response) -> str:
    """Extrai o código de erro do corpo de resposta do Identity Toolkit"""
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {response.status_code}"
