"""Autenticação offline

AuthProvider de dispositivo único para quando não há backend configurado.
As contas ficam em system_data/offline_users com hash bcrypt da senha;
a sessão fica no armazenamento local e sobrevive a reinícios.
"""

from __future__ import annotations

import json
import logging

import bcrypt

from biggestor.domain.errors import AuthProviderError
from biggestor.domain.models import SYSTEM_USER_ID, User, new_id
from biggestor.domain.ports import AuthProvider, DataStore, KeyValueStorage

logger = logging.getLogger(__name__)

OFFLINE_USERS_KEY = "offline_users"
SESSION_KEY = "big_offline_user_session"


class LocalAuthProvider(AuthProvider):
    def __init__(self, store: DataStore, storage: KeyValueStorage) -> None:
        self._store = store
        self._storage = storage

    def _accounts(self) -> list[dict]:
        return self._store.get(SYSTEM_USER_ID, OFFLINE_USERS_KEY) or []

    def current_user(self) -> User | None:
        raw = self._storage.get_item(SESSION_KEY)
        if not raw:
            return None
        try:
            return User.from_dict(json.loads(raw))
        except (ValueError, TypeError) as e:
            logger.warning("Discarding corrupt offline session: %s", e)
            self._storage.remove_item(SESSION_KEY)
            return None

    def sign_in_with_password(self, email: str, password: str) -> User:
        account = next(
            (a for a in self._accounts() if a.get("email", "").lower() == email.lower()),
            None,
        )
        if account is None or not bcrypt.checkpw(
            password.encode("utf-8"), account.get("passwordHash", "").encode("utf-8")
        ):
            raise AuthProviderError("INVALID_LOGIN_CREDENTIALS")

        user = User.from_dict(account)
        self._storage.set_item(SESSION_KEY, json.dumps(user.to_dict()))
        logger.info("Offline sign-in: uid=%s", user.id)
        return user

    def sign_up(self, email: str, password: str, username: str) -> User:
        accounts = self._accounts()
        if any(a.get("email", "").lower() == email.lower() for a in accounts):
            raise AuthProviderError("EMAIL_EXISTS")

        user = User(id=new_id(), username=username, email=email)
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
        accounts.append({**user.to_dict(), "passwordHash": password_hash.decode("utf-8")})
        self._store.set(SYSTEM_USER_ID, OFFLINE_USERS_KEY, accounts)
        self._storage.set_item(SESSION_KEY, json.dumps(user.to_dict()))
        logger.info("Offline sign-up: uid=%s, username=%s", user.id, username)
        return user

    def sign_out(self) -> None:
        self._storage.remove_item(SESSION_KEY)

    def update_password(self, user: User, new_password: str) -> None:
        accounts = self._accounts()
        for account in accounts:
            if account.get("id") == user.id:
                account["passwordHash"] = bcrypt.hashpw(
                    new_password.encode("utf-8"), bcrypt.gensalt()
                ).decode("utf-8")
                break
        else:
            raise AuthProviderError("USER_NOT_FOUND")
        self._store.set(SYSTEM_USER_ID, OFFLINE_USERS_KEY, accounts)
