"""SessionManager - ciclo de vida dos serviços da sessão

Cria AppDataService e NotificationCenter quando um usuário entra e os
descarta quando ele sai.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from biggestor.domain.models import User
from biggestor.domain.ports import DataStore, KeyValueStorage, Toaster
from biggestor.services.app_data import AppDataService
from biggestor.services.auth import AuthService, AuthState
from biggestor.services.notifications import NotificationCenter

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        auth: AuthService,
        store: DataStore,
        local_storage: KeyValueStorage,
        toaster: Toaster,
        app_data_factory: Callable[[User], AppDataService] | None = None,
    ) -> None:
        self._auth = auth
        self._store = store
        self._local = local_storage
        self._toaster = toaster
        self._app_data_factory = app_data_factory or (
            lambda user: AppDataService(store, toaster, user)
        )
        self._app_data: AppDataService | None = None
        self._notifications: NotificationCenter | None = None
        self._unsubscribe = auth.subscribe(self._on_auth_change)

    @property
    def app_data(self) -> AppDataService | None:
        return self._app_data

    @property
    def notifications(self) -> NotificationCenter | None:
        return self._notifications

    def _on_auth_change(self, state: AuthState, user: User | None) -> None:
        if state == AuthState.AUTHENTICATED and user is not None:
            if self._app_data is not None and self._app_data.user == user:
                return
            logger.info("Starting session: uid=%s", user.id)
            app_data = self._app_data_factory(user)
            app_data.load()
            self._app_data = app_data
            self._notifications = NotificationCenter(self._local)
        elif state == AuthState.UNAUTHENTICATED and self._app_data is not None:
            logger.info("Ending session: uid=%s", self._app_data.user.id if self._app_data.user else None)
            self._app_data = None
            self._notifications = None

    def close(self) -> None:
        """Cancela a inscrição no AuthService"""
        self._unsubscribe()
        self._app_data = None
        self._notifications = None
