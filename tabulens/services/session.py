# tabulens/services/session.py
from __future__ import annotations

from threading import RLock
from typing import Any, Dict, Optional

from loguru import logger

from .dataset_store import DatasetStore
from .users import AuthService


class AuthStore:
    """Who is signed in for this dashboard session."""

    def __init__(self):
        self._lock = RLock()
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def set_user(self, user: Optional[Dict[str, Any]]):
        with self._lock:
            self.user = dict(user) if user else None

    def logout(self):
        with self._lock:
            self.user = None


def sign_out(auth: AuthService, auth_store: AuthStore, dataset_store: DatasetStore) -> None:
    """
    POST /auth/logout, then drop local session state even if the call failed
    (the cookie may already be gone).
    """
    try:
        auth.logout()
    finally:
        auth_store.logout()
        dataset_store.clear_datasets()
        logger.info("Signed out, local session state cleared")
