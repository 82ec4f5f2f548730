# frontend/utils/api_client.py

import streamlit as st
from loguru import logger

from tabulens.core.config import settings
from tabulens.services.datasets import DatasetGateway
from tabulens.services.http import HttpClient
from tabulens.services.users import AuthService, UserService

LOGIN_PAGE = "app.py"


# -------------------------------
# APIClient: one per dashboard session
# -------------------------------
class APIClient:
    def __init__(self, base_url: str | None = None, timeout: int | None = None, on_auth_failure=None):
        self.http = HttpClient(
            base_url=base_url or settings.api_url,
            timeout=timeout,
            on_auth_failure=on_auth_failure,
        )
        self.datasets = DatasetGateway(self.http)
        self.auth = AuthService(self.http)
        self.users = UserService(self.http)


def redirect_to_login():
    """Session could not be refreshed: forget the user and go to the login page."""
    logger.warning("Session refresh failed, redirecting to login")
    from utils.session import reset_session

    reset_session()
    st.switch_page(LOGIN_PAGE)
