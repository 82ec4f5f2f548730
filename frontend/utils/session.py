# frontend/utils/session.py
"""
Per-session wiring. Each browser session gets its own APIClient (and so its
own cookie jar), DatasetStore and AuthStore, kept in st.session_state and
handed to the pages explicitly.
"""
from typing import cast

import streamlit as st

from tabulens.core.logging_config import setup_logging
from tabulens.services.dataset_store import DatasetStore
from tabulens.services.session import AuthStore

from utils.api_client import APIClient, LOGIN_PAGE, redirect_to_login


@st.cache_resource
def _init_logging() -> bool:
    setup_logging()
    return True


def get_api() -> APIClient:
    _init_logging()
    if "api" not in st.session_state:
        st.session_state["api"] = APIClient(on_auth_failure=redirect_to_login)
    return cast(APIClient, st.session_state["api"])


def get_dataset_store() -> DatasetStore:
    if "dataset_store" not in st.session_state:
        st.session_state["dataset_store"] = DatasetStore(get_api().datasets)
    return cast(DatasetStore, st.session_state["dataset_store"])


def get_auth_store() -> AuthStore:
    if "auth_store" not in st.session_state:
        st.session_state["auth_store"] = AuthStore()
    return cast(AuthStore, st.session_state["auth_store"])


def reset_session():
    get_auth_store().logout()
    get_dataset_store().clear_datasets()


def require_login():
    """Stop rendering a page for anonymous users."""
    if not get_auth_store().is_authenticated:
        st.warning("Please log in to continue.")
        st.page_link(LOGIN_PAGE, label="Go to login", icon="🔑")
        st.stop()
