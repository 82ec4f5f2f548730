# tabulens/services/users.py
from __future__ import annotations

from typing import Any, Dict, Optional

from loguru import logger

from ..schemas.forms import LoginForm, RegisterForm, validate_form
from ..schemas.user import DatasetPrefs, NotificationPrefs, UserProfile
from .http import HttpClient


class AuthService:
    """Session lifecycle. Forms are validated before anything is sent."""

    def __init__(self, http: HttpClient):
        self.http = http

    def login(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        form = validate_form(LoginForm, data)
        resp = self.http.post("/auth/login", json={"email": form.email, "password": form.password, "rememberMe": form.remember_me}) or {}
        logger.info(f"Logged in as {form.email}")
        return resp.get("user")

    def register(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        form = validate_form(RegisterForm, data)
        payload = form.model_dump(mode="json", include={"name", "email", "password"})
        resp = self.http.post("/auth/register", json=payload) or {}
        logger.info(f"Registered {form.email}")
        return resp.get("user")

    def logout(self) -> None:
        self.http.post("/auth/logout")


class UserService:
    def __init__(self, http: HttpClient):
        self.http = http

    def get_profile(self) -> UserProfile:
        return UserProfile.model_validate(self.http.get("/user/profile"))

    def update_profile(self, name: str):
        return self.http.put("/user/profile", json={"name": name})

    def update_preferences(self, dataset_prefs: DatasetPrefs, notification_prefs: NotificationPrefs):
        return self.http.put(
            "/user/preferences",
            json={
                "datasetPrefs": dataset_prefs.to_wire(),
                "notificationPrefs": notification_prefs.to_wire(),
            },
        )

    def delete_account(self) -> None:
        self.http.delete("/user/account")
