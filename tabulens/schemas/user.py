# tabulens/schemas/user.py
from __future__ import annotations

from typing import Optional

from .base import APIModel


class DatasetPrefs(APIModel):
    auto_delete: bool = False
    auto_delete_days: int = 30
    max_file_size: int = 50
    default_chart_type: str = "line"


class NotificationPrefs(APIModel):
    upload_complete: bool = True
    upload_failed: bool = True
    weekly_report: bool = False
    storage_warning: bool = True


class UserProfile(APIModel):
    id: Optional[int] = None
    name: str
    email: Optional[str] = None
    image_url: Optional[str] = None
    provider: Optional[str] = None          # "EMAIL" | "GOOGLE" | ...
    dataset_prefs: Optional[DatasetPrefs] = None
    notification_prefs: Optional[NotificationPrefs] = None

    @property
    def can_change_email(self) -> bool:
        return self.provider in (None, "EMAIL")
