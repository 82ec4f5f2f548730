# tabulens/services/datasets.py
"""
Remote dataset gateway: typed wrappers over the HTTP adapter.
Pure request shaping, no caching (that is DatasetStore's job).
"""
from __future__ import annotations

import mimetypes
from typing import Any, Dict, List, Optional

from loguru import logger
from urllib3 import encode_multipart_formdata

from ..core.errors import UploadError
from ..schemas.dataset import Dataset, DatasetColumn, DownloadLink
from .http import HttpClient, PreparedCall, ProgressCallback


class MonotonicProgress:
    """Forwards percents to `callback`, never reporting a smaller value twice.

    A re-sent upload (after a session refresh) restarts its byte count; the
    caller still sees a non-decreasing sequence ending at 100.
    """

    def __init__(self, callback: ProgressCallback):
        self._callback = callback
        self.last = -1

    def __call__(self, value: int) -> None:
        if value > self.last:
            self.last = value
            self._callback(value)

    def finish(self) -> None:
        self(100)


class DatasetGateway:
    def __init__(self, http: HttpClient):
        self.http = http

    # ---------- Collection ----------
    def list(self) -> Any:
        """GET /datasets/user. Non-list payloads are passed through untouched."""
        data = self.http.get("/datasets/user")
        if not isinstance(data, list):
            logger.warning(f"Unexpected dataset list payload: {type(data).__name__}")
            return data
        return [Dataset.model_validate(d) for d in data]

    def get(self, dataset_id: int) -> Dataset:
        return Dataset.model_validate(self.http.get(f"/datasets/{dataset_id}"))

    # ---------- Upload ----------
    def upload(
        self,
        file_name: str,
        content: bytes,
        on_progress: Optional[ProgressCallback] = None,
        content_type: Optional[str] = None,
    ) -> Dataset:
        mime = content_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        body, multipart_type = encode_multipart_formdata({"file": (file_name, content, mime)})
        tracker = MonotonicProgress(on_progress) if on_progress else None

        logger.info(f"Uploading {file_name} ({len(content)} bytes)")
        data = self.http.execute(
            PreparedCall(
                method="POST",
                path="/datasets/upload",
                body=body,
                content_type=multipart_type,
                on_progress=tracker,
                error_cls=UploadError,
            )
        )
        if tracker is not None:
            tracker.finish()
        return Dataset.model_validate(data)

    # ---------- Per-dataset reads ----------
    def columns(self, dataset_id: int) -> List[DatasetColumn]:
        data = self.http.get(f"/datasets/{dataset_id}/columns") or []
        cols = [DatasetColumn.model_validate(c) for c in data]
        return sorted(cols, key=lambda c: c.column_index)

    def preview(self, dataset_id: int, limit: int = 10) -> List[Dict[str, Any]]:
        data = self.http.get(f"/datasets/{dataset_id}/preview", params={"limit": limit})
        if isinstance(data, dict):
            data = data.get("rows", [])
        return list(data or [])[:limit]

    def download_url(self, dataset_id: int) -> DownloadLink:
        return DownloadLink.model_validate(self.http.get(f"/datasets/{dataset_id}/download"))

    def remove(self, dataset_id: int) -> None:
        self.http.delete(f"/datasets/{dataset_id}")
