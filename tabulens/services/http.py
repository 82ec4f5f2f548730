# tabulens/services/http.py

"""
HTTP client adapter
-------------------
Every call to the backend goes through one requests.Session so the session
cookies travel with it. The adapter owns a single cross-cutting concern:

    401 -> refresh the session once -> re-send the original call once

If the refresh itself fails, `on_auth_failure` is invoked (the dashboard
sends the user back to the login page) and AuthFailedError is raised.
All other failures are mapped onto the error taxonomy and propagated.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type

import requests
from loguru import logger

from ..core.config import settings
from ..core.errors import (
    ApiError,
    AuthExpiredError,
    AuthFailedError,
    NetworkError,
    NotFoundError,
    ServerError,
)

ProgressCallback = Callable[[int], None]


@dataclass
class PreparedCall:
    """One logical request. `retried` is per call, never shared."""
    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    json: Any = None
    body: Optional[bytes] = None
    content_type: Optional[str] = None
    on_progress: Optional[ProgressCallback] = None
    error_cls: Type[ApiError] = ServerError
    retried: bool = False


def percent(done: int, total: int) -> int:
    if total <= 0:
        return 100
    return min(100, round(done * 100 / total))


class ProgressBody:
    """
    File-like request body that reports transfer progress as it is read.
    requests sizes it through __len__ and urllib3 streams it through read().
    """

    def __init__(self, data: bytes, callback: ProgressCallback):
        self._buf = io.BytesIO(data)
        self._total = len(data)
        self._sent = 0
        self._callback = callback

    def __len__(self) -> int:
        return self._total

    def read(self, size: int = -1) -> bytes:
        chunk = self._buf.read(size)
        if chunk:
            self._sent += len(chunk)
            self._callback(percent(self._sent, self._total))
        return chunk


def _error_message(resp: requests.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"HTTP {resp.status_code} {resp.reason or ''}".strip()


def _decode(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


class HttpClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
        refresh_path: str | None = None,
        on_auth_failure: Callable[[], None] | None = None,
    ):
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.session = session or requests.Session()
        self.refresh_path = refresh_path or settings.refresh_path
        self.on_auth_failure = on_auth_failure

    # ---------- Shortcuts ----------
    def get(self, path: str, **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs):
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs):
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs):
        return self.request("DELETE", path, **kwargs)

    def request(self, method: str, path: str, **kwargs) -> Any:
        return self.execute(PreparedCall(method=method, path=path, **kwargs))

    # ---------- Core ----------
    def execute(self, call: PreparedCall) -> Any:
        resp = self._send(call)

        if resp.status_code == 401 and not call.retried:
            call.retried = True
            logger.info(f"Session expired on {call.method} {call.path}, refreshing")
            self._refresh()
            resp = self._send(call)

        self._raise_for_status(resp, call)
        return _decode(resp)

    def _send(self, call: PreparedCall) -> requests.Response:
        headers: Dict[str, str] = {}
        data: Any = None
        if call.body is not None:
            headers["Content-Type"] = call.content_type or "application/octet-stream"
            data = ProgressBody(call.body, call.on_progress) if call.on_progress else call.body

        try:
            return self.session.request(
                call.method,
                f"{self.base_url}{call.path}",
                params=call.params,
                json=call.json,
                data=data,
                headers=headers or None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"API request failed: {e}") from e

    def _refresh(self) -> None:
        try:
            self.execute(PreparedCall(method="POST", path=self.refresh_path, json={}, retried=True))
        except ApiError as e:
            logger.error(f"Session refresh failed: {e}")
            if self.on_auth_failure is not None:
                self.on_auth_failure()
            raise AuthFailedError(str(e), status_code=e.status_code) from e
        logger.info("Session refreshed")

    @staticmethod
    def _raise_for_status(resp: requests.Response, call: PreparedCall) -> None:
        status = resp.status_code
        if 200 <= status < 300:
            return
        message = _error_message(resp)
        # A call-specific error class covers every status, 401/404 included
        if call.error_cls is not ServerError:
            raise call.error_cls(message, status_code=status)
        if status == 401:
            raise AuthExpiredError(message, status_code=status)
        if status == 404:
            raise NotFoundError(message, status_code=status)
        raise call.error_cls(message, status_code=status)
