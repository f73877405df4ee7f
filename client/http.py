"""
HTTP client for the assistant API.

Thin wrapper over ``requests.Session``. Gateway calls return the status
code with the ``reply`` text so the caller can tell guidance (400) from
answers (200) and server failures (5xx). Project calls raise ``ApiError``
on any non-2xx response.

Transport failures (connection refused, timeouts) propagate as
``requests.RequestException``.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from core.mixing.types import AudioUpload, Message, MixContext
from core.projects import Project, project_from_payload, project_to_payload

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://localhost:8000"
DEFAULT_TIMEOUT_S = 120.0


class ApiError(RuntimeError):
    """Non-2xx response from a project route."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("reply") or body)
    return str(body)


def _reply(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict) and isinstance(body.get("reply"), str):
        return body["reply"]
    return ""


class AssistantClient:
    """Client for the chat, mix analysis and project routes.

    Args:
        api_base: Server base URL, without trailing slash.
        timeout: Per-request timeout in seconds.
        session: Optional pre-built ``requests.Session`` (tests inject mocks).
    """

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        session: requests.Session | None = None,
    ) -> None:
        self._base = api_base.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def api_base(self) -> str:
        return self._base

    def chat(self, messages: tuple[Message, ...], context: MixContext) -> tuple[int, str]:
        """POST /api/chat. Returns ``(status_code, reply)``."""
        body = {
            "messages": [m.to_dict() for m in messages],
            "mode": context.mode,
            "preset": context.preset,
            "tone": context.tone.to_dict(),
        }
        response = self._session.post(
            f"{self._base}/api/chat", json=body, timeout=self._timeout
        )
        return response.status_code, _reply(response)

    def analyze_mix(
        self, upload: AudioUpload, question: str, context: MixContext
    ) -> tuple[int, str]:
        """POST /api/analyze-mix as multipart. Returns ``(status_code, reply)``."""
        data: dict[str, Any] = {
            "question": question,
            "mode": context.mode,
            "preset": context.preset,
            **context.tone.to_dict(),
        }
        files = {
            "file": (
                upload.filename,
                upload.data,
                upload.content_type or "application/octet-stream",
            )
        }
        logger.debug("Uploading %r for analysis", upload)
        response = self._session.post(
            f"{self._base}/api/analyze-mix", data=data, files=files, timeout=self._timeout
        )
        return response.status_code, _reply(response)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def list_projects(self) -> tuple[Project, ...]:
        response = self._session.get(f"{self._base}/api/projects", timeout=self._timeout)
        self._raise_for_status(response)
        return tuple(project_from_payload(p) for p in response.json().get("projects", []))

    def upsert_project(self, project: Project) -> Project:
        payload = project_to_payload(project)
        payload.pop("id")
        payload.pop("created_at")
        response = self._session.put(
            f"{self._base}/api/projects/{project.id}", json=payload, timeout=self._timeout
        )
        self._raise_for_status(response)
        return project_from_payload(response.json())

    def delete_project(self, project_id: str) -> None:
        response = self._session.delete(
            f"{self._base}/api/projects/{project_id}", timeout=self._timeout
        )
        self._raise_for_status(response)

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        if 200 <= response.status_code < 300:
            return
        raise ApiError(response.status_code, _detail(response))
