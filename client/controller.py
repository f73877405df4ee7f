"""
Session controller: runs the effects requested by the state machine.

The controller owns the one ``SessionState``. ``dispatch(event)`` feeds
the event through ``transition``, then runs each effect and dispatches
its outcome as a new event. Effects run one at a time from a FIFO queue,
so the client stays single-threaded and at most one send is in flight.

Outcome translation:
    gateway 200 / 400        -> ReplyReceived (400 guidance is shown verbatim)
    gateway 5xx / other      -> ReplyFailed(endpoint)
    transport failure        -> ReplyFailed(endpoint=None)
    project ApiError         -> StoreFailed(operation)
"""

from __future__ import annotations

import logging
import uuid
from collections import deque
from collections.abc import Callable

import requests

from client.http import ApiError, AssistantClient
from core.session.events import (
    Alert,
    AskConfirmDelete,
    CallAnalyzeMix,
    CallChat,
    ConfirmDelete,
    DeleteProject,
    Effect,
    Event,
    LoadProjects,
    ProjectDeleted,
    ProjectSaved,
    ProjectsLoaded,
    ReplyFailed,
    ReplyReceived,
    StoreFailed,
    UpsertProject,
)
from core.session.state import SessionState
from core.session.transitions import transition

logger = logging.getLogger(__name__)

_REPLY_STATUSES = frozenset({200, 400})


def _new_id() -> str:
    return str(uuid.uuid4())


class SessionController:
    """Drive one chat session against the assistant API.

    Args:
        client: HTTP client for the gateways and the project store.
        confirm: Blocking yes/no prompt; receives the question text.
        alert: Blocking notice shown for persistence failures.
        new_id: Id factory for newly saved projects.
        state: Initial state (defaults to a fresh session).
    """

    def __init__(
        self,
        client: AssistantClient,
        *,
        confirm: Callable[[str], bool],
        alert: Callable[[str], None],
        new_id: Callable[[], str] = _new_id,
        state: SessionState | None = None,
    ) -> None:
        self._client = client
        self._confirm = confirm
        self._alert = alert
        self._new_id = new_id
        self._state = state or SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    def new_project_id(self) -> str:
        return self._new_id()

    def dispatch(self, event: Event) -> SessionState:
        """Apply *event* and run every effect it (transitively) produces."""
        pending: deque[Event] = deque([event])
        while pending:
            result = transition(self._state, pending.popleft())
            self._state = result.state
            for effect in result.effects:
                outcome = self._run(effect)
                if outcome is not None:
                    pending.append(outcome)
        return self._state

    # ------------------------------------------------------------------
    # Effect execution
    # ------------------------------------------------------------------

    def _run(self, effect: Effect) -> Event | None:
        if isinstance(effect, CallChat):
            return self._call_gateway(
                "chat", effect.epoch, lambda: self._client.chat(effect.messages, effect.context)
            )
        if isinstance(effect, CallAnalyzeMix):
            return self._call_gateway(
                "analyze_mix",
                effect.epoch,
                lambda: self._client.analyze_mix(effect.upload, effect.question, effect.context),
            )
        if isinstance(effect, LoadProjects):
            try:
                return ProjectsLoaded(self._client.list_projects())
            except (ApiError, requests.RequestException, ValueError) as exc:
                logger.error("Loading projects failed: %s", exc)
                return StoreFailed("load")
        if isinstance(effect, UpsertProject):
            try:
                return ProjectSaved(self._client.upsert_project(effect.project))
            except (ApiError, requests.RequestException, ValueError) as exc:
                logger.error("Saving project %s failed: %s", effect.project.id, exc)
                return StoreFailed("save")
        if isinstance(effect, DeleteProject):
            try:
                self._client.delete_project(effect.project_id)
            except (ApiError, requests.RequestException) as exc:
                logger.error("Deleting project %s failed: %s", effect.project_id, exc)
                return StoreFailed("delete")
            return ProjectDeleted(effect.project_id)
        if isinstance(effect, AskConfirmDelete):
            label = effect.name or "this project"
            if self._confirm(f'Delete project "{label}"? This cannot be undone.'):
                return ConfirmDelete(effect.project_id)
            return None
        if isinstance(effect, Alert):
            self._alert(effect.message)
            return None
        raise TypeError(f"unsupported effect: {type(effect).__name__}")

    def _call_gateway(
        self, endpoint: str, epoch: int, call: Callable[[], tuple[int, str]]
    ) -> Event:
        try:
            status, reply = call()
        except requests.RequestException as exc:
            logger.warning("%s request failed in transport: %s", endpoint, exc)
            return ReplyFailed(epoch=epoch, endpoint=None)
        if status in _REPLY_STATUSES:
            return ReplyReceived(epoch=epoch, text=reply)
        logger.warning("%s returned HTTP %d", endpoint, status)
        return ReplyFailed(epoch=epoch, endpoint=endpoint)
