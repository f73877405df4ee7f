"""Events fed into the session state machine and effects it asks for.

Events come from the user (select mode, send, save, ...) or from the
controller reporting the outcome of an effect (reply received, project
saved, store failed). Effects are requests for I/O; the controller runs
them and reports back with events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.mixing.types import AudioUpload, Message, MixContext
from core.projects import Project

Endpoint = Literal["chat", "analyze_mix"]
StoreOperation = Literal["load", "save", "delete"]

# ---------------------------------------------------------------------------
# User events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectMode:
    mode: str


@dataclass(frozen=True)
class SelectPreset:
    preset_id: str


@dataclass(frozen=True)
class SetTone:
    field: str
    value: str


@dataclass(frozen=True)
class AttachFile:
    upload: AudioUpload


@dataclass(frozen=True)
class RemoveFile:
    pass


@dataclass(frozen=True)
class SetProjectName:
    name: str


@dataclass(frozen=True)
class Send:
    text: str


@dataclass(frozen=True)
class SelectProject:
    project_id: str


@dataclass(frozen=True)
class SaveProject:
    """Save the session. ``new_id`` is used only when no project is active."""

    new_id: str


@dataclass(frozen=True)
class RequestDelete:
    pass


@dataclass(frozen=True)
class ConfirmDelete:
    project_id: str


@dataclass(frozen=True)
class NewSession:
    pass


@dataclass(frozen=True)
class RefreshProjects:
    pass


# ---------------------------------------------------------------------------
# Effect outcome events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReplyReceived:
    """A gateway answered. ``epoch`` is the session epoch the call was issued in."""

    epoch: int
    text: str


@dataclass(frozen=True)
class ReplyFailed:
    """A gateway call failed. ``endpoint`` is None for transport failures."""

    epoch: int
    endpoint: Endpoint | None


@dataclass(frozen=True)
class ProjectsLoaded:
    projects: tuple[Project, ...]


@dataclass(frozen=True)
class ProjectSaved:
    project: Project


@dataclass(frozen=True)
class ProjectDeleted:
    project_id: str


@dataclass(frozen=True)
class StoreFailed:
    operation: StoreOperation


Event = (
    SelectMode
    | SelectPreset
    | SetTone
    | AttachFile
    | RemoveFile
    | SetProjectName
    | Send
    | SelectProject
    | SaveProject
    | RequestDelete
    | ConfirmDelete
    | NewSession
    | RefreshProjects
    | ReplyReceived
    | ReplyFailed
    | ProjectsLoaded
    | ProjectSaved
    | ProjectDeleted
    | StoreFailed
)

# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CallChat:
    epoch: int
    messages: tuple[Message, ...]
    context: MixContext


@dataclass(frozen=True)
class CallAnalyzeMix:
    epoch: int
    upload: AudioUpload
    question: str
    context: MixContext


@dataclass(frozen=True)
class LoadProjects:
    pass


@dataclass(frozen=True)
class UpsertProject:
    project: Project


@dataclass(frozen=True)
class DeleteProject:
    project_id: str


@dataclass(frozen=True)
class AskConfirmDelete:
    """Ask the user to confirm deleting ``project_id`` (display ``name``)."""

    project_id: str
    name: str


@dataclass(frozen=True)
class Alert:
    message: str


Effect = (
    CallChat
    | CallAnalyzeMix
    | LoadProjects
    | UpsertProject
    | DeleteProject
    | AskConfirmDelete
    | Alert
)
