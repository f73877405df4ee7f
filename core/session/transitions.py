"""
Session state machine.

``transition(state, event)`` is a pure function returning the next state
and the effects the controller must run. No I/O, no clocks, no id
generation: anything non-deterministic arrives inside the event.

Stale replies
-------------
Gateway effects carry the session ``epoch`` at issue time. New session,
project selection and deleting the active project advance the epoch; a
reply or failure whose epoch no longer matches is discarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from core.mixing.catalog import first_preset, is_mode, preset_belongs
from core.mixing.types import TONE_LEVELS, Message, Tone
from core.projects import Project
from core.session.events import (
    Alert,
    AskConfirmDelete,
    AttachFile,
    CallAnalyzeMix,
    CallChat,
    ConfirmDelete,
    DeleteProject,
    Effect,
    Event,
    LoadProjects,
    NewSession,
    ProjectDeleted,
    ProjectSaved,
    ProjectsLoaded,
    RefreshProjects,
    RemoveFile,
    ReplyFailed,
    ReplyReceived,
    RequestDelete,
    SaveProject,
    SelectMode,
    SelectPreset,
    SelectProject,
    Send,
    SetProjectName,
    SetTone,
    StoreFailed,
    UpsertProject,
)
from core.session.state import SessionState

logger = logging.getLogger(__name__)

REATTACH_GUIDANCE = (
    "This project remembers the filename, but not the actual audio file. "
    "Please re-attach the WAV/MP3 to analyze."
)
NO_QUESTION_PROVIDED = "(no question provided)"
EMPTY_REPLY_TEXT = "No response from model."

REPLY_FAILURE_MESSAGES: dict[str | None, str] = {
    "chat": "There was an error talking to the AI backend. Try again in a second.",
    "analyze_mix": (
        "There was an error analyzing your mix. Make sure the file is a WAV/MP3 and try again."
    ),
    None: (
        "There was a server error. Check your internet connection "
        "and that the app is still running."
    ),
}

STORE_FAILURE_MESSAGES: dict[str, str] = {
    "load": "Failed to load projects",
    "save": "Failed to save project",
    "delete": "Failed to delete project",
}

UNTITLED_PROJECT = "Untitled Project"


@dataclass(frozen=True)
class Transition:
    """Next state plus the effects to run, in order."""

    state: SessionState
    effects: tuple[Effect, ...] = ()


def _fresh(state: SessionState) -> SessionState:
    """Default session that keeps the fetched project list and advances the epoch."""
    return SessionState(projects=state.projects, epoch=state.epoch + 1)


def _analysis_message(state: SessionState, question: str) -> str:
    tone = state.tone
    header = (
        f"Mode: {state.mode_label}, Preset: {state.preset_label}, "
        f"Aggression: {tone.aggression}, Tightness: {tone.tightness}, "
        f"Brightness: {tone.brightness}"
    )
    return f"{header}\n\n{question or NO_QUESTION_PROVIDED}"


def _send(state: SessionState, text: str) -> Transition:
    if not text.strip() and state.attachment is None:
        return Transition(state)
    if state.is_sending:
        return Transition(state)

    # A loaded project keeps the filename label but never the binary.
    if state.mix_file_name and state.attachment is None:
        guidance = Message(role="assistant", content=REATTACH_GUIDANCE)
        return Transition(replace(state, messages=state.messages + (guidance,)))

    context = state.context()
    if state.attachment is not None:
        user = Message(role="user", content=_analysis_message(state, text))
        effect: Effect = CallAnalyzeMix(
            epoch=state.epoch, upload=state.attachment, question=text, context=context
        )
        messages = state.messages + (user,)
    else:
        messages = state.messages + (Message(role="user", content=text),)
        effect = CallChat(epoch=state.epoch, messages=messages, context=context)

    return Transition(replace(state, messages=messages, is_sending=True), (effect,))


def _append_reply(state: SessionState, epoch: int, content: str) -> Transition:
    if epoch != state.epoch:
        logger.info("Discarding reply from session epoch %d (now %d)", epoch, state.epoch)
        return Transition(state)
    reply = Message(role="assistant", content=content)
    return Transition(replace(state, messages=state.messages + (reply,), is_sending=False))


def _load_project(state: SessionState, project: Project) -> SessionState:
    mode = project.mode if project.mode and is_mode(project.mode) else state.mode
    if project.preset_id:
        preset_id = project.preset_id
    else:
        preset_id = first_preset(mode) or state.preset_id
    return replace(
        state,
        messages=project.messages or (),
        mode=mode,
        preset_id=preset_id,
        tone=project.tone or Tone(),
        attachment=None,
        mix_file_name=project.mix_file_name or "",
        active_project_id=str(project.id),
        project_name=project.name or "",
        is_sending=False,
        epoch=state.epoch + 1,
    )


def _snapshot(state: SessionState, project_id: str) -> Project:
    name = (state.project_name or state.mix_file_name or UNTITLED_PROJECT).strip()
    return Project(
        id=project_id,
        name=name or UNTITLED_PROJECT,
        messages=state.messages,
        mode=state.mode,
        preset_id=state.preset_id,
        tone=state.tone,
        mix_file_name=state.mix_file_name or None,
    )


def transition(state: SessionState, event: Event) -> Transition:
    """Apply *event* to *state*.

    Args:
        state: Current session state.
        event: User action or effect outcome.

    Returns:
        The next state and the effects to run. Events that do not apply
        to the current state return it unchanged with no effects.
    """
    if isinstance(event, SelectMode):
        preset = first_preset(event.mode)
        if preset is None:
            return Transition(state)
        return Transition(replace(state, mode=event.mode, preset_id=preset))

    if isinstance(event, SelectPreset):
        if not preset_belongs(state.mode, event.preset_id):
            return Transition(state)
        return Transition(replace(state, preset_id=event.preset_id))

    if isinstance(event, SetTone):
        if event.value not in TONE_LEVELS.get(event.field, ()):
            return Transition(state)
        return Transition(replace(state, tone=replace(state.tone, **{event.field: event.value})))

    if isinstance(event, AttachFile):
        return Transition(
            replace(state, attachment=event.upload, mix_file_name=event.upload.filename)
        )

    if isinstance(event, RemoveFile):
        return Transition(replace(state, attachment=None, mix_file_name=""))

    if isinstance(event, SetProjectName):
        return Transition(replace(state, project_name=event.name))

    if isinstance(event, Send):
        return _send(state, event.text)

    if isinstance(event, ReplyReceived):
        return _append_reply(state, event.epoch, event.text or EMPTY_REPLY_TEXT)

    if isinstance(event, ReplyFailed):
        return _append_reply(state, event.epoch, REPLY_FAILURE_MESSAGES[event.endpoint])

    if isinstance(event, SelectProject):
        if not event.project_id:
            return Transition(replace(state, active_project_id=""))
        project = state.find_project(event.project_id)
        if project is None:
            return Transition(state)
        return Transition(_load_project(state, project))

    if isinstance(event, SaveProject):
        project_id = state.active_project_id or event.new_id
        return Transition(state, (UpsertProject(_snapshot(state, project_id)),))

    if isinstance(event, ProjectSaved):
        saved = event.project
        return Transition(
            replace(state, active_project_id=str(saved.id), project_name=saved.name or ""),
            (LoadProjects(),),
        )

    if isinstance(event, RequestDelete):
        project = state.find_project(state.active_project_id) if state.active_project_id else None
        if project is None:
            return Transition(state)
        return Transition(state, (AskConfirmDelete(str(project.id), project.name or ""),))

    if isinstance(event, ConfirmDelete):
        return Transition(state, (DeleteProject(event.project_id),))

    if isinstance(event, ProjectDeleted):
        if state.active_project_id != event.project_id:
            return Transition(state, (LoadProjects(),))
        cleared = replace(
            state,
            active_project_id="",
            messages=(),
            is_sending=False,
            epoch=state.epoch + 1,
        )
        return Transition(cleared, (LoadProjects(),))

    if isinstance(event, RefreshProjects):
        return Transition(state, (LoadProjects(),))

    if isinstance(event, ProjectsLoaded):
        return Transition(replace(state, projects=event.projects))

    if isinstance(event, StoreFailed):
        return Transition(state, (Alert(STORE_FAILURE_MESSAGES[event.operation]),))

    if isinstance(event, NewSession):
        return Transition(_fresh(state))

    raise TypeError(f"unsupported event: {type(event).__name__}")
