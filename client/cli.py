"""
Terminal client for the Dirt Halo Studio Assistant.

Usage:
    # Start the API server first
    uvicorn api.main:app --reload

    # Then, in another terminal
    python -m client.cli [--api-base http://localhost:8000]

Plain lines are sent as chat messages (or as the question for the
attached mix). Lines starting with ``/`` are commands; ``/help`` lists them.
"""

from __future__ import annotations

import argparse
import logging
import mimetypes
import os
from collections.abc import Callable
from pathlib import Path

from dotenv import load_dotenv

from client.controller import SessionController
from client.http import DEFAULT_API_BASE, AssistantClient
from core.mixing.catalog import MODES, presets_for
from core.mixing.types import TONE_LEVELS, AudioUpload
from core.session.events import (
    AttachFile,
    Event,
    NewSession,
    RefreshProjects,
    RemoveFile,
    RequestDelete,
    SaveProject,
    SelectMode,
    SelectPreset,
    SelectProject,
    Send,
    SetProjectName,
    SetTone,
)
from core.session.state import SessionState
from infrastructure.log_setup import configure_logging

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  /mode [id]              list modes, or switch mode (resets the preset)
  /preset [id]            list presets for the mode, or switch preset
  /tone <field> <value>   aggression=low|medium|high, tightness=loose|medium|ultra-tight,
                          brightness=dark|neutral|bright
  /attach <path>          attach a WAV/MP3 for analysis
  /detach                 remove the attachment
  /name <text>            name used for the next save
  /save                   save the session as a project
  /projects               refresh and list saved projects
  /open [id]              load a saved project (no id: back to the unsaved session)
  /delete                 delete the active project
  /new                    start a new session
  /status                 show mode, preset, tone and attachment
  /help                   show this help
  /quit                   exit
Anything else is sent to the assistant."""


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the Dirt Halo Studio Assistant.")
    parser.add_argument(
        "--api-base",
        type=str,
        default=os.getenv("ASSISTANT_API_BASE", DEFAULT_API_BASE),
        metavar="URL",
        help="Assistant API base URL (default: $ASSISTANT_API_BASE or %(default)s).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level for diagnostics on stderr (default: $LOG_LEVEL or INFO).",
    )
    return parser.parse_args(argv)


def read_upload(path: str) -> AudioUpload:
    """Load an audio file from disk.

    Raises:
        OSError: If the file cannot be read.
    """
    file_path = Path(path).expanduser()
    content_type, _ = mimetypes.guess_type(file_path.name)
    return AudioUpload(
        filename=file_path.name, data=file_path.read_bytes(), content_type=content_type
    )


def format_status(state: SessionState) -> str:
    tone = state.tone
    lines = [
        f"Mode: {state.mode_label} ({state.mode})",
        f"Preset: {state.preset_label} ({state.preset_id})",
        f"Tone: aggression={tone.aggression}, tightness={tone.tightness}, "
        f"brightness={tone.brightness}",
    ]
    if state.attachment is not None:
        lines.append(f"Attached: {state.attachment.filename} ({state.attachment.size} bytes)")
    elif state.mix_file_name:
        lines.append(f"Remembered file (not attached): {state.mix_file_name}")
    if state.active_project_id:
        lines.append(f"Project: {state.project_name or '(unnamed)'} [{state.active_project_id}]")
    else:
        lines.append("Project: current session (unsaved)")
    return "\n".join(lines)


def format_projects(state: SessionState) -> str:
    if not state.projects:
        return "No saved projects."
    rows = []
    for project in state.projects:
        marker = "*" if project.id == state.active_project_id else " "
        rows.append(f"{marker} {project.id}  {project.name or 'Untitled Project'}")
    return "\n".join(rows)


class Repl:
    """Line-oriented front end over a ``SessionController``.

    Args:
        controller: Session controller to drive.
        output: Sink for user-facing text (``print`` by default).
    """

    def __init__(self, controller: SessionController, output: Callable[[str], None] = print):
        self._controller = controller
        self._out = output

    def _dispatch(self, event: Event) -> SessionState:
        before = len(self._controller.state.messages)
        state = self._controller.dispatch(event)
        for message in state.messages[before:]:
            if message.role == "assistant":
                self._out(f"\nassistant> {message.content}\n")
        return state

    def handle(self, line: str) -> bool:
        """Process one input line. Returns False when the user asked to quit."""
        text = line.strip()
        if not text.startswith("/"):
            if text or self._controller.state.has_attachment:
                self._out("(thinking…)")
            self._dispatch(Send(text))
            return True

        command, _, arg = text[1:].partition(" ")
        arg = arg.strip()

        if command in ("quit", "exit"):
            return False
        if command == "help":
            self._out(HELP_TEXT)
        elif command == "mode":
            self._mode(arg)
        elif command == "preset":
            self._preset(arg)
        elif command == "tone":
            self._tone(arg)
        elif command == "attach":
            self._attach(arg)
        elif command == "detach":
            self._dispatch(RemoveFile())
        elif command == "name":
            self._dispatch(SetProjectName(arg))
        elif command == "save":
            self._dispatch(SaveProject(self._controller.new_project_id()))
            if self._controller.state.active_project_id:
                self._out(f"Saved as {self._controller.state.active_project_id}")
        elif command == "projects":
            self._dispatch(RefreshProjects())
            self._out(format_projects(self._controller.state))
        elif command == "open":
            self._open(arg)
        elif command == "delete":
            if not self._controller.state.active_project_id:
                self._out("No project is active.")
            else:
                self._dispatch(RequestDelete())
        elif command == "new":
            self._dispatch(NewSession())
            self._out("Started a new session.")
        elif command == "status":
            self._out(format_status(self._controller.state))
        else:
            self._out(f"Unknown command /{command}. Type /help for the list.")
        return True

    def _mode(self, arg: str) -> None:
        if not arg:
            for mode_id, label in MODES:
                self._out(f"  {mode_id:<10} {label}")
            return
        state = self._dispatch(SelectMode(arg))
        if state.mode != arg:
            self._out(f"Unknown mode {arg!r}.")
            return
        self._out(f"Mode: {state.mode_label}, preset: {state.preset_label}")

    def _preset(self, arg: str) -> None:
        state = self._controller.state
        if not arg:
            for preset in presets_for(state.mode):
                self._out(f"  {preset.id:<18} {preset.label}")
            return
        state = self._dispatch(SelectPreset(arg))
        if state.preset_id != arg:
            self._out(f"Preset {arg!r} is not available for {state.mode_label}.")
            return
        self._out(f"Preset: {state.preset_label}")

    def _tone(self, arg: str) -> None:
        field, _, value = arg.partition(" ")
        field, value = field.strip().rstrip("="), value.strip()
        if "=" in field and not value:
            field, _, value = field.partition("=")
        if value not in TONE_LEVELS.get(field, ()):
            self._out("Usage: /tone <aggression|tightness|brightness> <value>")
            return
        self._dispatch(SetTone(field, value))
        self._out(format_status(self._controller.state).splitlines()[2])

    def _attach(self, arg: str) -> None:
        if not arg:
            self._out("Usage: /attach <path>")
            return
        try:
            upload = read_upload(arg)
        except OSError as exc:
            self._out(f"Could not read {arg}: {exc.strerror or exc}")
            return
        self._dispatch(AttachFile(upload))
        self._out(f"Attached {upload.filename} ({upload.size} bytes)")

    def _open(self, arg: str) -> None:
        if not arg:
            self._dispatch(SelectProject(""))
            self._out("Back to the current session (unsaved).")
            return
        state = self._controller.state
        if state.find_project(arg) is None:
            state = self._dispatch(RefreshProjects())
        if state.find_project(arg) is None:
            self._out(f"No project with id {arg}.")
            return
        state = self._dispatch(SelectProject(arg))
        self._out(f"Opened {state.project_name or 'Untitled Project'}")
        for message in state.messages:
            self._out(f"{message.role}> {message.content}")


def _confirm(question: str) -> bool:
    return input(f"{question} [y/N] ").strip().lower() in ("y", "yes")


def _alert(message: str) -> None:
    print(f"!! {message}")


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = _parse_args(argv)
    configure_logging(args.log_level)

    client = AssistantClient(args.api_base)
    controller = SessionController(client, confirm=_confirm, alert=_alert)
    repl = Repl(controller)

    logger.info("Connecting to %s", client.api_base)
    controller.dispatch(RefreshProjects())
    print("Dirt Halo Studio Assistant. Type /help for commands.")
    print(format_status(controller.state))

    while True:
        try:
            line = input("\nyou> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not repl.handle(line):
            break


if __name__ == "__main__":
    main()
