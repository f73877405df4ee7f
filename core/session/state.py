"""Session state — the single explicit struct owned by the session controller.

Pure value object: transitions build new states with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.mixing.catalog import DEFAULT_MODE, DEFAULT_PRESET, mode_label, preset_label
from core.mixing.types import AudioUpload, Message, MixContext, Tone
from core.projects import Project


@dataclass(frozen=True)
class SessionState:
    """Live client-side state of one chat session.

    Attributes:
        messages: Transcript, oldest first. Append-only within a session.
        mode: Active mode id.
        preset_id: Active preset id; belongs to ``mode``'s preset list.
        tone: Active tone dial.
        attachment: Live audio binary, never persisted.
        mix_file_name: Attachment label; may outlive the binary after a
            project load.
        active_project_id: Id of the loaded project; ``""`` for a scratch
            session.
        project_name: Name typed for the next save.
        projects: Last project list fetched from the store.
        is_sending: True while a gateway call is in flight.
        epoch: Session generation; advanced whenever the session is replaced
            so replies issued by an earlier session can be recognised.
    """

    messages: tuple[Message, ...] = ()
    mode: str = DEFAULT_MODE
    preset_id: str = DEFAULT_PRESET
    tone: Tone = field(default_factory=Tone)
    attachment: AudioUpload | None = None
    mix_file_name: str = ""
    active_project_id: str = ""
    project_name: str = ""
    projects: tuple[Project, ...] = ()
    is_sending: bool = False
    epoch: int = 0

    @property
    def is_thinking(self) -> bool:
        return self.is_sending

    @property
    def has_attachment(self) -> bool:
        return self.attachment is not None

    @property
    def mode_label(self) -> str:
        return mode_label(self.mode)

    @property
    def preset_label(self) -> str:
        return preset_label(self.mode, self.preset_id)

    def context(self) -> MixContext:
        """Mode/preset labels and tone as sent to the gateways."""
        return MixContext(mode=self.mode_label, preset=self.preset_label, tone=self.tone)

    def find_project(self, project_id: str) -> Project | None:
        for project in self.projects:
            if str(project.id) == str(project_id):
                return project
        return None
