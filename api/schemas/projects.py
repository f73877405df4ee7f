"""Pydantic schemas for ``/api/projects`` endpoints.

Field names on the wire match the table columns (``presetId``,
``mixFileName``); Python attributes use snake_case.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from api.schemas.chat import ChatMessageIn, ToneIn
from core.projects import Project


class ProjectIn(BaseModel):
    """Body of ``PUT /api/projects/{project_id}``. Omitted fields are stored as null."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    messages: list[ChatMessageIn] | None = None
    mode: str | None = None
    preset_id: str | None = Field(None, alias="presetId")
    tone: ToneIn | None = None
    mix_file_name: str | None = Field(None, alias="mixFileName")

    def to_project(self, project_id: str) -> Project:
        return Project(
            id=project_id,
            name=self.name,
            messages=(
                tuple(m.to_message() for m in self.messages) if self.messages is not None else None
            ),
            mode=self.mode,
            preset_id=self.preset_id,
            tone=self.tone.to_tone() if self.tone else None,
            mix_file_name=self.mix_file_name,
        )


class MessageOut(BaseModel):
    role: str
    content: str


class ToneOut(BaseModel):
    aggression: str
    tightness: str
    brightness: str


class ProjectOut(BaseModel):
    """A stored project. Output fields carry no constraints, so any stored row serialises."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    messages: list[MessageOut] | None = None
    mode: str | None = None
    preset_id: str | None = Field(None, alias="presetId")
    tone: ToneOut | None = None
    mix_file_name: str | None = Field(None, alias="mixFileName")
    created_at: datetime | None = None

    @classmethod
    def from_project(cls, project: Project) -> ProjectOut:
        return cls(
            id=project.id,
            name=project.name,
            messages=(
                [MessageOut(role=m.role, content=m.content) for m in project.messages]
                if project.messages is not None
                else None
            ),
            mode=project.mode,
            preset_id=project.preset_id,
            tone=ToneOut(**project.tone.to_dict()) if project.tone else None,
            mix_file_name=project.mix_file_name,
            created_at=project.created_at,
        )


class ProjectListResponse(BaseModel):
    projects: list[ProjectOut]
    total: int
