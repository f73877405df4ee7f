"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat override/mock boilerplate.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.deps import get_completion_provider, get_project_store, get_settings
from api.main import app
from core.config import AssistantSettings
from core.generation.base import OutputTextReply, ProviderReply
from core.mixing.types import AudioUpload
from db.models import Base
from db.projects import ProjectStore

# ---------------------------------------------------------------------------
# Fake completion provider
# ---------------------------------------------------------------------------


class FakeProvider:
    """Deterministic completion provider — no OpenAI calls.

    Records every prompt and upload it receives. Set ``complete_error`` or
    ``transcribe_error`` to make the corresponding call raise.
    """

    def __init__(
        self,
        reply: ProviderReply | None = None,
        transcript: str = "la la la",
    ) -> None:
        self.reply = reply if reply is not None else OutputTextReply(text="Cut 3 dB at 300 Hz.")
        self.transcript = transcript
        self.complete_error: Exception | None = None
        self.transcribe_error: Exception | None = None
        self.prompts: list[str] = []
        self.models: list[str | None] = []
        self.uploads: list[AudioUpload] = []

    def complete(self, prompt: str, *, model: str | None = None) -> ProviderReply:
        self.prompts.append(prompt)
        self.models.append(model)
        if self.complete_error is not None:
            raise self.complete_error
        return self.reply

    def transcribe(self, upload: AudioUpload, *, model: str | None = None) -> str:
        self.uploads.append(upload)
        if self.transcribe_error is not None:
            raise self.transcribe_error
        return self.transcript


# ---------------------------------------------------------------------------
# Project store on in-memory SQLite
# ---------------------------------------------------------------------------


@pytest.fixture()
def session_factory():
    """Sessionmaker over a fresh in-memory SQLite database with the schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture()
def project_store(session_factory) -> ProjectStore:
    return ProjectStore(session_factory)


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def settings() -> AssistantSettings:
    """Default settings; tests needing a small upload cap override this fixture."""
    return AssistantSettings()


@pytest.fixture()
def api_client(fake_provider, settings, project_store):
    """FastAPI ``TestClient`` with provider, settings and store overridden.

    The fake provider is reachable as ``client.provider`` and the store
    as ``client.store``.
    """
    app.dependency_overrides[get_completion_provider] = lambda: fake_provider
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_project_store] = lambda: project_store

    with TestClient(app) as c:
        c.provider = fake_provider  # type: ignore[attr-defined]
        c.store = project_store  # type: ignore[attr-defined]
        yield c

    app.dependency_overrides.clear()
