"""
FastAPI dependency providers.

Provides singletons for the settings, the completion provider, both
gateways and the project store so they are created once and reused
across requests. Tests replace any of them through
``app.dependency_overrides``.
"""

import os
from typing import Annotated

from dotenv import load_dotenv
from fastapi import Depends

from core.config import AssistantSettings
from core.generation.base import CompletionProvider
from db.projects import ProjectStore
from db.session import get_sessionmaker
from gateways.chat import ChatGateway
from gateways.mix_analysis import MixAnalysisGateway
from gateways.openai_provider import OpenAICompletionProvider

_settings: AssistantSettings | None = None


def get_settings() -> AssistantSettings:
    """
    Return cached ``AssistantSettings`` read from the environment.

    ``.env`` is loaded first so local development picks up overrides.
    """
    global _settings  # noqa: PLW0603
    if _settings is None:
        load_dotenv()
        _settings = AssistantSettings.from_env(os.environ)
    return _settings


_completion_provider: OpenAICompletionProvider | None = None


def get_completion_provider() -> CompletionProvider:
    """
    Return a cached ``OpenAICompletionProvider`` singleton.

    Reads ``OPENAI_API_KEY`` on first call; a missing key raises
    ``ValueError`` at that point.
    """
    global _completion_provider  # noqa: PLW0603
    if _completion_provider is None:
        settings = get_settings()
        _completion_provider = OpenAICompletionProvider(
            model=settings.chat_model,
            transcription_model=settings.transcription_model,
        )
    return _completion_provider


Provider = Annotated[CompletionProvider, Depends(get_completion_provider)]
Settings = Annotated[AssistantSettings, Depends(get_settings)]


def get_chat_gateway(provider: Provider, settings: Settings) -> ChatGateway:
    """Build the chat gateway around the shared provider."""
    return ChatGateway(provider, settings)


def get_mix_analysis_gateway(provider: Provider, settings: Settings) -> MixAnalysisGateway:
    """Build the mix analysis gateway around the shared provider."""
    return MixAnalysisGateway(provider, settings)


_project_store: ProjectStore | None = None


def get_project_store() -> ProjectStore:
    """Return a cached ``ProjectStore`` bound to ``DATABASE_URL``."""
    global _project_store  # noqa: PLW0603
    if _project_store is None:
        _project_store = ProjectStore(get_sessionmaker())
    return _project_store
