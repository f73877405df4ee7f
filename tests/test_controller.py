"""Tests for client/controller.py — effects run against a mocked AssistantClient."""

from unittest.mock import MagicMock

import pytest
import requests

from client.controller import SessionController
from client.http import ApiError, AssistantClient
from core.mixing.types import AudioUpload, Message
from core.projects import Project
from core.session.events import (
    AttachFile,
    NewSession,
    RefreshProjects,
    RequestDelete,
    SaveProject,
    SelectProject,
    Send,
)
from core.session.state import SessionState
from core.session.transitions import REPLY_FAILURE_MESSAGES


@pytest.fixture()
def client() -> MagicMock:
    mock = MagicMock(spec=AssistantClient)
    mock.chat.return_value = (200, "Try a slower attack.")
    mock.analyze_mix.return_value = (200, "Verdict: muddy.")
    mock.list_projects.return_value = ()
    return mock


@pytest.fixture()
def alerts() -> list[str]:
    return []


def _controller(client, alerts, *, confirm=True, state=None) -> SessionController:
    return SessionController(
        client,
        confirm=lambda _question: confirm,
        alert=alerts.append,
        new_id=lambda: "new-id",
        state=state,
    )


class TestGatewayEffects:
    def test_chat_round_trip(self, client, alerts) -> None:
        controller = _controller(client, alerts)
        state = controller.dispatch(Send("drum bus?"))
        assert [m.content for m in state.messages] == ["drum bus?", "Try a slower attack."]
        assert not state.is_sending
        client.chat.assert_called_once()

    def test_guidance_400_shown_verbatim(self, client, alerts) -> None:
        client.chat.return_value = (400, "Try asking something.")
        state = _controller(client, alerts).dispatch(Send("x"))
        assert state.messages[-1].content == "Try asking something."

    def test_server_error_uses_fixed_message(self, client, alerts) -> None:
        client.chat.return_value = (500, "raw server text")
        state = _controller(client, alerts).dispatch(Send("x"))
        assert state.messages[-1].content == REPLY_FAILURE_MESSAGES["chat"]

    def test_transport_failure(self, client, alerts) -> None:
        client.chat.side_effect = requests.ConnectionError("refused")
        state = _controller(client, alerts).dispatch(Send("x"))
        assert state.messages[-1].content == REPLY_FAILURE_MESSAGES[None]
        assert not state.is_sending

    def test_analyze_mix(self, client, alerts) -> None:
        controller = _controller(client, alerts)
        controller.dispatch(AttachFile(AudioUpload(filename="a.wav", data=b"x")))
        state = controller.dispatch(Send("punch?"))
        assert state.messages[-1] == Message(role="assistant", content="Verdict: muddy.")
        upload, question, context = client.analyze_mix.call_args.args
        assert upload.filename == "a.wav"
        assert question == "punch?"
        assert context.mode == "Vocals"
        client.chat.assert_not_called()

    def test_analyze_server_error(self, client, alerts) -> None:
        client.analyze_mix.return_value = (502, "")
        controller = _controller(client, alerts)
        controller.dispatch(AttachFile(AudioUpload(filename="a.wav", data=b"x")))
        state = controller.dispatch(Send(""))
        assert state.messages[-1].content == REPLY_FAILURE_MESSAGES["analyze_mix"]


class TestStoreEffects:
    def test_save_upserts_and_refreshes(self, client, alerts) -> None:
        saved = Project(id="new-id", name="Untitled Project")
        client.upsert_project.return_value = saved
        client.list_projects.return_value = (saved,)
        state = _controller(client, alerts).dispatch(SaveProject("new-id"))
        assert state.active_project_id == "new-id"
        assert state.projects == (saved,)
        assert client.upsert_project.call_args.args[0].id == "new-id"

    def test_save_failure_alerts(self, client, alerts) -> None:
        client.upsert_project.side_effect = ApiError(503, "down")
        controller = _controller(client, alerts)
        before = controller.state
        state = controller.dispatch(SaveProject("new-id"))
        assert alerts == ["Failed to save project"]
        assert state == before

    def test_load_failure_alerts(self, client, alerts) -> None:
        client.list_projects.side_effect = requests.ConnectionError("refused")
        _controller(client, alerts).dispatch(RefreshProjects())
        assert alerts == ["Failed to load projects"]

    def test_malformed_project_payload_alerts(self, client, alerts) -> None:
        client.list_projects.side_effect = ValueError("Invalid isoformat string: 'yesterday'")
        state = _controller(client, alerts).dispatch(RefreshProjects())
        assert alerts == ["Failed to load projects"]
        assert state.projects == ()

    def test_delete_confirmed(self, client, alerts) -> None:
        project = Project(id="p-1", name="Demo", messages=(Message(role="user", content="x"),))
        state = SessionState(projects=(project,))
        controller = _controller(client, alerts, state=state)
        controller.dispatch(SelectProject("p-1"))
        client.list_projects.return_value = ()
        state = controller.dispatch(RequestDelete())
        client.delete_project.assert_called_once_with("p-1")
        assert state.active_project_id == ""
        assert state.messages == ()
        assert state.projects == ()

    def test_delete_declined(self, client, alerts) -> None:
        project = Project(id="p-1", name="Demo")
        controller = _controller(
            client, alerts, confirm=False, state=SessionState(projects=(project,))
        )
        controller.dispatch(SelectProject("p-1"))
        state = controller.dispatch(RequestDelete())
        client.delete_project.assert_not_called()
        assert state.active_project_id == "p-1"

    def test_delete_failure_alerts(self, client, alerts) -> None:
        client.delete_project.side_effect = ApiError(503, "down")
        project = Project(id="p-1", name="Demo")
        controller = _controller(client, alerts, state=SessionState(projects=(project,)))
        controller.dispatch(SelectProject("p-1"))
        state = controller.dispatch(RequestDelete())
        assert alerts == ["Failed to delete project"]
        assert state.active_project_id == "p-1"


class TestNewSession:
    def test_new_session_keeps_projects(self, client, alerts) -> None:
        project = Project(id="p-1")
        controller = _controller(client, alerts, state=SessionState(projects=(project,)))
        controller.dispatch(Send("x"))
        state = controller.dispatch(NewSession())
        assert state.messages == ()
        assert state.projects == (project,)
