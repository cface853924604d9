"""WorkflowClient tests (requests session mocked)"""

from unittest.mock import Mock

import pytest
import requests

from src.workflow_relay.config import UpstreamConfig
from src.workflow_relay.exceptions import (
    UpstreamConfigError,
    UpstreamHTTPError,
    UpstreamUnreachable,
)
from src.workflow_relay.upstream_client import WorkflowClient


def make_response(status_code=200, json_body=None, text="", reason="OK"):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.text = text
    if json_body is None:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    config = UpstreamConfig(base_url="http://n8n.local:5678/", webhook_path="/webhook/chat")
    return WorkflowClient(config, session=session)


def test_build_payload_defaults():
    assert WorkflowClient.build_payload(None, None, None) == {
        "chatInput": "",
        "files": [],
        "sessionId": "default-session",
    }


def test_build_payload_keeps_values():
    files = [{"name": "a.py", "content": "print(1)", "size": 8, "type": "text/x-python"}]
    payload = WorkflowClient.build_payload("hi", files, "abc")
    assert payload == {"chatInput": "hi", "files": files, "sessionId": "abc"}


def test_invoke_posts_json_with_timeout(client, session):
    session.post.return_value = make_response(json_body={"response": "ok"})

    result = client.invoke({"chatInput": "hi", "files": [], "sessionId": "abc"})

    assert result == {"response": "ok"}
    args, kwargs = session.post.call_args
    assert args[0] == "http://n8n.local:5678/webhook/chat"
    assert kwargs["json"] == {"chatInput": "hi", "files": [], "sessionId": "abc"}
    assert kwargs["timeout"] == 120.0
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert session.post.call_count == 1


def test_invoke_returns_text_for_non_json_body(client, session):
    session.post.return_value = make_response(text="plain reply")
    assert client.invoke({}) == "plain reply"


def test_http_error_carries_status_reason_and_body(client, session):
    session.post.return_value = make_response(
        status_code=404,
        json_body={"message": "webhook not registered"},
        reason="Not Found",
    )

    with pytest.raises(UpstreamHTTPError) as excinfo:
        client.invoke({})

    assert excinfo.value.status_code == 404
    assert excinfo.value.reason == "Not Found"
    assert excinfo.value.body == {"message": "webhook not registered"}


def test_timeout_is_unreachable_and_not_retried(client, session):
    session.post.side_effect = requests.exceptions.ReadTimeout("read timed out")

    with pytest.raises(UpstreamUnreachable):
        client.invoke({})
    assert session.post.call_count == 1


def test_connection_refused_is_unreachable(client, session):
    session.post.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(UpstreamUnreachable, match="refused"):
        client.invoke({})


def test_bad_url_is_config_error(session):
    client = WorkflowClient(UpstreamConfig(base_url="localhost:5678"), session=session)
    session.post.side_effect = requests.exceptions.MissingSchema("No scheme supplied")

    with pytest.raises(UpstreamConfigError):
        client.invoke({})


def test_health_connected(client, session):
    response = make_response(status_code=200)
    session.get.return_value = response

    probe = client.check_health()

    assert probe.connected is True
    assert probe.status_code == 200
    session.get.assert_called_once_with("http://n8n.local:5678/health", timeout=5.0)


def test_health_non_2xx_is_disconnected(client, session):
    response = make_response(status_code=503, reason="Service Unavailable")
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("503 Server Error")
    session.get.return_value = response

    probe = client.check_health()

    assert probe.connected is False
    assert "503" in probe.error


def test_health_unreachable(client, session):
    session.get.side_effect = requests.exceptions.ConnectionError("refused")

    probe = client.check_health()

    assert probe.connected is False
    assert probe.error == "refused"
