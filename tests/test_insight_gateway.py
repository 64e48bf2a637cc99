"""InsightGateway HTTP behaviour against a fake requests session."""

import requests

from surgiops.integrations.insight_gateway import GatewayResult, InsightGateway

from fakes import FakeResponse, FakeSession


def _gateway(session, **kwargs):
    return InsightGateway("http://fn.test/generate", "secret", session=session, timeout=5, **kwargs)


def test_invoke_posts_empty_payload_with_bearer():
    session = FakeSession(FakeResponse(200, {"success": True, "run_id": 42}))
    result = _gateway(session).invoke()

    assert result.ok
    assert result.run_id == "42"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://fn.test/generate"
    assert call["json"] == {}
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert call["timeout"] == 5


def test_error_field_in_ok_body_is_failure():
    session = FakeSession(FakeResponse(200, {"error": "duplicate key value violates unique constraint"}))
    result = _gateway(session).invoke()
    assert not result.ok
    assert "duplicate key" in result.error


def test_http_error_uses_body_message():
    session = FakeSession(FakeResponse(500, {"message": "OpenAI quota exceeded"}))
    result = _gateway(session).invoke()
    assert not result.ok
    assert result.status_code == 500
    assert result.error == "OpenAI quota exceeded"


def test_http_error_without_body():
    session = FakeSession(FakeResponse(503))
    result = _gateway(session).invoke()
    assert result.error.startswith("HTTP 503")


def test_timeout():
    session = FakeSession(requests.Timeout("slow"))
    result = _gateway(session).invoke()
    assert not result.ok
    assert result.status_code is None
    assert result.error == "Request timeout after 5s"


def test_network_error():
    session = FakeSession(requests.ConnectionError("refused"))
    result = _gateway(session).invoke()
    assert not result.ok
    assert "refused" in result.error


def test_unconfigured_url_makes_no_call():
    session = FakeSession()
    result = InsightGateway("", session=session).invoke()
    assert not result.ok
    assert session.calls == []


def test_run_status_url_template():
    session = FakeSession(FakeResponse(200, {"status": "completed"}))
    gateway = _gateway(session, status_url="http://fn.test/runs/{run_id}")
    assert gateway.supports_polling
    result = gateway.get_run_status("42")
    assert result.data == {"status": "completed"}
    assert session.calls[0]["url"] == "http://fn.test/runs/42"
    assert session.calls[0]["method"] == "GET"


def test_from_config():
    gateway = InsightGateway.from_config({
        "INSIGHTS_FUNCTION_URL": "http://a", "INSIGHTS_FUNCTION_KEY": "k", "INSIGHTS_TIMEOUT": 9,
    })
    assert gateway.function_url == "http://a"
    assert gateway.timeout == 9
    assert not gateway.supports_polling


def test_run_id_aliases():
    assert GatewayResult(True, 200, {"runId": 7}, None, 1).run_id == "7"
    assert GatewayResult(True, 200, {}, None, 1).run_id is None
