"""
Tests for the /tickets handler in both dispatch modes.

The ticket service is mocked for handler-only checks; the background
invocation tests run the real service against respx routes.
"""
import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
import respx

from conftest import TICKET_URL, TOKEN_URL, api_event
from services.dispatcher import BACKGROUND_SOURCE
from services.ticket_service import TicketResult
from utils.error_handling import SubmissionError, TicketApiError

BODY = json.dumps({"subject": "Help", "departmentId": "1", "details": "hi"})


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
def test_non_post_is_405(method):
    """Non-POST methods are rejected with 405."""
    from handlers import ticket_submission

    mock_service = MagicMock()
    with patch.object(ticket_submission, "_get_ticket_service", return_value=mock_service):
        resp = ticket_submission.lambda_handler(api_event(method=method, body=BODY), None)

    assert resp["statusCode"] == 405
    assert json.loads(resp["body"]) == {"error": "Method not allowed"}
    mock_service.submit.assert_not_called()


def test_sync_relays_downstream_status_and_body():
    """Sync mode relays the helpdesk status and body."""
    from handlers import ticket_submission

    mock_service = MagicMock()
    mock_service.submit.return_value = TicketResult(status_code=200, body={"id": "t-1"})

    with patch.object(ticket_submission, "_get_ticket_service", return_value=mock_service):
        resp = ticket_submission.lambda_handler(api_event(body=BODY), None)

    assert resp["statusCode"] == 200
    assert json.loads(resp["body"]) == {"id": "t-1"}
    raw_body, correlation_id = mock_service.submit.call_args.args
    assert raw_body == BODY
    assert correlation_id


@pytest.mark.parametrize(
    "error",
    [
        SubmissionError("Invalid JSON body: Expecting value"),
        TicketApiError("departmentId is invalid", upstream_status=422),
        RuntimeError("boom"),
    ],
)
def test_sync_failures_become_500(error):
    """Any failure in sync mode becomes a 500."""
    from handlers import ticket_submission

    mock_service = MagicMock()
    mock_service.submit.side_effect = error

    with patch.object(ticket_submission, "_get_ticket_service", return_value=mock_service):
        resp = ticket_submission.lambda_handler(api_event(body=BODY), None)

    assert resp["statusCode"] == 500
    assert json.loads(resp["body"]) == {"error": str(error)}


def test_base64_body_is_decoded():
    """Base64 encoded bodies are decoded before submission."""
    import base64

    from handlers import ticket_submission

    mock_service = MagicMock()
    mock_service.submit.return_value = TicketResult(status_code=200, body={})
    event = api_event(body=base64.b64encode(BODY.encode()).decode())
    event["isBase64Encoded"] = True

    with patch.object(ticket_submission, "_get_ticket_service", return_value=mock_service):
        ticket_submission.lambda_handler(event, None)

    assert mock_service.submit.call_args.args[0] == BODY


FUNCTION_ARN = "arn:aws:lambda:eu-west-2:123456789012:function:ticket-relay-dev"


def _context():
    context = MagicMock()
    context.invoked_function_arn = FUNCTION_ARN
    return context


def test_async_returns_202_acknowledgement(monkeypatch):
    """Async mode queues the raw body on the function itself and answers 202."""
    from handlers import ticket_submission

    monkeypatch.setenv("DISPATCH_MODE", "async")
    mock_service = MagicMock()
    mock_dispatcher = MagicMock()

    with patch.object(ticket_submission, "_get_ticket_service", return_value=mock_service), \
            patch.object(ticket_submission, "_get_dispatcher", return_value=mock_dispatcher):
        resp = ticket_submission.lambda_handler(api_event(body=BODY), _context())

    assert resp["statusCode"] == 202
    assert json.loads(resp["body"]) == {"status": "processing", "message": "Request received"}
    mock_service.submit.assert_not_called()
    function_name, raw_body, correlation_id = mock_dispatcher.dispatch.call_args.args
    assert function_name == FUNCTION_ARN
    assert raw_body == BODY
    assert correlation_id


@pytest.mark.parametrize("method", ["GET", "DELETE"])
def test_async_non_post_is_405_and_not_dispatched(monkeypatch, method):
    """The method check runs before anything is scheduled."""
    from handlers import ticket_submission

    monkeypatch.setenv("DISPATCH_MODE", "async")
    mock_dispatcher = MagicMock()

    with patch.object(ticket_submission, "_get_dispatcher", return_value=mock_dispatcher):
        resp = ticket_submission.lambda_handler(api_event(method=method, body=BODY), _context())

    assert resp["statusCode"] == 405
    assert json.loads(resp["body"]) == {"error": "Method not allowed"}
    mock_dispatcher.dispatch.assert_not_called()


def test_async_falls_back_to_function_name_env(monkeypatch):
    """Without an ARN on the context the runtime's function name is used."""
    from handlers import ticket_submission

    monkeypatch.setenv("DISPATCH_MODE", "async")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", "ticket-relay-dev")
    mock_dispatcher = MagicMock()

    with patch.object(ticket_submission, "_get_dispatcher", return_value=mock_dispatcher):
        resp = ticket_submission.lambda_handler(api_event(body=BODY), None)

    assert resp["statusCode"] == 202
    assert mock_dispatcher.dispatch.call_args.args[0] == "ticket-relay-dev"


def test_async_without_function_name_is_500(monkeypatch):
    """If the function cannot be named the router reports a 500."""
    from handlers import main, ticket_submission

    monkeypatch.setenv("DISPATCH_MODE", "async")
    monkeypatch.delenv("AWS_LAMBDA_FUNCTION_NAME", raising=False)
    mock_dispatcher = MagicMock()

    with patch.object(ticket_submission, "_get_dispatcher", return_value=mock_dispatcher):
        resp = main.lambda_handler(api_event(body=BODY), None)

    assert resp["statusCode"] == 500
    assert "function name" in json.loads(resp["body"])["error"]
    mock_dispatcher.dispatch.assert_not_called()


def _background_event(body=BODY):
    return {"source": BACKGROUND_SOURCE, "body": body, "correlation_id": "cid-bg"}


def test_background_token_failure_is_only_logged(monkeypatch):
    """A token failure in the background run never reaches the helpdesk."""
    from handlers import ticket_submission

    mock_log = MagicMock()
    monkeypatch.setattr(ticket_submission, "log_event", mock_log)

    with respx.mock(assert_all_called=False) as router:
        router.get(TOKEN_URL).mock(return_value=httpx.Response(503, json={}))
        ticket_route = router.post(TICKET_URL).mock(return_value=httpx.Response(200, json={}))

        resp = ticket_submission.background_handler(_background_event(), _context())

    assert resp["statusCode"] == 500
    assert not ticket_route.called
    failed = [c for c in mock_log.call_args_list if c.args[1] == "ticket.failed"]
    assert len(failed) == 1
    assert failed[0].kwargs["status"] == 500
    assert failed[0].kwargs["correlation_id"] == "cid-bg"


def test_background_success_posts_ticket(monkeypatch):
    """A background run creates the ticket and logs ticket.completed."""
    from handlers import ticket_submission

    mock_log = MagicMock()
    monkeypatch.setattr(ticket_submission, "log_event", mock_log)

    with respx.mock() as router:
        router.get(TOKEN_URL).mock(return_value=httpx.Response(200, json={"access_token": "t"}))
        ticket_route = router.post(TICKET_URL).mock(
            return_value=httpx.Response(200, json={"id": "t-9"})
        )

        resp = ticket_submission.background_handler(_background_event(), _context())

    assert resp["statusCode"] == 200
    assert ticket_route.called
    assert ticket_route.calls.last.request.headers["Authorization"] == "Zoho-oauthtoken t"
    assert [c.args[1] for c in mock_log.call_args_list] == ["ticket.completed"]


def test_background_bad_body_does_not_raise():
    """Malformed queued bodies are reported, not raised, so Lambda does not retry."""
    from handlers import ticket_submission

    with respx.mock(assert_all_called=False) as router:
        token_route = router.get(TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "t"})
        )
        resp = ticket_submission.background_handler(_background_event("not json"), _context())

    assert resp["statusCode"] == 500
    assert not token_route.called
