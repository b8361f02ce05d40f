"""Unit tests for TrackboardClient."""

import json

import httpx
import pytest

from trackboard.board import TicketStatus
from trackboard.client import (
    ClientError,
    RequestFailedError,
    TicketNotFoundError,
    TrackboardClient,
)

BASE_URL = "http://tracker.test/api/v1"


def ticket_payload(**overrides) -> dict:
    payload = {
        "id": "t1",
        "project_id": "p1",
        "title": "Login fails",
        "description": "",
        "status": "todo",
        "priority": "medium",
        "type": "bug",
        "assignee_id": None,
        "due_date": None,
        "labels": [],
        "comment_count": 0,
        "created_at": "2026-01-05T10:00:00",
        "updated_at": "2026-01-05T10:00:00",
    }
    payload.update(overrides)
    return payload


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def make_client(recorder: Recorder, token: str | None = None) -> TrackboardClient:
    return TrackboardClient(BASE_URL, token=token, transport=httpx.MockTransport(recorder))


@pytest.mark.unit
class TestTickets:
    """Ticket endpoints."""

    @pytest.mark.asyncio
    async def test_list_tickets(self) -> None:
        recorder = Recorder(
            httpx.Response(
                200,
                json={
                    "data": [ticket_payload(), ticket_payload(id="t2", status="done")],
                    "error": None,
                },
            )
        )
        client = make_client(recorder)

        tickets = await client.list_tickets("p1", status=TicketStatus.DONE, search="login")
        await client.close()

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/api/v1/tickets"
        assert request.url.params["project_id"] == "p1"
        assert request.url.params["status"] == "done"
        assert request.url.params["search"] == "login"
        assert "priority" not in request.url.params
        assert [t.id for t in tickets] == ["t1", "t2"]
        assert tickets[1].status == TicketStatus.DONE

    @pytest.mark.asyncio
    async def test_update_status(self) -> None:
        recorder = Recorder(
            httpx.Response(200, json={"data": ticket_payload(status="in-progress"), "error": None})
        )
        client = make_client(recorder, token="secret")

        ticket = await client.update_status("t1", TicketStatus.IN_PROGRESS)
        await client.close()

        request = recorder.requests[0]
        assert request.method == "PATCH"
        assert request.url.path == "/api/v1/tickets/t1/status"
        assert json.loads(request.content) == {"status": "in-progress"}
        assert request.headers["Authorization"] == "Bearer secret"
        assert ticket.status == TicketStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_create_ticket_sends_fields(self) -> None:
        recorder = Recorder(httpx.Response(201, json={"data": ticket_payload(), "error": None}))
        client = make_client(recorder)

        await client.create_ticket("p1", "Login fails", priority="high", labels=("auth",))
        await client.close()

        body = json.loads(recorder.requests[0].content)
        assert body == {
            "project_id": "p1",
            "title": "Login fails",
            "priority": "high",
            "labels": ["auth"],
        }

    @pytest.mark.asyncio
    async def test_delete_returns_none(self) -> None:
        recorder = Recorder(httpx.Response(204))
        client = make_client(recorder)

        assert await client.delete_ticket("t1") is None
        assert recorder.requests[0].method == "DELETE"
        await client.close()


@pytest.mark.unit
class TestErrors:
    """Error responses and transport failures."""

    @pytest.mark.asyncio
    async def test_ticket_not_found(self) -> None:
        recorder = Recorder(httpx.Response(404, json={"data": None, "error": "Ticket not found"}))
        client = make_client(recorder)

        with pytest.raises(TicketNotFoundError, match="Ticket not found") as exc_info:
            await client.get_ticket("missing")
        await client.close()

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_server_error_message_is_surfaced(self) -> None:
        recorder = Recorder(
            httpx.Response(400, json={"data": None, "error": "Invalid status. Must be one of: x"})
        )
        client = make_client(recorder)

        with pytest.raises(RequestFailedError, match="Invalid status") as exc_info:
            await client.update_status("t1", "nope")
        await client.close()

        assert not isinstance(exc_info.value, TicketNotFoundError)
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_non_json_error(self) -> None:
        recorder = Recorder(httpx.Response(502, text="Bad Gateway"))
        client = make_client(recorder)

        with pytest.raises(RequestFailedError, match="Bad Gateway"):
            await client.list_projects()
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_failure(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = TrackboardClient(BASE_URL, transport=httpx.MockTransport(refuse))

        with pytest.raises(ClientError, match="connection refused"):
            await client.list_tickets("p1")
        await client.close()


@pytest.mark.unit
class TestLifecycle:
    """Client creation and closing."""

    @pytest.mark.asyncio
    async def test_client_is_lazy_and_reusable(self) -> None:
        client = TrackboardClient(BASE_URL + "/")
        assert client._client is None

        http = client.client
        assert client.client is http
        assert str(http.base_url).rstrip("/") == BASE_URL
        assert "Authorization" not in http.headers

        await client.close()
        assert client._client is None
        await client.close()
