"""Unit tests for ticket routes."""

import pytest
from fastapi.testclient import TestClient

from trackboard.state_store import StateStore


@pytest.mark.unit
class TestListTickets:
    """Tests for GET /tickets."""

    def test_requires_project_id(self, client: TestClient) -> None:
        response = client.get("/api/v1/tickets")

        assert response.status_code == 422

    def test_empty(self, client: TestClient, project_id: str) -> None:
        response = client.get("/api/v1/tickets", params={"project_id": project_id})

        assert response.status_code == 200
        assert response.json() == {"data": [], "error": None}

    def test_unknown_project(self, client: TestClient) -> None:
        response = client.get("/api/v1/tickets", params={"project_id": "nope"})

        assert response.status_code == 404
        assert response.json() == {"data": None, "error": "Project not found"}

    def test_filters(self, client: TestClient, store: StateStore, project_id: str) -> None:
        store.create_ticket(project_id, "Todo one")
        done = store.create_ticket(project_id, "Done one", status="done", assignee_id="u1")

        by_status = client.get(
            "/api/v1/tickets", params={"project_id": project_id, "status": "done"}
        ).json()["data"]
        by_assignee = client.get(
            "/api/v1/tickets", params={"project_id": project_id, "assignee": "u1"}
        ).json()["data"]
        ignored = client.get(
            "/api/v1/tickets", params={"project_id": project_id, "status": "archived"}
        ).json()["data"]

        assert [t["id"] for t in by_status] == [done.id]
        assert [t["id"] for t in by_assignee] == [done.id]
        assert len(ignored) == 2

    def test_search(self, client: TestClient, store: StateStore, project_id: str) -> None:
        store.create_ticket(project_id, "Checkout button", labels=["payments"])
        store.create_ticket(project_id, "Profile page")

        response = client.get(
            "/api/v1/tickets/search", params={"project_id": project_id, "q": "payment"}
        )

        assert response.status_code == 200
        assert [t["title"] for t in response.json()["data"]] == ["Checkout button"]

    def test_search_blank_query(self, client: TestClient, project_id: str) -> None:
        response = client.get(
            "/api/v1/tickets/search", params={"project_id": project_id, "q": " "}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Search query is required"


@pytest.mark.unit
class TestCreateTicket:
    """Tests for POST /tickets."""

    def test_create(self, client: TestClient, project_id: str) -> None:
        response = client.post(
            "/api/v1/tickets",
            json={
                "project_id": project_id,
                "title": "New bug",
                "priority": "high",
                "labels": ["api"],
                "due_date": "2026-06-01T00:00:00",
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "New bug"
        assert data["status"] == "todo"
        assert data["priority"] == "high"
        assert data["type"] == "bug"
        assert data["labels"] == ["api"]
        assert data["comment_count"] == 0
        assert data["due_date"].startswith("2026-06-01")

    def test_missing_title(self, client: TestClient, project_id: str) -> None:
        response = client.post("/api/v1/tickets", json={"project_id": project_id, "title": ""})

        assert response.status_code == 400
        assert response.json()["error"] == "Ticket title is required"

    def test_unknown_project(self, client: TestClient) -> None:
        response = client.post("/api/v1/tickets", json={"project_id": "nope", "title": "X"})

        assert response.status_code == 404


@pytest.mark.unit
class TestUpdateTicket:
    """Tests for PUT, PATCH status/assign and DELETE."""

    def test_put_partial(self, client: TestClient, store: StateStore, project_id: str) -> None:
        ticket = store.create_ticket(project_id, "Old", assignee_id="u1")

        response = client.put(f"/api/v1/tickets/{ticket.id}", json={"title": "New"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "New"
        assert data["assignee_id"] == "u1"

    def test_put_null_clears_assignee(
        self, client: TestClient, store: StateStore, project_id: str
    ) -> None:
        ticket = store.create_ticket(project_id, "Task", assignee_id="u1")

        response = client.put(f"/api/v1/tickets/{ticket.id}", json={"assignee_id": None})

        assert response.json()["data"]["assignee_id"] is None

    def test_patch_status(self, client: TestClient, store: StateStore, project_id: str) -> None:
        ticket = store.create_ticket(project_id, "Task")

        response = client.patch(
            f"/api/v1/tickets/{ticket.id}/status", json={"status": "in-review"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "in-review"
        assert store.get_ticket(ticket.id).status == "in-review"

    def test_patch_status_invalid(
        self, client: TestClient, store: StateStore, project_id: str
    ) -> None:
        ticket = store.create_ticket(project_id, "Task")

        response = client.patch(f"/api/v1/tickets/{ticket.id}/status", json={"status": "wip"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid status")

    def test_patch_status_unknown_ticket(self, client: TestClient) -> None:
        response = client.patch("/api/v1/tickets/missing/status", json={"status": "done"})

        assert response.status_code == 404
        assert response.json()["error"] == "Ticket not found"

    def test_assign(self, client: TestClient, store: StateStore, project_id: str) -> None:
        ticket = store.create_ticket(project_id, "Task")

        response = client.patch(f"/api/v1/tickets/{ticket.id}/assign", json={"assignee_id": "u7"})

        assert response.json()["data"]["assignee_id"] == "u7"

    def test_delete(self, client: TestClient, store: StateStore, project_id: str) -> None:
        ticket = store.create_ticket(project_id, "Task")

        response = client.delete(f"/api/v1/tickets/{ticket.id}")

        assert response.status_code == 204
        assert client.get(f"/api/v1/tickets/{ticket.id}").status_code == 404
