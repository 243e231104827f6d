"""Integration tests for dashboard API endpoints."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient


class TestDashboardSession:
    """Tests for session handling on GET /api/v1/dashboard."""

    def test_first_request_creates_session_and_loads(
        self, client: TestClient, mock_supabase_client: MagicMock
    ) -> None:
        """Test that a new visitor gets a session cookie and loaded data."""
        response = client.get("/api/v1/dashboard")

        assert response.status_code == 200
        assert "tracker_session" in response.cookies
        assert len(response.headers["X-Session-Token"]) == 64

        data = response.json()
        assert data["loading"] is False
        assert data["active_tab"] == "dashboard"
        assert data["overview"]["goal"]["title"] == "2026 Goal: 200 Executives Engaged"
        assert data["invitations"] is None
        assert mock_supabase_client.table("invitations").select.call_count == 1

    def test_cookie_reuses_session_without_reload(
        self, client: TestClient, mock_supabase_client: MagicMock
    ) -> None:
        first = client.get("/api/v1/dashboard")
        second = client.get("/api/v1/dashboard")

        assert first.headers["X-Session-Token"] == second.headers["X-Session-Token"]
        assert mock_supabase_client.table("invitations").select.call_count == 1

    def test_header_token_selects_session(self, client: TestClient) -> None:
        token = client.get("/api/v1/dashboard").headers["X-Session-Token"]
        client.cookies.clear()

        response = client.get("/api/v1/dashboard", headers={"X-Session-Token": token})

        assert response.headers["X-Session-Token"] == token

    def test_unknown_token_gets_new_session(self, client: TestClient) -> None:
        response = client.get("/api/v1/dashboard", headers={"X-Session-Token": "f" * 64})

        assert response.headers["X-Session-Token"] != "f" * 64


class TestTabs:
    """Tests for PUT /api/v1/dashboard/tab."""

    def test_switch_to_invitations(self, client: TestClient) -> None:
        response = client.put("/api/v1/dashboard/tab", json={"tab": "invitations"})

        assert response.status_code == 200
        data = response.json()
        assert data["active_tab"] == "invitations"
        assert data["overview"] is None
        assert data["invitations"]["footer"] == "Showing 5 of 5 invitations"

    def test_tab_persists_for_session(self, client: TestClient) -> None:
        client.put("/api/v1/dashboard/tab", json={"tab": "leaderboard"})

        data = client.get("/api/v1/dashboard").json()

        assert data["active_tab"] == "leaderboard"
        assert len(data["leaderboards"]["leaderboards"]) == 4

    def test_unknown_tab_is_rejected(self, client: TestClient) -> None:
        response = client.put("/api/v1/dashboard/tab", json={"tab": "admin"})

        assert response.status_code == 422


class TestOverview:
    """Tests for GET /api/v1/dashboard/overview."""

    def test_upcoming_cohorts_only(self, client: TestClient) -> None:
        data = client.get("/api/v1/dashboard/overview").json()

        assert [row["id"] for row in data["cohorts"]] == [11, 12]
        assert data["gauges"][0]["percent_label"] == "10% filled"
        assert data["gauges"][1]["percent_label"] == "0% filled"

    def test_failed_cohort_fetch_still_renders(
        self, client: TestClient, mock_supabase_client: MagicMock
    ) -> None:
        """Test that the overview renders with empty gauges when cohorts fail to load."""
        mock_supabase_client.table("cohorts").select.return_value.order.return_value.execute.side_effect = (
            Exception("timeout")
        )

        response = client.get("/api/v1/dashboard/overview")

        assert response.status_code == 200
        data = response.json()
        assert data["gauges"] == []
        assert data["gauges_empty_message"] == "No upcoming cohorts. Add cohorts in the Admin panel."
        assert data["goal"]["confirmed"] == 1


class TestRefresh:
    """Tests for POST /api/v1/dashboard/refresh."""

    def test_refresh_refetches_all_collections(
        self, client: TestClient, mock_supabase_client: MagicMock
    ) -> None:
        client.get("/api/v1/dashboard")

        response = client.post("/api/v1/dashboard/refresh")

        assert response.status_code == 200
        for table in ("invitations", "sales_reps", "cohorts"):
            assert mock_supabase_client.table(table).select.call_count == 2

    def test_refresh_picks_up_new_rows(
        self, client: TestClient, mock_supabase_client: MagicMock
    ) -> None:
        first = client.get("/api/v1/dashboard/overview").json()
        mock_supabase_client.table("invitations").select.return_value.order.return_value.execute.return_value = (
            MagicMock(data=[])
        )

        client.post("/api/v1/dashboard/refresh")
        second = client.get("/api/v1/dashboard/overview").json()

        assert first["goal"]["confirmed"] == 1
        assert second["goal"]["confirmed"] == 0


class TestNotice:
    """Tests for the submit notice shown on the dashboard screen."""

    def test_rejected_submit_sets_notice(self, client: TestClient) -> None:
        client.post("/api/v1/invitations/form")
        client.post("/api/v1/invitations")

        data = client.get("/api/v1/dashboard").json()

        assert data["notice"] == "Please fill in Company, Name, and Sales Rep"

    def test_cancelling_form_clears_notice(self, client: TestClient) -> None:
        client.post("/api/v1/invitations/form")
        client.post("/api/v1/invitations")
        client.delete("/api/v1/invitations/form")

        data = client.put("/api/v1/dashboard/tab", json={"tab": "dashboard"}).json()

        assert data["notice"] is None

    def test_dismiss_notice(self, client: TestClient) -> None:
        client.post("/api/v1/invitations/form")
        client.post("/api/v1/invitations")

        response = client.delete("/api/v1/dashboard/notice")

        assert response.status_code == 200
        assert response.json()["notice"] is None

        form = client.get("/api/v1/invitations").json()["add_form"]
        assert form["visible"] is True


class TestLeaderboards:
    """Tests for leaderboard endpoints."""

    def test_lists_four_leaderboards(self, client: TestClient) -> None:
        data = client.get("/api/v1/dashboard/leaderboards").json()

        titles = [board["title"] for board in data["leaderboards"]]
        assert titles == ["2026 Performance", "Global - All Time", "EMEA 2026", "NAMER 2026"]

        global_board = data["leaderboards"][1]
        assert [row["name"] for row in global_board["rows"]] == ["Bob", "Alice", "Carla"]

    def test_sort_one_leaderboard(self, client: TestClient) -> None:
        response = client.put(
            "/api/v1/dashboard/leaderboards/global/sort",
            json={"key": "contacted"},
        )

        assert response.status_code == 200
        boards = {board["key"]: board for board in response.json()["leaderboards"]}
        assert boards["global"]["sort_by"] == "contacted"
        assert [row["name"] for row in boards["global"]["rows"]] == ["Alice", "Bob", "Carla"]
        assert boards["year"]["sort_by"] == "confirmed"

    def test_ascending_sort(self, client: TestClient) -> None:
        response = client.put(
            "/api/v1/dashboard/leaderboards/global/sort",
            json={"key": "confirmed", "descending": False},
        )

        board = response.json()["leaderboards"][1]
        assert [row["confirmed"] for row in board["rows"]] == [0, 1, 2]

    def test_unknown_leaderboard_returns_404(self, client: TestClient) -> None:
        response = client.put(
            "/api/v1/dashboard/leaderboards/apac/sort",
            json={"key": "confirmed"},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_unknown_sort_key_is_rejected(self, client: TestClient) -> None:
        response = client.put(
            "/api/v1/dashboard/leaderboards/global/sort",
            json={"key": "revenue"},
        )

        assert response.status_code == 422
