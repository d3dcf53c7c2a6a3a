'''
Tests for the availability editor API endpoints.
'''
from uuid import uuid4

from fastapi.testclient import TestClient

from tests.constants import NURSE_ID, OTHER_NURSE_ID, WEEK_START, NEXT_WEEK_START, MONDAY, WEDNESDAY

from nurse_availability.common.exceptions import AvailabilityFetchError, AvailabilitySaveError
from nurse_availability.models.availability import RangeRecord

PREFIX = "/availability-editor"


def open_editor(client: TestClient) -> str:
    response = client.post(f"{PREFIX}/")
    assert response.status_code == 201
    return response.json()["editor_id"]


def select(client: TestClient, editor_id: str, nurse_id: int = NURSE_ID, week_of=WEEK_START) -> dict:
    response = client.put(
        f"{PREFIX}/{editor_id}/selection",
        json={"nurse_id": nurse_id, "week_of": week_of.isoformat()}
    )
    assert response.status_code == 200
    return response.json()


def cell(day=MONDAY, hour: int = 9) -> dict:
    return {"date": day.isoformat(), "hour": hour}


class TestAvailabilityEditorAPI:

    def test_health_check(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_list_nurses(self, client: TestClient):
        print("\n--- Testing GET /availability-editor/nurses ---")
        response = client.get(f"{PREFIX}/nurses")

        assert response.status_code == 200
        assert response.json() == [
            {"worker_id": NURSE_ID, "display_name": "Alex Rivera"},
            {"worker_id": OTHER_NURSE_ID, "display_name": "Sam Okafor"},
        ]

    def test_list_nurses_upstream_failure(self, client: TestClient, mock_client):
        mock_client.list_nurses.side_effect = AvailabilityFetchError("Workforce API is currently unavailable.")
        response = client.get(f"{PREFIX}/nurses")
        assert response.status_code == 503

    def test_open_editor(self, client: TestClient):
        response = client.post(f"{PREFIX}/")

        assert response.status_code == 201
        data = response.json()
        assert data["state"] == "empty"
        assert data["nurse_id"] is None
        assert data["days"] == []

    def test_select_nurse_and_week(self, client: TestClient, mock_client, monday_records):
        print("\n--- Testing PUT /availability-editor/{id}/selection ---")
        mock_client.fetch_week.return_value = monday_records
        editor_id = open_editor(client)

        data = select(client, editor_id, week_of=WEDNESDAY)

        assert data["state"] == "ready"
        assert data["week_start"] == WEEK_START.isoformat()
        assert len(data["days"]) == 7
        monday = data["days"][0]
        assert monday["day_name"] == "Monday"
        assert monday["hours"][9] == "available"
        assert monday["hours"][14] == "preferred"
        mock_client.fetch_week.assert_awaited_once_with(NURSE_ID, WEEK_START)

    def test_failed_load_is_reported_in_the_view(self, client: TestClient, mock_client):
        mock_client.fetch_week.side_effect = AvailabilityFetchError("boom")
        editor_id = open_editor(client)

        data = select(client, editor_id)

        assert data["state"] == "error"
        assert "boom" in data["error"]
        response = client.post(f"{PREFIX}/{editor_id}/cells/click", json=cell())
        assert response.status_code == 409

    def test_get_editor(self, client: TestClient):
        editor_id = open_editor(client)
        response = client.get(f"{PREFIX}/{editor_id}")
        assert response.status_code == 200
        assert response.json()["editor_id"] == editor_id

    def test_unknown_editor(self, client: TestClient):
        response = client.get(f"{PREFIX}/{uuid4()}")
        assert response.status_code == 404
        response = client.post(f"{PREFIX}/{uuid4()}/cells/click", json=cell())
        assert response.status_code == 404

    def test_close_editor(self, client: TestClient):
        editor_id = open_editor(client)

        assert client.delete(f"{PREFIX}/{editor_id}").status_code == 204
        assert client.get(f"{PREFIX}/{editor_id}").status_code == 404
        assert client.delete(f"{PREFIX}/{editor_id}").status_code == 404

    def test_click_cycles_a_cell(self, client: TestClient, mock_client):
        print("\n--- Testing POST /availability-editor/{id}/cells/click ---")
        editor_id = open_editor(client)
        select(client, editor_id)

        response = client.post(f"{PREFIX}/{editor_id}/cells/click", json=cell(hour=9))

        assert response.status_code == 200
        assert response.json()["days"][0]["hours"][9] == "unavailable"
        mock_client.replace_week.assert_awaited_once()

    def test_click_before_selection_conflicts(self, client: TestClient):
        editor_id = open_editor(client)
        response = client.post(f"{PREFIX}/{editor_id}/cells/click", json=cell())
        assert response.status_code == 409

    def test_hour_out_of_range_is_unprocessable(self, client: TestClient):
        editor_id = open_editor(client)
        select(client, editor_id)
        response = client.post(f"{PREFIX}/{editor_id}/cells/click", json=cell(hour=24))
        assert response.status_code == 422

    def test_date_outside_the_week_is_unprocessable(self, client: TestClient, mock_client):
        editor_id = open_editor(client)
        select(client, editor_id)

        response = client.post(f"{PREFIX}/{editor_id}/cells/click", json=cell(day=NEXT_WEEK_START))

        assert response.status_code == 422
        mock_client.replace_week.assert_not_awaited()

    def test_failed_save_rolls_back_and_reports(self, client: TestClient, mock_client):
        mock_client.replace_week.side_effect = AvailabilitySaveError("Workforce API error (500).")
        editor_id = open_editor(client)
        select(client, editor_id)

        response = client.post(f"{PREFIX}/{editor_id}/cells/click", json=cell(hour=9))

        assert response.status_code == 200
        data = response.json()
        assert data["days"][0]["hours"][9] == "unset"
        assert "Failed to save" in data["error"]

    def test_drag_gesture(self, client: TestClient, mock_client):
        print("\n--- Testing the pointer drag flow ---")
        editor_id = open_editor(client)
        select(client, editor_id)

        response = client.post(f"{PREFIX}/{editor_id}/pointer/down", json=cell(hour=9))
        assert response.json()["dragging"] is True
        for hour in (10, 11):
            response = client.post(f"{PREFIX}/{editor_id}/pointer/enter", json=cell(hour=hour))
        assert len(response.json()["drag_selection"]) == 3

        response = client.post(f"{PREFIX}/{editor_id}/pointer/up")

        data = response.json()
        assert data["dragging"] is False
        assert data["days"][0]["hours"][9:12] == ["unavailable"] * 3
        mock_client.replace_week.assert_awaited_once()

    def test_pointer_leave_cancels_the_drag(self, client: TestClient, mock_client):
        editor_id = open_editor(client)
        select(client, editor_id)
        client.post(f"{PREFIX}/{editor_id}/pointer/down", json=cell(hour=9))
        client.post(f"{PREFIX}/{editor_id}/pointer/enter", json=cell(hour=10))

        response = client.post(f"{PREFIX}/{editor_id}/pointer/leave")
        assert response.json()["dragging"] is False
        response = client.post(f"{PREFIX}/{editor_id}/pointer/up")

        assert response.json()["days"][0]["hours"][9] == "unset"
        mock_client.replace_week.assert_not_awaited()

    def test_apply_and_clear_week(self, client: TestClient, mock_client):
        editor_id = open_editor(client)
        select(client, editor_id)

        response = client.post(f"{PREFIX}/{editor_id}/week/apply", json={"status": "preferred"})
        assert response.status_code == 200
        assert all(h == "preferred" for day in response.json()["days"] for h in day["hours"])

        response = client.post(f"{PREFIX}/{editor_id}/week/clear")
        assert response.status_code == 200
        assert all(h == "unset" for day in response.json()["days"] for h in day["hours"])
        assert mock_client.replace_week.await_count == 2

    def test_apply_rejects_unknown_status(self, client: TestClient):
        editor_id = open_editor(client)
        select(client, editor_id)
        response = client.post(f"{PREFIX}/{editor_id}/week/apply", json={"status": "maybe"})
        assert response.status_code == 422

    def test_week_navigation(self, client: TestClient, mock_client):
        editor_id = open_editor(client)
        select(client, editor_id)

        response = client.post(f"{PREFIX}/{editor_id}/week/next")

        assert response.json()["week_start"] == NEXT_WEEK_START.isoformat()
        mock_client.fetch_week.assert_awaited_with(NURSE_ID, NEXT_WEEK_START)

        response = client.post(f"{PREFIX}/{editor_id}/week/previous")
        assert response.json()["week_start"] == WEEK_START.isoformat()

    def test_copy_previous_week(self, client: TestClient, mock_client):
        editor_id = open_editor(client)
        select(client, editor_id)
        mock_client.fetch_week.return_value = [
            RangeRecord(day_of_week=1, start_time="06:00", end_time="07:00",
                        is_available=True, is_preferred=False),
        ]

        response = client.post(f"{PREFIX}/{editor_id}/week/copy-previous")

        assert response.status_code == 200
        assert response.json()["days"][0]["hours"][6] == "available"
        mock_client.replace_week.assert_awaited_once()
