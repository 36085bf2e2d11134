"""Tests for the REST store, with the HTTP session mocked."""

from unittest.mock import MagicMock

import pytest

from workload.adapters.rest_api import ApiError, AuthenticationError, RestWorkloadStore


def make_response(status_code=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = text
    return resp


@pytest.fixture
def session():
    mock = MagicMock()
    mock.headers = {}
    return mock


@pytest.fixture
def store(session):
    return RestWorkloadStore("https://db.example.test/", "secret-key", "user-1", session=session)


class TestRestWorkloadStore:
    def test_sets_auth_headers(self, store, session):
        assert session.headers["apikey"] == "secret-key"
        assert session.headers["Authorization"] == "Bearer secret-key"

    def test_fetch_tasks_filters_by_user(self, store, session):
        session.get.return_value = make_response(payload=[{"id": "t1"}])

        assert store.fetch_tasks() == [{"id": "t1"}]
        session.get.assert_called_once_with(
            "https://db.example.test/rest/v1/tasks",
            params={"select": "*", "user_id": "eq.user-1"},
            timeout=10.0,
        )

    def test_fetch_events(self, store, session):
        session.get.return_value = make_response(payload=[])
        assert store.fetch_events() == []
        assert session.get.call_args.args[0] == "https://db.example.test/rest/v1/events"

    def test_update_event_patches_one_row(self, store, session):
        session.patch.return_value = make_response(status_code=204)

        store.update_event("e1", {"is_completed": True})

        session.patch.assert_called_once_with(
            "https://db.example.test/rest/v1/events",
            params={"id": "eq.e1", "user_id": "eq.user-1"},
            json={"is_completed": True},
            timeout=10.0,
        )

    def test_update_task(self, store, session):
        session.patch.return_value = make_response(status_code=204)
        store.update_task("t1", {"completion_status": "completed"})
        assert session.patch.call_args.args[0] == "https://db.example.test/rest/v1/tasks"

    @pytest.mark.parametrize("status", [401, 403])
    def test_rejected_credentials(self, store, session, status):
        session.get.return_value = make_response(status_code=status)
        with pytest.raises(AuthenticationError):
            store.fetch_tasks()

    def test_server_error(self, store, session):
        session.patch.return_value = make_response(status_code=500, text="boom")
        with pytest.raises(ApiError, match="500"):
            store.update_task("t1", {})
