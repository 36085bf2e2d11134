"""REST adapter - HTTP client for a PostgREST-style tasks/events API."""

import logging

import requests

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"
TASKS_TABLE = "tasks"
EVENTS_TABLE = "events"


class ApiError(Exception):
    """Raised when the API returns an error response."""

    pass


class AuthenticationError(ApiError):
    """Raised when the API rejects the credentials."""

    pass


class RestWorkloadStore:
    """
    REST storage adapter.

    Implements TaskRepository and EventRepository against tables exposed
    as /rest/v1/<table>, filtered to one user. No business logic - just I/O.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        user_id: str,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    def _url(self, table: str) -> str:
        return f"{self.base_url}{REST_PREFIX}/{table}"

    def _check(self, resp: requests.Response) -> None:
        if resp.status_code in (401, 403):
            raise AuthenticationError(f"API rejected credentials ({resp.status_code})")
        if not 200 <= resp.status_code < 300:
            raise ApiError(f"API request failed ({resp.status_code}): {resp.text}")

    def _select(self, table: str) -> list[dict]:
        """Fetch every row of `table` owned by the user."""
        resp = self._session.get(
            self._url(table),
            params={"select": "*", "user_id": f"eq.{self.user_id}"},
            timeout=self.timeout,
        )
        self._check(resp)
        rows = resp.json()
        logger.debug(f"Fetched {len(rows)} rows from {table}")
        return rows

    def _patch(self, table: str, row_id: str, fields: dict) -> None:
        resp = self._session.patch(
            self._url(table),
            params={"id": f"eq.{row_id}", "user_id": f"eq.{self.user_id}"},
            json=fields,
            timeout=self.timeout,
        )
        self._check(resp)

    def fetch_tasks(self) -> list[dict]:
        return self._select(TASKS_TABLE)

    def fetch_events(self) -> list[dict]:
        return self._select(EVENTS_TABLE)

    def update_task(self, task_id: str, fields: dict) -> None:
        self._patch(TASKS_TABLE, task_id, fields)

    def update_event(self, event_id: str, fields: dict) -> None:
        self._patch(EVENTS_TABLE, event_id, fields)
