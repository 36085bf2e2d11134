"""Synced calendar event repository interface."""

from typing import Protocol


class EventRepository(Protocol):
    """Interface for reading and patching synced calendar records."""

    def fetch_events(self) -> list[dict]:
        """Fetch all raw event records (assignments and scheduled events)."""
        ...

    def update_event(self, event_id: str, fields: dict) -> None:
        """Write `fields` onto one event record."""
        ...
