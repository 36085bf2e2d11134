"""Manual task repository interface."""

from typing import Protocol


class TaskRepository(Protocol):
    """Interface for reading and patching manual task records."""

    def fetch_tasks(self) -> list[dict]:
        """Fetch all raw task records."""
        ...

    def update_task(self, task_id: str, fields: dict) -> None:
        """Write `fields` onto one task record."""
        ...
