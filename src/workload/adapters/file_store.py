"""File-based JSON storage adapter."""

import json
import logging
from pathlib import Path

from workload.core.items import SourceKind
from workload.core.toggle import CompletionUpdate, apply_update

logger = logging.getLogger(__name__)


class FileWorkloadStore:
    """
    JSON file storage for tasks and events.

    Implements TaskRepository and EventRepository. Each collection is a
    JSON array in its own file under `data_dir`.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def tasks_path(self) -> Path:
        return self.data_dir / "tasks.json"

    @property
    def events_path(self) -> Path:
        return self.data_dir / "events.json"

    def _read(self, path: Path) -> list[dict]:
        """Read a collection. Missing file means empty."""
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable {path.name}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring {path.name}: expected a JSON array")
            return []
        return data

    def _write(self, path: Path, records: list[dict]) -> None:
        path.write_text(json.dumps(records, indent=2))

    def fetch_tasks(self) -> list[dict]:
        return self._read(self.tasks_path)

    def fetch_events(self) -> list[dict]:
        return self._read(self.events_path)

    def save_tasks(self, records: list[dict]) -> None:
        self._write(self.tasks_path, records)

    def save_events(self, records: list[dict]) -> None:
        self._write(self.events_path, records)

    def update_task(self, task_id: str, fields: dict) -> None:
        """Patch one task. Raises KeyError for an unknown id."""
        update = CompletionUpdate(SourceKind.MANUAL, task_id, fields)
        self.save_tasks(apply_update(self.fetch_tasks(), update))

    def update_event(self, event_id: str, fields: dict) -> None:
        """Patch one event. Raises KeyError for an unknown id."""
        update = CompletionUpdate(SourceKind.SYNCED_ASSIGNMENT, event_id, fields)
        self.save_events(apply_update(self.fetch_events(), update))
