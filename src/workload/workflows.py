"""Shared workflow layer between the CLI and the engine.

Each function fetches a fresh snapshot from the configured store, runs the
pure pipeline, and (for toggles) writes the update back before rebuilding.
"""

import logging
from datetime import datetime
from pathlib import Path

from .adapters.file_store import FileWorkloadStore
from .adapters.rest_api import RestWorkloadStore
from .config import DATA_DIR, Config
from .core.engine import Workload, build_workload
from .core.errors import MissingConfigurationError, WorkloadError
from .core.items import SourceKind
from .core.toggle import CompletionUpdate, toggle
from .ports import WorkloadStore

logger = logging.getLogger(__name__)


def get_store(config: Config) -> WorkloadStore:
    """Resolve the storage adapter from config."""
    if config.store == "rest":
        missing = [k for k in ("api_url", "api_key", "user_id") if not getattr(config, k)]
        if missing:
            raise MissingConfigurationError(
                f"STORE = rest needs {', '.join(k.upper() for k in missing)} in workload.conf"
            )
        return RestWorkloadStore(config.api_url, config.api_key, config.user_id)
    if config.store != "file":
        raise MissingConfigurationError(f"Unknown STORE {config.store!r} (expected file or rest)")
    if config.data_dir:
        return FileWorkloadStore(Path(config.data_dir).expanduser())
    return FileWorkloadStore(DATA_DIR)


def load_workload(config: Config, now: datetime, store: WorkloadStore | None = None) -> Workload:
    """Fetch both collections and run one full pass."""
    store = store or get_store(config)
    tasks = store.fetch_tasks()
    events = store.fetch_events()
    return build_workload(
        tasks,
        events,
        now,
        settings=config.engine_settings(),
        sleep=config.sleep_config(),
    )


def apply_completion(update: CompletionUpdate, store: WorkloadStore) -> None:
    """Route a completion update to the repository that owns the record."""
    if update.source_kind is SourceKind.MANUAL:
        store.update_task(update.id, update.fields)
    else:
        store.update_event(update.id, update.fields)
    logger.info(f"Applied completion update to {update.source_kind.value} {update.id}: {update.fields}")


def set_completion(
    config: Config,
    item_id: str,
    completed: bool,
    now: datetime,
    store: WorkloadStore | None = None,
    source_kind: SourceKind | None = None,
) -> tuple[CompletionUpdate, Workload]:
    """
    Mark an item completed or pending, then rebuild from a fresh fetch.

    Ids are only unique within a source, so an id shared by a task and an
    assignment needs `source_kind`. Returns the applied update and the
    recomputed workload.
    """
    store = store or get_store(config)
    workload = load_workload(config, now, store)
    matches = [
        i for i in workload.items if i.id == item_id and (source_kind is None or i.source_kind is source_kind)
    ]
    if not matches:
        raise WorkloadError(f"No task or assignment with id {item_id!r}")
    if len(matches) > 1:
        raise WorkloadError(f"Id {item_id!r} matches both a task and an assignment; choose a source")

    update = toggle(matches[0], completed, now)
    apply_completion(update, store)
    return update, load_workload(config, now, store)
