"""Completion toggles as update descriptions - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime

from .items import SourceKind, WorkItem


@dataclass(frozen=True)
class CompletionUpdate:
    """Fields to write on one raw record."""

    source_kind: SourceKind
    id: str
    fields: dict = field(default_factory=dict)


def toggle(item: WorkItem, completed: bool, now: datetime) -> CompletionUpdate:
    """
    Describe the write that marks `item` completed or pending.

    Manual tasks get a status and a completion timestamp (cleared when
    reopening). Synced assignments only get their boolean flag; they have
    no completion timestamp to set.
    """
    if item.source_kind is SourceKind.MANUAL:
        fields = {
            "completion_status": "completed" if completed else "pending",
            "completed_at": now.isoformat() if completed else None,
        }
    else:
        fields = {"is_completed": completed}
    return CompletionUpdate(source_kind=item.source_kind, id=item.id, fields=fields)


def apply_update(records: list[dict], update: CompletionUpdate) -> list[dict]:
    """
    Return a copy of `records` with the update applied to the matching id.

    Raises KeyError if no record has that id.
    """
    patched = []
    found = False
    for record in records:
        if str(record.get("id")) == update.id:
            record = {**record, **update.fields}
            found = True
        patched.append(record)
    if not found:
        raise KeyError(update.id)
    return patched
