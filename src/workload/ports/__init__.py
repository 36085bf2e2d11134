"""Ports - interfaces/protocols for external dependencies."""

from typing import Protocol

from .task_repo import TaskRepository
from .event_repo import EventRepository


class WorkloadStore(TaskRepository, EventRepository, Protocol):
    """A backend that holds both raw collections."""


__all__ = [
    "TaskRepository",
    "EventRepository",
    "WorkloadStore",
]
