"""Adapters - I/O implementations of ports."""

from .file_store import FileWorkloadStore
from .rest_api import ApiError, AuthenticationError, RestWorkloadStore

__all__ = [
    "FileWorkloadStore",
    "RestWorkloadStore",
    "ApiError",
    "AuthenticationError",
]
