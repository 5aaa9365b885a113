from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle state of a time session."""

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"

    @property
    def is_open(self) -> bool:
        return self is not SessionState.COMPLETED


class ScheduleState(str, Enum):
    """Lifecycle state of a planned shift."""

    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    MISSED = "MISSED"


class WorkerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"
