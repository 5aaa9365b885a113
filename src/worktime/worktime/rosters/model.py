from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import WorkerStatus


@dataclass(frozen=True)
class Worker:
    """Read-only view of an employee owned by the external roster."""

    worker_id: str
    first_name: str
    last_name: str = ""
    position: Optional[str] = None
    status: WorkerStatus = WorkerStatus.ACTIVE

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Project:
    project_id: str
    name: str
    status: str = "active"
