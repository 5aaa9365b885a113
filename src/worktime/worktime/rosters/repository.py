from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Project, Worker


class WorkerRoster(Protocol):
    """Employee directory maintained outside the engine."""

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Worker]:
        raise NotImplementedError


class ProjectRoster(Protocol):
    def get_by_id(self, project_id: str) -> Optional[Project]:
        raise NotImplementedError
