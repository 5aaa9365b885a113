from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import WorkerStatus
from .model import Project, Worker
from .repository import ProjectRoster, WorkerRoster


class InMemoryWorkerRoster(WorkerRoster):
    def __init__(self, workers: Iterable[Worker] = ()):
        self._by_id = {w.worker_id: w for w in workers}

    def add(self, worker: Worker) -> None:
        self._by_id[worker.worker_id] = worker

    def remove(self, worker_id: str) -> None:
        self._by_id.pop(worker_id, None)

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        return self._by_id.get(worker_id)

    def list_active(self) -> Sequence[Worker]:
        items = [w for w in self._by_id.values() if w.status == WorkerStatus.ACTIVE]
        items.sort(key=lambda w: w.first_name)
        return items


class InMemoryProjectRoster(ProjectRoster):
    def __init__(self, projects: Iterable[Project] = ()):
        self._by_id = {p.project_id: p for p in projects}

    def add(self, project: Project) -> None:
        self._by_id[project.project_id] = project

    def remove(self, project_id: str) -> None:
        self._by_id.pop(project_id, None)

    def get_by_id(self, project_id: str) -> Optional[Project]:
        return self._by_id.get(project_id)
