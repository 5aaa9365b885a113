from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import WorkerStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Project, Worker
from .repository import ProjectRoster, WorkerRoster


def _to_worker(r: dict) -> Worker:
    return Worker(
        worker_id=str(r["worker_id"]),
        first_name=r["first_name"],
        last_name=r.get("last_name") or "",
        position=r.get("position"),
        status=WorkerStatus(r.get("status") or WorkerStatus.ACTIVE.value),
    )


class MySQLWorkerRoster(WorkerRoster):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT worker_id, first_name, last_name, position, status FROM workers WHERE worker_id=%s",
                (worker_id,),
            )
            r = fetchone(cur)
            return _to_worker(r) if r else None

    def list_active(self) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT worker_id, first_name, last_name, position, status
                FROM workers
                WHERE status=%s
                ORDER BY first_name ASC
                """,
                (WorkerStatus.ACTIVE.value,),
            )
            return [_to_worker(r) for r in fetchall(cur)]


class MySQLProjectRoster(ProjectRoster):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, project_id: str) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT project_id, name, status FROM projects WHERE project_id=%s", (project_id,))
            r = fetchone(cur)
            if not r:
                return None
            return Project(project_id=str(r["project_id"]), name=r["name"], status=r.get("status") or "active")
