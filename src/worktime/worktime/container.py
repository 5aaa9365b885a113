from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .common.datetime_utils import Clock, now_local
from .core.constants import DEFAULT_BREAK_MINUTES
from .core.enums import StorageBackend
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .rosters.lookup import LookupService
from .rosters.memory_roster import InMemoryProjectRoster, InMemoryWorkerRoster
from .rosters.model import Project, Worker
from .rosters.mysql_roster import MySQLProjectRoster, MySQLWorkerRoster
from .rosters.repository import ProjectRoster, WorkerRoster
from .schedules.memory_repository import InMemoryScheduleRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .sessions.memory_repository import InMemorySessionRepository
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.registry import SessionRegistry
from .sessions.repository import SessionRepository


@dataclass(frozen=True)
class Container:
    backend: StorageBackend
    clock: Clock

    sessions_repo: SessionRepository
    schedules_repo: ScheduleRepository
    workers_roster: WorkerRoster
    projects_roster: ProjectRoster

    session_registry: SessionRegistry
    schedule_service: ScheduleService
    lookup_service: LookupService
    report_service: ReportService


def build_container(
    *,
    storage_backend: str = StorageBackend.MEMORY.value,
    db_config: Optional[dict] = None,
    clock: Optional[Clock] = None,
    default_break_minutes: int = DEFAULT_BREAK_MINUTES,
    workers: Iterable[Worker] = (),
    projects: Iterable[Project] = (),
) -> Container:
    backend = StorageBackend(str(storage_backend).lower())
    clock = clock or now_local

    if backend == StorageBackend.MYSQL:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
        sessions_repo: SessionRepository = MySQLSessionRepository(conn)
        schedules_repo: ScheduleRepository = MySQLScheduleRepository(conn)
        workers_roster: WorkerRoster = MySQLWorkerRoster(conn)
        projects_roster: ProjectRoster = MySQLProjectRoster(conn)
    else:
        sessions_repo = InMemorySessionRepository()
        schedules_repo = InMemoryScheduleRepository()
        workers_roster = InMemoryWorkerRoster(workers)
        projects_roster = InMemoryProjectRoster(projects)

    lookup_service = LookupService(workers_roster, projects_roster)

    return Container(
        backend=backend,
        clock=clock,
        sessions_repo=sessions_repo,
        schedules_repo=schedules_repo,
        workers_roster=workers_roster,
        projects_roster=projects_roster,
        session_registry=SessionRegistry(sessions_repo, clock=clock),
        schedule_service=ScheduleService(schedules_repo, default_break_minutes=default_break_minutes),
        lookup_service=lookup_service,
        report_service=ReportService(sessions_repo, lookup_service, clock=clock),
    )
