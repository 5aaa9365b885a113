from __future__ import annotations

import logging
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import SessionState
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import SessionFilter, TimeSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)

_COLUMNS = (
    "session_id, worker_id, project_id, task_id, started_at, ended_at, "
    "duration_minutes, paused_at, state, note, owner_date"
)

DUPLICATE_KEY_ERRNO = 1062


def _to_session(r: dict) -> TimeSession:
    return TimeSession(
        session_id=str(r["session_id"]),
        worker_id=str(r["worker_id"]),
        project_id=r.get("project_id"),
        task_id=r.get("task_id"),
        started_at=r["started_at"],
        ended_at=r.get("ended_at"),
        duration_minutes=int(r["duration_minutes"]) if r.get("duration_minutes") is not None else None,
        paused_at=r.get("paused_at"),
        state=SessionState(r["state"]),
        note=r.get("note"),
        owner_date=r["owner_date"],
    )


class MySQLSessionRepository(SessionRepository):
    """MySQL store.

    The schema keeps a generated ``open_worker_id`` column (worker id while
    the session is open, NULL otherwise) under a UNIQUE index, so the
    database itself rejects a second open session for the same worker.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: str) -> Optional[TimeSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_sessions WHERE session_id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_open_for_worker(self, worker_id: str) -> Optional[TimeSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_sessions WHERE open_worker_id=%s", (worker_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create_open(self, session: TimeSession) -> TimeSession:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO time_sessions({_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        session.session_id,
                        session.worker_id,
                        session.project_id,
                        session.task_id,
                        session.started_at,
                        session.ended_at,
                        session.duration_minutes,
                        session.paused_at,
                        session.state.value,
                        session.note,
                        session.owner_date,
                    ),
                )
        except mysql.connector.IntegrityError as e:
            if getattr(e, "errno", None) == DUPLICATE_KEY_ERRNO:
                logger.warning("duplicate open session rejected by database: worker=%s", session.worker_id)
                raise ConflictError(f"Worker {session.worker_id} already has an open session") from e
            raise
        return session

    def save_transition(self, session: TimeSession, *, expected_state: SessionState) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_sessions
                SET state=%s, ended_at=%s, duration_minutes=%s, paused_at=%s, note=%s
                WHERE session_id=%s AND state=%s
                """,
                (
                    session.state.value,
                    session.ended_at,
                    session.duration_minutes,
                    session.paused_at,
                    session.note,
                    session.session_id,
                    expected_state.value,
                ),
            )
            return cur.rowcount > 0

    def list_sessions(self, session_filter: SessionFilter) -> Sequence[TimeSession]:
        where, params = where_clause(
            [
                ("worker_id=%s", session_filter.worker_id),
                ("project_id=%s", session_filter.project_id),
                ("state=%s", session_filter.state.value if session_filter.state else None),
                ("owner_date >= %s", session_filter.start_date),
                ("owner_date <= %s", session_filter.end_date),
            ]
        )
        limit = ""
        if session_filter.limit is not None:
            limit = "LIMIT %s"
            params.append(int(session_filter.limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_sessions
                {where}
                ORDER BY started_at DESC
                {limit}
                """,
                tuple(params),
            )
            return [_to_session(r) for r in fetchall(cur)]
