from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ScheduleState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, where_clause
from .model import ScheduleEntry, ScheduleFilter
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, worker_id, shift_date, start_time, end_time, break_minutes, state, note"


def _to_entry(r: dict) -> ScheduleEntry:
    return ScheduleEntry(
        schedule_id=str(r["schedule_id"]),
        worker_id=str(r["worker_id"]),
        shift_date=r["shift_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        break_minutes=int(r["break_minutes"]),
        state=ScheduleState(r["state"]),
        note=r.get("note"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: str) -> Optional[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schedule_entries WHERE schedule_id=%s", (schedule_id,))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create(self, entry: ScheduleEntry) -> ScheduleEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO schedule_entries({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.schedule_id,
                    entry.worker_id,
                    entry.shift_date,
                    entry.start_time,
                    entry.end_time,
                    int(entry.break_minutes),
                    entry.state.value,
                    entry.note,
                ),
            )
        return entry

    def set_state(self, *, schedule_id: str, state: ScheduleState) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 FROM schedule_entries WHERE schedule_id=%s", (schedule_id,))
            if not fetchone(cur):
                return False
            # rowcount is 0 when re-marking with the same state, so existence is checked above.
            cur.execute("UPDATE schedule_entries SET state=%s WHERE schedule_id=%s", (state.value, schedule_id))
            return True

    def list_entries(self, schedule_filter: ScheduleFilter) -> Sequence[ScheduleEntry]:
        where, params = where_clause(
            [
                ("worker_id=%s", schedule_filter.worker_id),
                ("state=%s", schedule_filter.state.value if schedule_filter.state else None),
                ("shift_date >= %s", schedule_filter.start_date),
                ("shift_date <= %s", schedule_filter.end_date),
            ]
        )

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedule_entries
                {where}
                ORDER BY shift_date ASC, start_time ASC
                """,
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]
