"""Example: drive the engine through the service layer (no Flask).

Controllers are a thin layer; clocking rules live in the registry and the
totals in the report service.
"""

from datetime import datetime, timedelta

from worktime.container import build_container
from worktime.rosters.model import Project, Worker


def main():
    t0 = datetime(2026, 3, 2, 9, 0)
    current = {"now": t0}

    container = build_container(
        clock=lambda: current["now"],
        workers=[Worker(worker_id="w1", first_name="Ana", last_name="Silva")],
        projects=[Project(project_id="p1", name="Warehouse move")],
    )
    registry = container.session_registry

    session = registry.clock_in("w1", project_id="p1", note="Packing")
    current["now"] = t0 + timedelta(minutes=95)
    registry.clock_out(session.session_id)

    print(container.report_service.daily_summary())
    print(container.report_service.worker_rollup().rows)


if __name__ == "__main__":
    main()
