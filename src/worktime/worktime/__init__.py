"""worktime package.

Time-session engine organized by feature modules (sessions, schedules,
reports, rosters) with thin Flask controllers over service/repository layers.
"""
