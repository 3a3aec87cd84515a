# lawbook/tasks.py
"""
Periodic maintenance. Nothing in the web process schedules this; run it from
cron (or similar) with ``python -m lawbook.tasks``.
"""
import logging

from lawbook import config
from lawbook.db import SessionLocal
from lawbook.stores import sessions as session_store

log = logging.getLogger("lawbook.tasks")


def cleanup_expired_sessions() -> int:
    db = SessionLocal()
    try:
        removed = session_store.cleanup_expired(db)
    finally:
        db.close()
    log.info("Removed %d expired sessions", removed)
    return removed


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    cleanup_expired_sessions()
