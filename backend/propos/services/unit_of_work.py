# Overview: Scoped transactional handle for multi-table writes.

from __future__ import annotations

from contextlib import contextmanager

from ..extensions import db


@contextmanager
def unit_of_work():
    """
    Run a block of writes as one database transaction.

    Yields the scoped session. Commits when the block exits normally;
    any exception rolls back every write made inside the block and is
    re-raised unchanged. No retries.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()
