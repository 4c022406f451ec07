"""
Ledger host environment.

Every write against the access-control tables happens inside
``Ledger.transaction()``: the sequence number advances by one, the body
runs, and the session commits. Any exception rolls back everything the
body did, including the sequence bump, and is re-raised to the caller.

The bump is a single UPDATE executed by the database, which holds the
row's write lock until commit, so concurrent transactions are numbered
one after another.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from models.ledger import LedgerSequence, LEDGER_SLOT

logger = logging.getLogger(__name__)


class Ledger:
    def __init__(self, db):
        self.db = db

    def _bump(self):
        result = self.db.execute(
            update(LedgerSequence)
            .where(LedgerSequence.id == LEDGER_SLOT)
            .values(value=LedgerSequence.value + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def _advance(self):
        if not self._bump():
            # First transaction ever: create the row
            try:
                self.db.add(LedgerSequence(id=LEDGER_SLOT, value=1))
                self.db.flush()
            except IntegrityError:
                # Another transaction created it first
                self.db.rollback()
                self._bump()
        return self.current_sequence()

    def current_sequence(self) -> int:
        """Return the current ledger sequence number (0 before any transaction)."""
        value = self.db.execute(
            select(LedgerSequence.value).where(LedgerSequence.id == LEDGER_SLOT)
        ).scalar()
        return value or 0

    @contextmanager
    def transaction(self):
        sequence = None
        try:
            sequence = self._advance()
            yield sequence
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning("[ROLLBACK] Transaction %s aborted: %s", sequence, e)
            raise
