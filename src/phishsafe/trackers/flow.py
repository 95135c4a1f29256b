"""Business-flow markers (FD broken, loan taken, transfers) and their timing.

Every marker is a one-way transition within a session: the first call
sets it and later calls are no-ops.  Offsets are reported in whole
seconds relative to login (or, for ``time_for_transaction``, relative to
the transaction start) and are ``None`` whenever either endpoint is
missing.
"""

from __future__ import annotations

import logging
from datetime import datetime

from phishsafe.core.time import elapsed_seconds
from phishsafe.core.types import SessionInput

logger = logging.getLogger(__name__)


def _offset(start: datetime | None, end: datetime | None) -> int | None:
    if start is None or end is None:
        return None
    return elapsed_seconds(start, end)


class FlowRecorder:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._login_time: datetime | None = None
        self._fd_time: datetime | None = None
        self._loan_time: datetime | None = None
        self._transaction_start: datetime | None = None
        self._transaction_end: datetime | None = None
        self._transaction_amount: str | None = None
        self._fd_broken = False
        self._loan_taken = False

    def mark_login(self, timestamp: datetime) -> None:
        if self._login_time is None:
            self._login_time = timestamp

    def set_transaction_amount(self, amount: str) -> None:
        if self._transaction_amount is None and amount:
            self._transaction_amount = amount
            logger.debug("Transfer amount captured")

    def mark_fd_broken(self, timestamp: datetime) -> None:
        if not self._fd_broken:
            self._fd_broken = True
            self._fd_time = timestamp
            logger.debug("FD broken marked")

    def mark_loan_taken(self, timestamp: datetime) -> None:
        if not self._loan_taken:
            self._loan_taken = True
            self._loan_time = timestamp
            logger.debug("Loan taken marked")

    def mark_transaction_start(self, timestamp: datetime) -> None:
        if self._transaction_start is None:
            self._transaction_start = timestamp

    def mark_transaction_end(self, timestamp: datetime) -> None:
        if self._transaction_end is None:
            self._transaction_end = timestamp

    @property
    def fd_broken(self) -> bool:
        return self._fd_broken

    @property
    def loan_taken(self) -> bool:
        return self._loan_taken

    @property
    def transaction_amount(self) -> str | None:
        return self._transaction_amount

    def snapshot(self) -> SessionInput:
        """Freeze the current flags and offsets into a :class:`SessionInput`."""
        return SessionInput(
            within_bank_transfer_amount=self._transaction_amount,
            fd_broken=self._fd_broken,
            loan_taken=self._loan_taken,
            time_from_login_to_fd=_offset(self._login_time, self._fd_time),
            time_from_login_to_loan=_offset(self._login_time, self._loan_time),
            time_from_login_to_transaction=_offset(self._login_time, self._transaction_start),
            time_for_transaction=_offset(self._transaction_start, self._transaction_end),
        )
