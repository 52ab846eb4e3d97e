"""
Transactional variables and the per-attempt log.

All TVars share one commit clock. A log records the version of every
variable it read; commit succeeds only if none of them moved since.
"""

from __future__ import annotations

import threading
from copy import deepcopy
from collections.abc import Callable
from typing import Any

from kungfu import Result, Ok, Error

from transact.stm._types import StmError

_clock = threading.Condition()

# ═══════════════════════════════════════════════════════════════════════════════
# TVar — Versioned Cell
# ═══════════════════════════════════════════════════════════════════════════════


class TVar[T]:
    """
    A transactional variable.

    Example:
        balance = TVar(100)
        stm.run(stm.modify(balance, lambda b: b - 10))
        balance.load()  # 90
    """

    __slots__ = ("_value", "_version")

    def __init__(self, value: T) -> None:
        self._value = deepcopy(value)
        self._version = 0

    def load(self) -> T:
        """Committed value, read outside any transaction."""
        with _clock:
            return deepcopy(self._value)

    @property
    def version(self) -> int:
        with _clock:
            return self._version

    def __repr__(self) -> str:
        return f"TVar({self._value!r}, version={self._version})"


# ═══════════════════════════════════════════════════════════════════════════════
# StmLog — Transaction Context
# ═══════════════════════════════════════════════════════════════════════════════


class StmLog:
    """
    Read/write log for one attempt. This is the context STM transactions run on.

    Writes stay private to the log until commit() and are deep-copied on the
    way in. Reads see the log's own writes first, then the committed value.
    """

    __slots__ = ("_reads", "_writes")

    def __init__(self) -> None:
        self._reads: dict[TVar[Any], int] = {}
        self._writes: dict[TVar[Any], Any] = {}

    def read[T](self, tvar: TVar[T]) -> Result[T, StmError]:
        if tvar in self._writes:
            return Ok(self._writes[tvar])

        with _clock:
            seen = self._reads.get(tvar)
            if seen is not None:
                if seen != tvar._version:
                    return Error(StmError.failure(f"{tvar!r} changed during attempt"))
                return Ok(deepcopy(tvar._value))

            if not self._valid_locked():
                return Error(StmError.failure())

            self._reads[tvar] = tvar._version
            return Ok(deepcopy(tvar._value))

    def write[T](self, tvar: TVar[T], value: T) -> Result[None, StmError]:
        self._writes[tvar] = deepcopy(value)
        return Ok(None)

    def modify[T](self, tvar: TVar[T], f: Callable[[T], T]) -> Result[T, StmError]:
        """Apply f to the current value and write the outcome back. Returns the old value."""
        match self.read(tvar):
            case Ok(value):
                self._writes[tvar] = deepcopy(f(value))
                return Ok(value)
            case Error(e):
                return Error(e)

    # ───────────────────────────────────────────────────────────────────────────
    # Driver side
    # ───────────────────────────────────────────────────────────────────────────

    def _valid_locked(self) -> bool:
        return all(tvar._version == seen for tvar, seen in self._reads.items())

    def commit(self) -> bool:
        """Publish writes if every read is still current. Returns False on conflict."""
        with _clock:
            if not self._valid_locked():
                return False
            if self._writes:
                for tvar, value in self._writes.items():
                    tvar._value = value
                    tvar._version += 1
                _clock.notify_all()
            return True

    def wait_for_change(self, timeout: float) -> bool:
        """Block until a variable this log read is committed to, or timeout."""
        with _clock:
            return _clock.wait_for(lambda: not self._valid_locked(), timeout=timeout)

    @property
    def reads(self) -> int:
        return len(self._reads)

    @property
    def writes(self) -> int:
        return len(self._writes)


__all__ = ("TVar", "StmLog")
