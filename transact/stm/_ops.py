"""
STM leaf transactions.
"""

from __future__ import annotations

from collections.abc import Callable

from kungfu import Error

from transact._leaf import with_ctx, lazy
from transact._tx import Transaction
from transact.stm._tvar import TVar, StmLog
from transact.stm._types import StmError

type Stm[T] = Transaction[StmLog, T, StmError]
"""A transaction over the STM log."""


def read[T](tvar: TVar[T]) -> Stm[T]:
    """Read a variable."""
    return with_ctx(lambda log: log.read(tvar))


def write[T](tvar: TVar[T], value: T) -> Stm[None]:
    """Write a variable. Visible to later reads in the same attempt."""
    return with_ctx(lambda log: log.write(tvar, value))


def modify[T](tvar: TVar[T], f: Callable[[T], T]) -> Stm[T]:
    """Apply f to a variable. Succeeds with the previous value."""
    return with_ctx(lambda log: log.modify(tvar, f))


def retry[T]() -> Stm[T]:
    """
    Give up on this attempt and wait for a variable read so far to change.

    Example:
        take = S.read(queue).and_then(
            lambda items: S.write(queue, items[1:]).map(lambda _: items[0])
            if items else S.retry()
        )
    """
    return lazy(lambda: Error(StmError.retry()))


__all__ = ("Stm", "read", "write", "modify", "retry")
