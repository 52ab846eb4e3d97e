"""
Guarded execution entry point.

Combinators call Transaction.run() on their children directly. Drivers
call run() here, which keeps a context from being run twice at once.
"""

from __future__ import annotations

import logging
import threading

from kungfu import Result

from transact._errors import ReentrantRunError
from transact._tx import Transaction, require_transaction

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Active Contexts
# ═══════════════════════════════════════════════════════════════════════════════
#
# Immutable builtin contexts such as None or small ints are shared process-wide.
# They are never tracked.

_UNTRACKED = (type(None), bool, int, float, complex, str, bytes, tuple, frozenset)

_active: set[int] = set()
_active_lock = threading.Lock()


def _tracked(ctx: object) -> bool:
    return not isinstance(ctx, _UNTRACKED)


def _enter(ctx: object) -> None:
    if not _tracked(ctx):
        return
    key = id(ctx)
    with _active_lock:
        if key in _active:
            logger.debug("rejected re-entrant run on %s@%#x", type(ctx).__name__, key)
            raise ReentrantRunError(ctx)
        _active.add(key)


def _leave(ctx: object) -> None:
    if not _tracked(ctx):
        return
    with _active_lock:
        _active.discard(id(ctx))


def is_running(ctx: object) -> bool:
    """Check whether a run() on ctx is in progress. Always False for immutable contexts."""
    if not _tracked(ctx):
        return False
    with _active_lock:
        return id(ctx) in _active


# ═══════════════════════════════════════════════════════════════════════════════
# run() — Execute Against a Context
# ═══════════════════════════════════════════════════════════════════════════════


def run[Ctx, T, E](tx: Transaction[Ctx, T, E], ctx: Ctx) -> Result[T, E]:
    """
    Run a transaction against a context.

    Raises ReentrantRunError if ctx is already being run, whether from a
    closure inside the current run or from another thread.

    Example:
        import transact as T

        result = T.run(transfer(src, dst, 100), conn)

        match result:
            case Ok(receipt):
                conn.commit()
            case Error(e):
                conn.rollback()
    """
    require_transaction(tx, "run")
    _enter(ctx)
    try:
        return tx.run(ctx)
    finally:
        _leave(ctx)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("run", "is_running")
