"""
Lift — Helpers for lifting plain functions into transactions, and
transactions into kungfu's lazy async computations.
"""

from __future__ import annotations

from collections.abc import Callable

from kungfu import LazyCoroResult, Result, Ok, Error

from transact._leaf import Lazy, WithCtx, with_ctx
from transact._run import run
from transact._tx import Transaction, require_callable

# ═══════════════════════════════════════════════════════════════════════════════
# Exception-raising functions
# ═══════════════════════════════════════════════════════════════════════════════


def catching[T, E](
    f: Callable[[], T],
    on_error: Callable[[Exception], E],
) -> Lazy[T, E]:
    """
    Lazy leaf that turns exceptions raised by f into Error(on_error(exc)).

    Example:
        parse = L.catching(lambda: int(raw), on_error=lambda e: BadInput(str(e)))
    """
    require_callable(f, "catching")
    require_callable(on_error, "catching")

    def _run() -> Result[T, E]:
        try:
            return Ok(f())
        except Exception as exc:
            return Error(on_error(exc))

    return Lazy(_run)


def catching_ctx[Ctx, T, E](
    f: Callable[[Ctx], T],
    on_error: Callable[[Exception], E],
) -> WithCtx[Ctx, T, E]:
    """
    Context-reading leaf that turns exceptions raised by f into errors.

    Example:
        fetch = L.catching_ctx(
            lambda conn: conn.execute(query).fetchone(),
            on_error=lambda e: DbError(str(e)),
        )
    """
    require_callable(f, "catching_ctx")
    require_callable(on_error, "catching_ctx")

    def _run(ctx: Ctx) -> Result[T, E]:
        try:
            return Ok(f(ctx))
        except Exception as exc:
            return Error(on_error(exc))

    return WithCtx(_run)


def from_fn[Ctx, T, E](f: Callable[[Ctx], Result[T, E]]) -> WithCtx[Ctx, T, E]:
    """Use a bare (ctx) -> Result function as a transaction."""
    return with_ctx(f)


# ═══════════════════════════════════════════════════════════════════════════════
# Async bridge
# ═══════════════════════════════════════════════════════════════════════════════


def to_lazy[Ctx, T, E](
    tx: Transaction[Ctx, T, E],
    make_ctx: Callable[[], Ctx],
) -> LazyCoroResult[T, E]:
    """
    Bridge a transaction into a LazyCoroResult.

    Every await builds a fresh context and runs tx on it. The run itself
    is synchronous and blocks the event loop for its duration.

    Example:
        result = await L.to_lazy(checkout(cart), make_ctx=Session)
    """
    require_callable(make_ctx, "to_lazy")

    async def _run() -> Result[T, E]:
        return run(tx, make_ctx())

    return LazyCoroResult(_run)


__all__ = (
    "catching",
    "catching_ctx",
    "from_fn",
    "to_lazy",
)
