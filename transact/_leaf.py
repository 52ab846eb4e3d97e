"""
Leaf transactions — nodes with no child transactions.

Leaves are where fixed values and backend logic enter a tree. Only
with_ctx() leaves ever see the context.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Any

from kungfu import Result, Ok, Error

from transact._tx import Transaction, expect_result, require_callable
from transact._types import Thunk, Reader

# ═══════════════════════════════════════════════════════════════════════════════
# Value Leaves
# ═══════════════════════════════════════════════════════════════════════════════
#
# Stored values are deep-copied on every run, so a caller mutating what it
# got back cannot change what the next run returns.


@dataclass(frozen=True, slots=True)
class TxResult[T, E](Transaction[Any, T, E]):
    """The result of `result`."""

    r: Result[T, E]

    def run(self, ctx: Any) -> Result[T, E]:
        match self.r:
            case Ok(value):
                return Ok(deepcopy(value))
            case Error(e):
                return Error(deepcopy(e))


@dataclass(frozen=True, slots=True)
class TxOk[T, E](Transaction[Any, T, E]):
    """The result of `ok`."""

    value: T

    def run(self, ctx: Any) -> Result[T, E]:
        return Ok(deepcopy(self.value))


@dataclass(frozen=True, slots=True)
class TxErr[T, E](Transaction[Any, T, E]):
    """The result of `err`."""

    error: E

    def run(self, ctx: Any) -> Result[T, E]:
        return Error(deepcopy(self.error))


# ═══════════════════════════════════════════════════════════════════════════════
# Function Leaves
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Lazy[T, E](Transaction[Any, T, E]):
    """The result of `lazy`."""

    f: Thunk[T, E]

    def run(self, ctx: Any) -> Result[T, E]:
        return expect_result(self.f(), "lazy")


@dataclass(frozen=True, slots=True)
class WithCtx[Ctx, T, E](Transaction[Ctx, T, E]):
    """The result of `with_ctx`."""

    f: Reader[Ctx, T, E]

    def run(self, ctx: Ctx) -> Result[T, E]:
        return expect_result(self.f(ctx), "with_ctx")


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def _require_copyable[V](value: V, origin: str) -> V:
    try:
        deepcopy(value)
    except Exception as exc:
        raise TypeError(
            f"{origin}() needs a deep-copyable value, got {type(value).__name__}"
        ) from exc
    return value


def result[T, E](r: Result[T, E]) -> TxResult[T, E]:
    """Take a result and make a leaf transaction value."""
    match expect_result(r, "result"):
        case Ok(value):
            _require_copyable(value, "result")
        case Error(e):
            _require_copyable(e, "result")
    return TxResult(r)


def ok[T](value: T) -> TxOk[T, Any]:
    """Make a successful transaction value."""
    return TxOk(_require_copyable(value, "ok"))


def err[E](error: E) -> TxErr[Any, E]:
    """Make an error transaction value."""
    return TxErr(_require_copyable(error, "err"))


def lazy[T, E](f: Thunk[T, E]) -> Lazy[T, E]:
    """
    Lazily evaluated transaction value.

    Note that f is called again on every run; nothing is memoized.
    """
    return Lazy(require_callable(f, "lazy"))


def with_ctx[Ctx, T, E](f: Reader[Ctx, T, E]) -> WithCtx[Ctx, T, E]:
    """
    Receive the context from the executing transaction and perform computation.

    This is the only way backend logic gets at the context.

    Example:
        def bump(counter: str) -> Transaction[dict[str, int], int, str]:
            def go(ctx: dict[str, int]) -> Result[int, str]:
                ctx[counter] = ctx.get(counter, 0) + 1
                return Ok(ctx[counter])
            return T.with_ctx(go)
    """
    return WithCtx(require_callable(f, "with_ctx"))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "TxResult",
    "TxOk",
    "TxErr",
    "Lazy",
    "WithCtx",
    "result",
    "ok",
    "err",
    "lazy",
    "with_ctx",
)
