"""
Transaction — the abstract contract and its combinator nodes.

Every combinator is an immutable node that owns its children by value.
Running a node threads the same context reference through its children,
left to right, on the caller's thread.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from kungfu import Result, Ok, Error

# ═══════════════════════════════════════════════════════════════════════════════
# Shape Checks
# ═══════════════════════════════════════════════════════════════════════════════


def require_callable[F](f: F, origin: str) -> F:
    if not callable(f):
        raise TypeError(f"{origin}: expected a callable, got {type(f).__name__}")
    return f


def require_transaction[X](tx: X, origin: str) -> X:
    if not isinstance(tx, Transaction):
        raise TypeError(f"{origin}: expected a Transaction, got {type(tx).__name__}")
    return tx


def expect_result[T, E](value: Result[T, E], origin: str) -> Result[T, E]:
    """Check a user function returned Ok/Error (misuse surfaces as TypeError)."""
    if not isinstance(value, (Ok, Error)):
        raise TypeError(f"{origin}: expected Ok or Error, got {type(value).__name__}")
    return value


def expect_transaction[Ctx, T, E](
    value: Transaction[Ctx, T, E],
    origin: str,
) -> Transaction[Ctx, T, E]:
    """Check a user function returned a Transaction."""
    if not isinstance(value, Transaction):
        raise TypeError(
            f"{origin}: function must return a Transaction, got {type(value).__name__}"
        )
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Transaction — Abstract Contract
# ═══════════════════════════════════════════════════════════════════════════════


class Transaction[Ctx, T, E](ABC):
    """
    An abstract transaction over context type Ctx.

    Constructing a transaction has no side effects; run() is the only way
    to produce work. A value may be run any number of times and re-invokes
    its closures each time.

    Transactions sharing the same Ctx compose with the methods below:

        tx = (
            T.with_ctx(load_balance)
            .and_then(lambda balance: T.with_ctx(debit(balance, 10)))
            .map_err(BankError.from_db)
        )
        result = T.run(tx, conn)
    """

    __slots__ = ()

    @abstractmethod
    def run(self, ctx: Ctx) -> Result[T, E]:
        """Run the transaction. Called by a driver rather than by hand."""
        ...

    def boxed(self) -> Boxed[Ctx, T, E]:
        """Erase the concrete node type behind a Boxed handle."""
        if isinstance(self, Boxed):
            return self
        return Boxed(self)

    # ───────────────────────────────────────────────────────────────────────────
    # Sequencing & Transformation
    # ───────────────────────────────────────────────────────────────────────────

    def then[U](
        self,
        f: Callable[[Result[T, E]], Transaction[Ctx, U, E]],
    ) -> Then[Ctx, T, U, E]:
        """Take the whole previous result and continue with another transaction."""
        return Then(self, require_callable(f, "then"))

    def map[U](self, f: Callable[[T], U]) -> Map[Ctx, T, U, E]:
        """Transform the successful value."""
        return Map(self, require_callable(f, "map"))

    def and_then[U](
        self,
        f: Callable[[T], Transaction[Ctx, U, E]],
    ) -> AndThen[Ctx, T, U, E]:
        """Take the successful value and continue with another transaction."""
        return AndThen(self, require_callable(f, "and_then"))

    def map_err[E2](self, f: Callable[[E], E2]) -> MapErr[Ctx, T, E, E2]:
        """Transform the error value."""
        return MapErr(self, require_callable(f, "map_err"))

    def or_else(
        self,
        f: Callable[[E], Transaction[Ctx, T, E]],
    ) -> OrElse[Ctx, T, E]:
        """Take the error value and fall back to another transaction."""
        return OrElse(self, require_callable(f, "or_else"))

    # ───────────────────────────────────────────────────────────────────────────
    # Error Transmutation
    # ───────────────────────────────────────────────────────────────────────────

    def abort[U](self, f: Callable[[T], E]) -> Abort[Ctx, T, U, E]:
        """Turn success into failure."""
        return Abort(self, require_callable(f, "abort"))

    def try_abort[U](self, f: Callable[[T], Result[U, E]]) -> TryAbort[Ctx, T, U, E]:
        """Let f decide the outcome of a success."""
        return TryAbort(self, require_callable(f, "try_abort"))

    def recover(self, f: Callable[[E], T]) -> Recover[Ctx, T, E]:
        """Turn failure into success."""
        return Recover(self, require_callable(f, "recover"))

    def try_recover[E2](
        self,
        f: Callable[[E], Result[T, E2]],
    ) -> TryRecover[Ctx, T, E, E2]:
        """Let f decide the outcome of a failure."""
        return TryRecover(self, require_callable(f, "try_recover"))

    # ───────────────────────────────────────────────────────────────────────────
    # Joins
    # ───────────────────────────────────────────────────────────────────────────

    def join[B](self, b: Transaction[Ctx, B, E]) -> Join[Ctx, T, B, E]:
        """Join 2 independent transactions."""
        return Join(self, require_transaction(b, "join"))

    def join3[B, C](
        self,
        b: Transaction[Ctx, B, E],
        c: Transaction[Ctx, C, E],
    ) -> Join3[Ctx, T, B, C, E]:
        """Join 3 independent transactions."""
        return Join3(
            self,
            require_transaction(b, "join3"),
            require_transaction(c, "join3"),
        )

    def join4[B, C, D](
        self,
        b: Transaction[Ctx, B, E],
        c: Transaction[Ctx, C, E],
        d: Transaction[Ctx, D, E],
    ) -> Join4[Ctx, T, B, C, D, E]:
        """Join 4 independent transactions."""
        return Join4(
            self,
            require_transaction(b, "join4"),
            require_transaction(c, "join4"),
            require_transaction(d, "join4"),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Boxed — Erased Handle
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Boxed[Ctx, T, E](Transaction[Ctx, T, E]):
    """
    Type-erased handle forwarding to the wrapped transaction.

    Lets functions return, and classes store, graphs of different
    concrete shapes under one type:

        class Accounts:
            def deposit(self, n: int) -> T.Boxed[Conn, int, DbError]:
                return T.with_ctx(...).and_then(...).boxed()
    """

    inner: Transaction[Ctx, T, E]

    def run(self, ctx: Ctx) -> Result[T, E]:
        return self.inner.run(ctx)


# ═══════════════════════════════════════════════════════════════════════════════
# Sequencing & Transformation Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Then[Ctx, T, U, E](Transaction[Ctx, U, E]):
    """The result of `then`."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[Result[T, E]], Transaction[Ctx, U, E]]

    def run(self, ctx: Ctx) -> Result[U, E]:
        following = expect_transaction(self.f(self.tx.run(ctx)), "then")
        return following.run(ctx)


@dataclass(frozen=True, slots=True)
class Map[Ctx, T, U, E](Transaction[Ctx, U, E]):
    """The result of `map`."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[T], U]

    def run(self, ctx: Ctx) -> Result[U, E]:
        match self.tx.run(ctx):
            case Ok(value):
                return Ok(self.f(value))
            case Error(e):
                return Error(e)


@dataclass(frozen=True, slots=True)
class AndThen[Ctx, T, U, E](Transaction[Ctx, U, E]):
    """The result of `and_then`."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[T], Transaction[Ctx, U, E]]

    def run(self, ctx: Ctx) -> Result[U, E]:
        match self.tx.run(ctx):
            case Ok(value):
                return expect_transaction(self.f(value), "and_then").run(ctx)
            case Error(e):
                return Error(e)


@dataclass(frozen=True, slots=True)
class MapErr[Ctx, T, E, E2](Transaction[Ctx, T, E2]):
    """The result of `map_err`."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[E], E2]

    def run(self, ctx: Ctx) -> Result[T, E2]:
        match self.tx.run(ctx):
            case Ok(value):
                return Ok(value)
            case Error(e):
                return Error(self.f(e))


@dataclass(frozen=True, slots=True)
class OrElse[Ctx, T, E](Transaction[Ctx, T, E]):
    """The result of `or_else`."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[E], Transaction[Ctx, T, E]]

    def run(self, ctx: Ctx) -> Result[T, E]:
        match self.tx.run(ctx):
            case Ok(value):
                return Ok(value)
            case Error(e):
                return expect_transaction(self.f(e), "or_else").run(ctx)


# ═══════════════════════════════════════════════════════════════════════════════
# Error Transmutation Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Abort[Ctx, T, U, E](Transaction[Ctx, U, E]):
    """The result of `abort`. Never succeeds."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[T], E]

    def run(self, ctx: Ctx) -> Result[U, E]:
        match self.tx.run(ctx):
            case Ok(value):
                return Error(self.f(value))
            case Error(e):
                return Error(e)


@dataclass(frozen=True, slots=True)
class TryAbort[Ctx, T, U, E](Transaction[Ctx, U, E]):
    """The result of `try_abort`."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[T], Result[U, E]]

    def run(self, ctx: Ctx) -> Result[U, E]:
        match self.tx.run(ctx):
            case Ok(value):
                return expect_result(self.f(value), "try_abort")
            case Error(e):
                return Error(e)


@dataclass(frozen=True, slots=True)
class Recover[Ctx, T, E](Transaction[Ctx, T, E]):
    """The result of `recover`. Never fails."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[E], T]

    def run(self, ctx: Ctx) -> Result[T, E]:
        match self.tx.run(ctx):
            case Ok(value):
                return Ok(value)
            case Error(e):
                return Ok(self.f(e))


@dataclass(frozen=True, slots=True)
class TryRecover[Ctx, T, E, E2](Transaction[Ctx, T, E2]):
    """The result of `try_recover`."""

    tx: Transaction[Ctx, T, E]
    f: Callable[[E], Result[T, E2]]

    def run(self, ctx: Ctx) -> Result[T, E2]:
        match self.tx.run(ctx):
            case Ok(value):
                return Ok(value)
            case Error(e):
                return expect_result(self.f(e), "try_recover")


# ═══════════════════════════════════════════════════════════════════════════════
# Join Nodes
# ═══════════════════════════════════════════════════════════════════════════════
#
# Children always run, in declared order, against the same context: a join
# does not short-circuit and does not isolate. Writes from an earlier child
# are visible to later ones. The first failing child (in declared order)
# decides the error.


def _gather[E](*results: Result[Any, E]) -> Result[tuple[Any, ...], E]:
    values: list[Any] = []
    for r in results:
        match r:
            case Ok(value):
                values.append(value)
            case Error(e):
                return Error(e)
    return Ok(tuple(values))


@dataclass(frozen=True, slots=True)
class Join[Ctx, A, B, E](Transaction[Ctx, tuple[A, B], E]):
    """The result of `join`."""

    tx1: Transaction[Ctx, A, E]
    tx2: Transaction[Ctx, B, E]

    def run(self, ctx: Ctx) -> Result[tuple[A, B], E]:
        r1 = self.tx1.run(ctx)
        r2 = self.tx2.run(ctx)
        return _gather(r1, r2)


@dataclass(frozen=True, slots=True)
class Join3[Ctx, A, B, C, E](Transaction[Ctx, tuple[A, B, C], E]):
    """The result of `join3`."""

    tx1: Transaction[Ctx, A, E]
    tx2: Transaction[Ctx, B, E]
    tx3: Transaction[Ctx, C, E]

    def run(self, ctx: Ctx) -> Result[tuple[A, B, C], E]:
        r1 = self.tx1.run(ctx)
        r2 = self.tx2.run(ctx)
        r3 = self.tx3.run(ctx)
        return _gather(r1, r2, r3)


@dataclass(frozen=True, slots=True)
class Join4[Ctx, A, B, C, D, E](Transaction[Ctx, tuple[A, B, C, D], E]):
    """The result of `join4`."""

    tx1: Transaction[Ctx, A, E]
    tx2: Transaction[Ctx, B, E]
    tx3: Transaction[Ctx, C, E]
    tx4: Transaction[Ctx, D, E]

    def run(self, ctx: Ctx) -> Result[tuple[A, B, C, D], E]:
        r1 = self.tx1.run(ctx)
        r2 = self.tx2.run(ctx)
        r3 = self.tx3.run(ctx)
        r4 = self.tx4.run(ctx)
        return _gather(r1, r2, r3, r4)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Transaction",
    "Boxed",
    "Then",
    "Map",
    "AndThen",
    "MapErr",
    "OrElse",
    "Abort",
    "TryAbort",
    "Recover",
    "TryRecover",
    "Join",
    "Join3",
    "Join4",
)
