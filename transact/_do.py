"""
Do — generator notation for sequential composition.

    import transact as T
    from transact import do

    @do
    def transfer(src: str, dst: str, amount: int):
        balance = yield read_balance(src)
        if balance < amount:
            yield T.err(Insufficient(src, balance))
        yield write_balance(src, balance - amount)
        yield deposit(dst, amount)
        return balance - amount

    result = T.run(transfer("alice", "bob", 10), conn)

Each yielded transaction runs against the same context and its value is
sent back into the generator. The first failure ends the generator and
becomes the result; the generator's return value becomes the success.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import Any

from kungfu import Result, Ok, Error

from transact._tx import Transaction, expect_transaction, require_callable

type Body[Ctx, T, E] = Generator[Transaction[Ctx, Any, E], Any, T]
"""Generator that yields transactions and returns the final value."""

# ═══════════════════════════════════════════════════════════════════════════════
# Do Node
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Do[Ctx, T, E](Transaction[Ctx, T, E]):
    """The result of calling a `@do` function. Starts a fresh generator per run."""

    body: Callable[[], Body[Ctx, T, E]]

    def run(self, ctx: Ctx) -> Result[T, E]:
        gen = self.body()
        sent: Any = None
        try:
            while True:
                try:
                    step = gen.send(sent)
                except StopIteration as stop:
                    return Ok(stop.value)

                match expect_transaction(step, "do").run(ctx):
                    case Ok(value):
                        sent = value
                    case Error(e):
                        return Error(e)
        finally:
            gen.close()


# ═══════════════════════════════════════════════════════════════════════════════
# do() — Decorator
# ═══════════════════════════════════════════════════════════════════════════════


def do[**P, Ctx, T, E](
    fn: Callable[P, Body[Ctx, T, E]],
) -> Callable[P, Do[Ctx, T, E]]:
    """Turn a generator function into a function returning a transaction."""
    require_callable(fn, "do")

    @functools.wraps(fn)
    def build(*args: P.args, **kwargs: P.kwargs) -> Do[Ctx, T, E]:
        return Do(functools.partial(fn, *args, **kwargs))

    return build


__all__ = ("Do", "do", "Body")
