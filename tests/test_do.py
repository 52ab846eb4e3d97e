import pytest

import transact as T
from transact import do
from fakes import Counters, fail, inc, read, unwrap_err, unwrap_ok


@do
def bump_both(first: str, second: str):
    a = yield inc(first)
    b = yield inc(second)
    total = yield read(first).join(read(second)).map(sum)
    return (a, b, total)


def test_do_sequences_and_returns() -> None:
    ctx = Counters()

    assert unwrap_ok(T.run(bump_both("x", "y"), ctx)) == (1, 1, 2)
    assert ctx.events == ["inc:x", "inc:y", "read:x", "read:y"]


def test_do_short_circuits_and_closes_generator() -> None:
    closed: list[bool] = []

    @do
    def flow():
        try:
            yield inc("a")
            yield fail("stop")
            yield inc("never")
        finally:
            closed.append(True)
        return "unreachable"

    ctx = Counters()

    assert unwrap_err(T.run(flow(), ctx)) == "stop"
    assert ctx.get("never") == 0
    assert closed == [True]


def test_do_reruns_from_scratch() -> None:
    ctx = Counters()
    tx = bump_both("x", "y")

    unwrap_ok(T.run(tx, ctx))
    assert unwrap_ok(T.run(tx, ctx)) == (2, 2, 4)


def test_do_composes_with_combinators() -> None:
    tx = bump_both("x", "y").map(lambda t: t[2]).and_then(lambda n: T.ok(n * 10))

    assert unwrap_ok(T.run(tx, Counters())) == 20


def test_do_rejects_non_transaction_yield() -> None:
    @do
    def bad():
        yield 5

    with pytest.raises(TypeError):
        T.run(bad(), Counters())


def test_do_closes_generator_on_bad_yield() -> None:
    closed: list[bool] = []

    @do
    def bad():
        try:
            yield "not a transaction"
        finally:
            closed.append(True)

    with pytest.raises(TypeError):
        T.run(bad(), Counters())

    assert closed == [True]


def test_do_closes_generator_when_step_raises() -> None:
    closed: list[bool] = []

    def explode(c: Counters) -> T.Result[int, str]:
        raise RuntimeError("boom")

    @do
    def flow():
        try:
            yield T.with_ctx(explode)
        finally:
            closed.append(True)

    with pytest.raises(RuntimeError):
        T.run(flow(), Counters())

    assert closed == [True]


def test_do_preserves_metadata() -> None:
    assert bump_both.__name__ == "bump_both"
    assert isinstance(bump_both("x", "y"), T.Do)
