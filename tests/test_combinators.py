import pytest
from kungfu import Ok, Error

import transact as T
from fakes import Calls, Counters, fail, inc, read, unwrap_err, unwrap_ok


# ═══════════════════════════════════════════════════════════════════════════════
# map / map_err
# ═══════════════════════════════════════════════════════════════════════════════


def test_map_transforms_success() -> None:
    assert unwrap_ok(T.run(T.ok(2).map(lambda v: v * 10), Counters())) == 20


def test_map_passes_error_through() -> None:
    f = Calls(lambda v: v * 10)

    assert unwrap_err(T.run(T.err("e").map(f), Counters())) == "e"
    assert f.count == 0


def test_map_err_transforms_error_only() -> None:
    assert unwrap_err(T.run(T.err("e").map_err(str.upper), Counters())) == "E"

    f = Calls(str.upper)
    assert unwrap_ok(T.run(T.ok(1).map_err(f), Counters())) == 1
    assert f.count == 0


# ═══════════════════════════════════════════════════════════════════════════════
# then / and_then / or_else
# ═══════════════════════════════════════════════════════════════════════════════


def test_then_receives_whole_result() -> None:
    seen: list[object] = []

    def after(result: T.Result[int, str]) -> T.Transaction[Counters, str, str]:
        seen.append(result)
        match result:
            case Ok(v):
                return T.ok(f"ok:{v}")
            case Error(e):
                return T.ok(f"recovered:{e}")

    assert unwrap_ok(T.run(T.ok(1).then(after), Counters())) == "ok:1"
    assert unwrap_ok(T.run(T.err("x").then(after), Counters())) == "recovered:x"
    assert len(seen) == 2


def test_then_continues_after_failure_with_side_effects() -> None:
    ctx = Counters()
    tx = fail("first").then(lambda _: inc("a"))

    assert unwrap_ok(T.run(tx, ctx)) == 1
    assert ctx.events == ["fail:first", "inc:a"]


def test_and_then_sequences_on_success() -> None:
    ctx = Counters()
    tx = inc("a").and_then(lambda a: inc("b").map(lambda b: a + b))

    assert unwrap_ok(T.run(tx, ctx)) == 2
    assert ctx.events == ["inc:a", "inc:b"]


def test_and_then_short_circuits() -> None:
    f = Calls(lambda v: T.ok(v))
    ctx = Counters()

    assert unwrap_err(T.run(fail("stop").and_then(f), ctx)) == "stop"
    assert f.count == 0


def test_or_else_falls_back_on_failure() -> None:
    ctx = Counters()
    tx = fail("primary").or_else(lambda e: inc("fallback"))

    assert unwrap_ok(T.run(tx, ctx)) == 1
    assert ctx.events == ["fail:primary", "inc:fallback"]


def test_or_else_short_circuits_on_success() -> None:
    f = Calls(lambda e: T.ok(0))

    assert unwrap_ok(T.run(T.ok(7).or_else(f), Counters())) == 7
    assert f.count == 0


def test_continuation_must_return_transaction() -> None:
    with pytest.raises(TypeError):
        T.run(T.ok(1).and_then(lambda v: v), Counters())  # type: ignore[arg-type, return-value]

    with pytest.raises(TypeError):
        T.run(T.err(1).or_else(lambda e: Ok(e)), Counters())  # type: ignore[arg-type, return-value]

    with pytest.raises(TypeError):
        T.run(T.ok(1).then(lambda r: r), Counters())  # type: ignore[arg-type, return-value]


def test_combinators_reject_non_callables() -> None:
    with pytest.raises(TypeError):
        T.ok(1).map(None)  # type: ignore[arg-type]

    with pytest.raises(TypeError):
        T.ok(1).and_then(5)  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════════════════════
# abort / try_abort / recover / try_recover
# ═══════════════════════════════════════════════════════════════════════════════


def test_abort_turns_success_into_error() -> None:
    assert unwrap_err(T.run(T.ok(3).abort(lambda v: f"aborted:{v}"), Counters())) == "aborted:3"


def test_abort_keeps_existing_error() -> None:
    f = Calls(lambda v: "never")

    assert unwrap_err(T.run(T.err("orig").abort(f), Counters())) == "orig"
    assert f.count == 0


def test_abort_keeps_side_effects_of_inner() -> None:
    ctx = Counters()

    unwrap_err(T.run(inc("a").abort(lambda v: "rollback"), ctx))
    assert ctx.get("a") == 1


def test_try_abort_lets_f_decide() -> None:
    def check(v: int) -> T.Result[str, str]:
        return Ok(f"fine:{v}") if v < 10 else Error("too big")

    assert unwrap_ok(T.run(T.ok(1).try_abort(check), Counters())) == "fine:1"
    assert unwrap_err(T.run(T.ok(50).try_abort(check), Counters())) == "too big"
    assert unwrap_err(T.run(T.err("prior").try_abort(check), Counters())) == "prior"


def test_recover_turns_error_into_success() -> None:
    assert unwrap_ok(T.run(T.err("e").recover(len), Counters())) == 1


def test_recover_keeps_success() -> None:
    f = Calls(len)

    assert unwrap_ok(T.run(T.ok(9).recover(f), Counters())) == 9
    assert f.count == 0


def test_try_recover_can_change_error() -> None:
    def handle(e: str) -> T.Result[int, int]:
        return Ok(0) if e == "soft" else Error(500)

    assert unwrap_ok(T.run(T.err("soft").try_recover(handle), Counters())) == 0
    assert unwrap_err(T.run(T.err("hard").try_recover(handle), Counters())) == 500
    assert unwrap_ok(T.run(T.ok(4).try_recover(handle), Counters())) == 4


def test_try_variants_reject_non_results() -> None:
    with pytest.raises(TypeError):
        T.run(T.ok(1).try_abort(lambda v: v), Counters())  # type: ignore[arg-type, return-value]

    with pytest.raises(TypeError):
        T.run(T.err(1).try_recover(lambda e: e), Counters())  # type: ignore[arg-type, return-value]


# ═══════════════════════════════════════════════════════════════════════════════
# Reuse & immutability
# ═══════════════════════════════════════════════════════════════════════════════


def test_rerun_reinvokes_closures() -> None:
    ctx = Counters()
    tx = inc("a").and_then(lambda _: read("a"))

    assert unwrap_ok(T.run(tx, ctx)) == 1
    assert unwrap_ok(T.run(tx, ctx)) == 2


def test_nodes_are_frozen() -> None:
    tx = T.ok(1).map(str)

    with pytest.raises(AttributeError):
        tx.f = repr  # type: ignore[misc]


def test_combinator_node_types() -> None:
    base = T.ok(1)

    assert isinstance(base.map(str), T.Map)
    assert isinstance(base.then(lambda r: base), T.Then)
    assert isinstance(base.and_then(lambda v: base), T.AndThen)
    assert isinstance(base.map_err(str), T.MapErr)
    assert isinstance(base.or_else(lambda e: base), T.OrElse)
    assert isinstance(base.abort(str), T.Abort)
    assert isinstance(base.try_abort(Ok), T.TryAbort)
    assert isinstance(base.recover(str), T.Recover)
    assert isinstance(base.try_recover(Ok), T.TryRecover)
