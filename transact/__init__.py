"""
transact — composable unit-of-work transactions over any context.

    import transact as T

    tx = (
        T.with_ctx(read_counter("x"))
        .and_then(lambda x: T.with_ctx(write_counter("x", x + 1)))
        .join(T.with_ctx(read_counter("y")))
    )
    result = T.run(tx, ctx)

    from transact import lift as L   # Exceptions and async bridges
    from transact import stm         # In-memory STM backend
"""

from transact import lift
from transact import stm
from transact._types import (
    Result,
    Ok,
    Error,
    Thunk,
    Reader,
)
from transact._errors import ReentrantRunError
from transact._tx import (
    Transaction,
    Boxed,
    Then,
    Map,
    AndThen,
    MapErr,
    OrElse,
    Abort,
    TryAbort,
    Recover,
    TryRecover,
    Join,
    Join3,
    Join4,
)
from transact._leaf import (
    TxResult,
    TxOk,
    TxErr,
    Lazy,
    WithCtx,
    result,
    ok,
    err,
    lazy,
    with_ctx,
)
from transact._do import Do, do
from transact._run import run, is_running

__version__ = "0.1.0"

__all__ = (
    "lift",
    "stm",
    # Results
    "Result",
    "Ok",
    "Error",
    "Thunk",
    "Reader",
    # Errors
    "ReentrantRunError",
    # Core
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
    # Leaves
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
    # Notation
    "Do",
    "do",
    # Execution
    "run",
    "is_running",
)
