"""
STM — in-memory software transactional memory on top of the algebra.

    from transact import stm as S

    x, y = S.TVar(0), S.TVar(0)

    inc_x = S.modify(x, lambda v: v + 1)
    inc_y = S.modify(y, lambda v: v + 1)
    total = S.read(x).join(S.read(y)).map(sum)

    result = S.run(inc_x.and_then(lambda _: inc_y).and_then(lambda _: total))
"""

from __future__ import annotations

from transact.stm._types import StmError, StmErrorKind
from transact.stm._tvar import TVar, StmLog
from transact.stm._ops import Stm, read, write, modify, retry
from transact.stm._policy import StmPolicy, DEFAULT, policy
from transact.stm._run import run

__all__ = (
    "StmError",
    "StmErrorKind",
    "TVar",
    "StmLog",
    "Stm",
    "read",
    "write",
    "modify",
    "retry",
    "StmPolicy",
    "DEFAULT",
    "policy",
    "run",
)
