"""
Counters — a class of named transactions over STM.

Level 2: transact.stm
Level 1: transact (Transaction, Boxed, with_ctx)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kungfu import Ok, Error

import transact as T
from transact import stm as S


@dataclass(slots=True)
class Data:
    x: S.TVar[int] = field(default_factory=lambda: S.TVar(0))
    y: S.TVar[int] = field(default_factory=lambda: S.TVar(0))

    def inc_x(self) -> T.Boxed[S.StmLog, int, S.StmError]:
        return S.modify(self.x, lambda v: v + 1).boxed()

    def inc_y(self) -> T.Boxed[S.StmLog, int, S.StmError]:
        return S.modify(self.y, lambda v: v + 1).boxed()

    def inc_xy(self) -> T.Boxed[S.StmLog, int, S.StmError]:
        return self.inc_x().and_then(lambda _: self.inc_y()).boxed()

    def add(self) -> T.Boxed[S.StmLog, int, S.StmError]:
        def go(log: S.StmLog) -> T.Result[int, S.StmError]:
            match (log.read(self.x), log.read(self.y)):
                case (Ok(x), Ok(y)):
                    return Ok(x + y)
                case (Error(e), _) | (_, Error(e)):
                    return Error(e)

        return T.with_ctx(go).boxed()


def main() -> None:
    data = Data()

    match S.run(data.inc_xy().and_then(lambda _: data.add())):
        case Ok(total):
            print(f"x + y = {total}")
        case Error(e):
            print(f"failed: {e.message}")

    print(f"x = {data.x.load()}, y = {data.y.load()}")


if __name__ == "__main__":
    main()
