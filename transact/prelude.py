"""
Prelude — the names most transaction code needs.

    from transact.prelude import *
"""

from transact._tx import Transaction
from transact._leaf import result, ok, err, lazy, with_ctx

__all__ = ("Transaction", "result", "ok", "err", "lazy", "with_ctx")
