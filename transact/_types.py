"""
Core types for transact.

Re-exports from kungfu + custom type aliases.
"""

from __future__ import annotations

from collections.abc import Callable

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Leaf Function Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Thunk[T, E] = Callable[[], Result[T, E]]
"""Zero-argument computation, invoked fresh on every run."""

type Reader[Ctx, T, E] = Callable[[Ctx], Result[T, E]]
"""Computation with mutable access to the context."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Thunk",
    "Reader",
)
