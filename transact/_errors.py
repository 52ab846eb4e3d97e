"""
Misuse errors.

Domain failures travel through the Result channel. These exceptions are
raised only when the algebra itself is used incorrectly.
"""

from __future__ import annotations


class ReentrantRunError(RuntimeError):
    """A context was handed to run() while another run on it was active."""

    def __init__(self, ctx: object) -> None:
        super().__init__(
            f"context {type(ctx).__name__}@{id(ctx):#x} is already being run; "
            "compose the inner transaction instead of re-entering run()"
        )
        self.ctx = ctx


__all__ = ("ReentrantRunError",)
