"""
STM driver policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class StmPolicy:
    """
    How stm.run() drives attempts.

    max_attempts: None means keep going until commit.
    retry_wait: longest single wait after stm.retry() before re-checking.
    """

    max_attempts: int | None = None
    retry_wait: timedelta = timedelta(milliseconds=50)


DEFAULT = StmPolicy()


def policy(
    max_attempts: int | None = None,
    retry_wait: timedelta | None = None,
) -> StmPolicy:
    """
    Build a driver policy.

    Example:
        stm.run(tx, stm.policy(max_attempts=10))
        stm.run(tx, stm.policy(retry_wait=timedelta(seconds=1)))
    """
    if max_attempts is not None and max_attempts <= 0:
        raise ValueError("max_attempts must be positive")
    if retry_wait is None:
        return StmPolicy(max_attempts=max_attempts)
    if retry_wait <= timedelta(0):
        raise ValueError("retry_wait must be positive")
    return StmPolicy(max_attempts=max_attempts, retry_wait=retry_wait)


__all__ = ("StmPolicy", "DEFAULT", "policy")
