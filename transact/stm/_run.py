"""
STM driver — attempts until commit.
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from transact._run import run as run_guarded
from transact._tx import Transaction
from transact.stm._policy import StmPolicy, DEFAULT
from transact.stm._tvar import StmLog
from transact.stm._types import StmError, StmErrorKind

logger = logging.getLogger(__name__)


def run[T, E](
    tx: Transaction[StmLog, T, E | StmError],
    policy: StmPolicy = DEFAULT,
) -> Result[T, E | StmError]:
    """
    Run a transaction atomically.

    Every attempt starts from a fresh StmLog:
    - Ok: commit. A conflicting commit reruns the attempt.
    - StmError FAILURE: rerun immediately.
    - StmError RETRY: wait until a variable read so far changes, then rerun.
    - any other error: discard the log and return the error.

    Example:
        from transact import stm as S

        result = S.run(
            S.modify(x, lambda v: v + 1).and_then(lambda _: S.read(y)),
            S.policy(max_attempts=100),
        )
    """
    attempt = 0
    while policy.max_attempts is None or attempt < policy.max_attempts:
        attempt += 1
        log = StmLog()
        logger.debug("stm attempt %d", attempt)

        match run_guarded(tx, log):
            case Ok(value):
                if log.commit():
                    logger.debug(
                        "stm commit on attempt %d (%d reads, %d writes)",
                        attempt, log.reads, log.writes,
                    )
                    return Ok(value)
                logger.debug("stm commit conflict on attempt %d", attempt)

            case Error(StmError(kind=StmErrorKind.FAILURE) as e):
                logger.debug("stm attempt %d failed: %s", attempt, e.message)

            case Error(StmError(kind=StmErrorKind.RETRY)):
                logger.debug("stm attempt %d waiting on %d reads", attempt, log.reads)
                log.wait_for_change(policy.retry_wait.total_seconds())

            case Error(e):
                logger.debug("stm attempt %d aborted", attempt)
                return Error(e)

    logger.warning("stm gave up after %d attempts", attempt)
    return Error(StmError(StmErrorKind.EXHAUSTED, f"no commit after {attempt} attempts"))


__all__ = ("run",)
