"""
STM types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class StmErrorKind(Enum):
    """
    STM error kinds.

    FAILURE and RETRY are control signals the driver consumes; EXHAUSTED
    is what the driver reports when it gives up.
    """

    FAILURE = auto()  # Inconsistent snapshot, rerun immediately
    RETRY = auto()  # Block until a read variable changes, then rerun
    EXHAUSTED = auto()  # Attempt budget spent


@dataclass(frozen=True, slots=True)
class StmError:
    """STM operation error."""

    kind: StmErrorKind
    message: str

    @staticmethod
    def failure(message: str = "inconsistent read") -> StmError:
        return StmError(StmErrorKind.FAILURE, message)

    @staticmethod
    def retry(message: str = "retry requested") -> StmError:
        return StmError(StmErrorKind.RETRY, message)


__all__ = ("StmError", "StmErrorKind")
