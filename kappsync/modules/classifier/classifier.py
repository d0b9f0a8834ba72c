"""
Exit status interpretation for kapp and kbld.

kapp's diff-only mode (`--diff-run --diff-exit-status`) never exits 0:
2 means nothing would change, 3 means changes are pending. Any other
status, including ones future kapp versions might add, is a failure.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from kappsync.exceptions import ClassifierError

DIFF_EXIT_NO_CHANGES = 2
DIFF_EXIT_PENDING_CHANGES = 3


class Operation(str, Enum):
    """Kinds of tool invocation."""

    APPLY = "apply"
    DELETE = "delete"
    DIFF = "diff"
    TEMPLATE = "template"


@dataclass(frozen=True)
class Applied:
    """Tool succeeded."""

    stdout: str


@dataclass(frozen=True)
class NoChange:
    """Diff run found nothing to change."""


@dataclass(frozen=True)
class PendingChange:
    """Diff run found changes; stdout holds the diff."""

    stdout: str


@dataclass(frozen=True)
class Failed:
    """Tool ran and reported failure."""

    stderr: str
    exit_status: int


Outcome = Union[Applied, NoChange, PendingChange, Failed]


def classify(operation: Operation, exit_status: int, stdout: str, stderr: str) -> Outcome:
    """
    Map a tool exit status onto an outcome.

    Args:
        operation: Kind of invocation that produced the result
        exit_status: Process exit status
        stdout: Captured standard output
        stderr: Captured standard error

    Returns:
        The outcome for this operation

    Raises:
        ClassifierError: If a diff run exits 0
    """
    if operation is Operation.DIFF:
        if exit_status == 0:
            raise ClassifierError(
                f"Classifying {operation.value} result: Expected non-0 exit code "
                f"(stderr: {stderr})"
            )
        if exit_status == DIFF_EXIT_NO_CHANGES:
            return NoChange()
        if exit_status == DIFF_EXIT_PENDING_CHANGES:
            return PendingChange(stdout=stdout)
        return Failed(stderr=stderr, exit_status=exit_status)

    if exit_status == 0:
        return Applied(stdout=stdout)
    return Failed(stderr=stderr, exit_status=exit_status)
