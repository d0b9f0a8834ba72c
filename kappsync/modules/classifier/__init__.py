"""
Classifier Module - Black Box Interface

Purpose: Interpret tool exit statuses as semantic outcomes
Interface: classify(operation, exit_status, stdout, stderr) -> Outcome
Hidden: Per-operation exit code tables
"""

from .classifier import (
    Applied,
    Failed,
    NoChange,
    Operation,
    Outcome,
    PendingChange,
    classify,
)

__all__ = [
    "Applied",
    "Failed",
    "NoChange",
    "Operation",
    "Outcome",
    "PendingChange",
    "classify",
]
