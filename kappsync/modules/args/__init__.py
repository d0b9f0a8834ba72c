"""
Args Module - Black Box Interface

Purpose: Translate resource specs into tool arguments
Interface: build_deploy_args(), build_diff_args(), build_delete_args(), build_template_args()
Hidden: Flag spelling, inline config de-indentation

Pure functions; specs are never mutated.
"""

from .builder import (
    CommandArgs,
    build_delete_args,
    build_deploy_args,
    build_diff_args,
    build_template_args,
)
from .heredoc import strip_indent

__all__ = [
    "CommandArgs",
    "build_delete_args",
    "build_deploy_args",
    "build_diff_args",
    "build_template_args",
    "strip_indent",
]
