"""
Executor Module - Black Box Interface

Purpose: Run kapp/kbld as external processes
Interface: ProcessRunner.run(args, stdin) -> ProcessResult
Hidden: Process spawning, stream capture and decoding

One process per call, fully awaited; no retries and no timeout.
"""

from .runner import ProcessResult, ProcessRunner

__all__ = ["ProcessResult", "ProcessRunner"]
