"""Blocking execution of the Carvel command-line tools."""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from kappsync.exceptions import CaptureError, LaunchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Fully captured result of one process run.

    Streams are decoded as UTF-8 with invalid bytes replaced, so `stdout`
    may differ from the raw output; `stdout_bytes` keeps it undecoded.
    """

    stdout: str
    stderr: str
    exit_status: int
    stdout_bytes: bytes = b""


class ProcessRunner:
    """Runs one external executable per call and captures its streams."""

    def __init__(self, executable: str):
        """
        Initialize runner.

        Args:
            executable: Name or path of the tool (e.g. "kapp")
        """
        self.executable = executable

    def run(self, args: List[str], stdin: Optional[str] = None) -> ProcessResult:
        """
        Execute the tool and wait for it to exit.

        A non-zero exit status is returned, not raised; deciding what it
        means is up to the caller.

        Args:
            args: Tool arguments
            stdin: Optional payload written to standard input

        Returns:
            ProcessResult with decoded stdout/stderr and the exit status

        Raises:
            LaunchError: If the executable cannot be started or was killed by a signal
            CaptureError: If standard streams cannot be captured
        """
        cmd = [self.executable] + args
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise LaunchError(f"Starting {self.executable}: {e}") from e

        with process:
            try:
                stdout_bs, stderr_bs = process.communicate(
                    input=stdin.encode("utf-8") if stdin is not None else None
                )
            except OSError as e:
                process.kill()
                process.wait()
                raise CaptureError(f"Capturing {self.executable} output: {e}") from e

        stdout = stdout_bs.decode("utf-8", errors="replace")
        stderr = stderr_bs.decode("utf-8", errors="replace")

        if process.returncode < 0:
            raise LaunchError(
                f"{self.executable} terminated by signal {-process.returncode} "
                f"(stderr: {stderr})"
            )

        return ProcessResult(
            stdout=stdout,
            stderr=stderr,
            exit_status=process.returncode,
            stdout_bytes=stdout_bs,
        )
