"""Read-only kbld template resource."""

import hashlib
import logging
from typing import Optional, Union

from kappsync.exceptions import KappsyncError, ReconcileError, ToolFailedError
from kappsync.logging_config import RESOURCE_LOGGER_NAME, LabeledLogger, NoopLogger
from kappsync.modules.api.models import TemplateResourceSpec, TemplateResourceState
from kappsync.modules.args import build_template_args
from kappsync.modules.classifier import Failed, Operation, classify
from kappsync.modules.executor import ProcessRunner


def sha256_sum(data: Union[str, bytes]) -> str:
    """Hex SHA-256 digest of `data`; text is hashed as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


class TemplateReconciler:
    """Renders templates with kbld; identity follows the rendered output."""

    def __init__(self, runner: ProcessRunner, logger: Optional[LabeledLogger] = None):
        self.runner = runner
        self.logger = logger or LabeledLogger(logging.getLogger(RESOURCE_LOGGER_NAME))

    def read(self, spec: TemplateResourceSpec, state: TemplateResourceState) -> None:
        """
        Render the template and store the result.

        Raises:
            ReconcileError: If argument building, execution or kbld itself fails
        """
        logger: LabeledLogger = NoopLogger()

        if spec.debug_logs:
            logger = self.logger.with_label("template").with_label("read")
            logger.debug("started")

        try:
            cmd = build_template_args(spec)
            result = self.runner.run(cmd.args, stdin=cmd.stdin)
            outcome = classify(
                Operation.TEMPLATE, result.exit_status, result.stdout, result.stderr
            )
            if isinstance(outcome, Failed):
                raise ToolFailedError(
                    self.runner.executable, outcome.exit_status, outcome.stderr
                )
        except KappsyncError as exc:
            raise ReconcileError("Templating", "template", exc) from exc

        state.result = outcome.stdout
        # id covers the undecoded output
        state.id = sha256_sum(result.stdout_bytes)

        logger.debug(f"id={state.id}")
