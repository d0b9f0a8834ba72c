"""
Lifecycle of a kapp application resource.

Create, Update and Delete fail hard. Read and diff previews log and
ignore tool failures instead: a diff may legitimately fail against
previously applied configuration (e.g. an ownership conflict), and
failing there would make the resource unreadable. The next deploy
validates independently.
"""

import logging
from typing import Optional, Tuple

from kappsync.exceptions import (
    ClassifierError,
    KappsyncError,
    ReconcileError,
    ToolFailedError,
)
from kappsync.logging_config import (
    DIFF_LOGGER_NAME,
    RESOURCE_LOGGER_NAME,
    LabeledLogger,
    NoopLogger,
)
from kappsync.modules.api.models import AppResourceSpec, AppResourceState
from kappsync.modules.args import (
    CommandArgs,
    build_delete_args,
    build_deploy_args,
    build_diff_args,
)
from kappsync.modules.classifier import (
    Failed,
    NoChange,
    Operation,
    Outcome,
    PendingChange,
    classify,
)
from kappsync.modules.executor import ProcessRunner


class AppReconciler:
    """Drives kapp for each lifecycle event of an app resource."""

    def __init__(
        self,
        runner: ProcessRunner,
        logger: Optional[LabeledLogger] = None,
        diff_logger: Optional[LabeledLogger] = None,
    ):
        """
        Initialize reconciler.

        Args:
            runner: Runner for the kapp executable
            logger: Base logger; errors always go here, debug output only
                when a spec enables debug_logs
            diff_logger: Logger receiving pending-change diffs
        """
        self.runner = runner
        self.logger = logger or LabeledLogger(logging.getLogger(RESOURCE_LOGGER_NAME))
        self.diff_logger = diff_logger or LabeledLogger(logging.getLogger(DIFF_LOGGER_NAME))

    def create(self, spec: AppResourceSpec, state: AppResourceState) -> None:
        """Deploy a new app; drift is cleared whatever the outcome."""
        logger, _ = self._new_logger(spec, "create")

        state.id = spec.identity

        self._clear_diff(state)
        try:
            self._deploy(spec, logger)
        except KappsyncError as exc:
            raise ReconcileError("Creating", spec.identity, exc) from exc
        finally:
            self._clear_diff(state)

    def read(self, spec: AppResourceSpec, state: AppResourceState) -> None:
        """Refresh drift information with a diff-only run."""
        logger, diff_logger = self._new_logger(spec, "read")

        state.id = spec.identity

        self._clear_diff(state)

        try:
            self._diff(spec, state, logger, diff_logger)
        except (ToolFailedError, ClassifierError) as exc:
            self._error_logger(spec, "read").error(f"Ignoring diffing error: {exc}")
        except KappsyncError as exc:
            raise ReconcileError("Reading", spec.identity, exc) from exc

    def update(self, spec: AppResourceSpec, state: AppResourceState) -> None:
        """Deploy an updated spec; drift is cleared whatever the outcome."""
        logger, _ = self._new_logger(spec, "update")

        state.id = spec.identity

        self._clear_diff(state)
        try:
            self._deploy(spec, logger)
        except KappsyncError as exc:
            raise ReconcileError("Updating", spec.identity, exc) from exc
        finally:
            self._clear_diff(state)

    def delete(self, spec: AppResourceSpec, state: AppResourceState) -> None:
        """Delete the app; the identity is cleared on success."""
        logger, _ = self._new_logger(spec, "delete")

        self._clear_diff(state)

        try:
            self._execute(Operation.DELETE, build_delete_args(spec), logger)
        except KappsyncError as exc:
            raise ReconcileError("Deleting", spec.identity, exc) from exc

        state.id = ""

    def customize_diff(self, spec: AppResourceSpec, planned: AppResourceState) -> None:
        """
        Populate drift fields of a planned state before an update is decided.

        Tool failures are logged and ignored, as in read().
        """
        logger, diff_logger = self._new_logger(spec, "customizeDiff")

        self._clear_diff(planned)

        try:
            self._diff(spec, planned, logger, diff_logger)
        except (ToolFailedError, ClassifierError) as exc:
            self._error_logger(spec, "customizeDiff").error(f"Ignoring diffing error: {exc}")
        except KappsyncError as exc:
            raise ReconcileError("Diffing", spec.identity, exc) from exc

    def _deploy(self, spec: AppResourceSpec, logger: LabeledLogger) -> str:
        return self._execute(Operation.APPLY, build_deploy_args(spec), logger)

    def _diff(
        self,
        spec: AppResourceSpec,
        state: AppResourceState,
        logger: LabeledLogger,
        diff_logger: LabeledLogger,
    ) -> None:
        # TODO kapp --diff-run still leaves an app record behind in the cluster
        cmd = build_diff_args(spec)
        result = self.runner.run(cmd.args, stdin=cmd.stdin)
        outcome = classify(Operation.DIFF, result.exit_status, result.stdout, result.stderr)

        if isinstance(outcome, NoChange):
            logger.debug("no changes found")
        elif isinstance(outcome, PendingChange):
            logger.debug("pending changes found")
            self._set_diff(state, outcome.stdout)
            diff_logger.info(outcome.stdout)
        else:
            self._raise_failed(outcome)

    def _execute(self, operation: Operation, cmd: CommandArgs, logger: LabeledLogger) -> str:
        result = self.runner.run(cmd.args, stdin=cmd.stdin)
        outcome = classify(operation, result.exit_status, result.stdout, result.stderr)
        self._raise_failed(outcome)
        logger.debug(f"{operation.value} succeeded")
        return outcome.stdout

    def _raise_failed(self, outcome: Outcome) -> None:
        if isinstance(outcome, Failed):
            raise ToolFailedError(self.runner.executable, outcome.exit_status, outcome.stderr)

    def _set_diff(self, state: AppResourceState, diff: str) -> None:
        state.cluster_drift_detected = True
        state.change_diff = diff

    def _clear_diff(self, state: AppResourceState) -> None:
        state.cluster_drift_detected = False

    def _new_logger(
        self, spec: AppResourceSpec, desc: str
    ) -> Tuple[LabeledLogger, LabeledLogger]:
        logger: LabeledLogger = NoopLogger()

        if spec.debug_logs:
            logger = self.logger.with_label(spec.identity).with_label(desc)
            logger.debug("started")

        return logger, self.diff_logger.with_label(spec.identity).with_label(desc)

    def _error_logger(self, spec: AppResourceSpec, desc: str) -> LabeledLogger:
        return self.logger.with_label(spec.identity).with_label(desc)
