"""Argument lists for kapp and kbld invocations."""

from dataclasses import dataclass
from typing import List, Optional

from kappsync.exceptions import FormatError
from kappsync.modules.api.models import AppResourceSpec, TemplateResourceSpec

from .heredoc import strip_indent

# Non-interactive, always-confirm execution
CONFIRM_FLAGS = ["--yes", "--tty"]

# Turns a deploy into a diff-only run whose exit status reports drift
DIFF_RUN_FLAGS = ["--diff-run", "--diff-exit-status"]

STDIN_FLAG = "-f-"


@dataclass(frozen=True)
class CommandArgs:
    """Arguments and optional stdin payload for one tool invocation."""

    args: List[str]
    stdin: Optional[str] = None


def build_deploy_args(spec: AppResourceSpec) -> CommandArgs:
    """
    Build `kapp deploy` arguments.

    Args:
        spec: App resource spec

    Returns:
        CommandArgs with the inline config (if any) as stdin

    Raises:
        FormatError: If config_yaml cannot be de-indented
    """
    args = ["deploy", "-a", spec.app, "-n", spec.namespace, *CONFIRM_FLAGS]

    if spec.diff_changes:
        args.append("--diff-changes")

    if spec.diff_context is not None:
        args.append(f"--diff-context={spec.diff_context}")

    stdin = _inline_config(spec.config_yaml, args)

    args.extend(f"--file={path}" for path in spec.files)

    return CommandArgs(args=args, stdin=stdin)


def build_diff_args(spec: AppResourceSpec) -> CommandArgs:
    """Build `kapp deploy` arguments for a diff-only run."""
    deploy = build_deploy_args(spec)
    return CommandArgs(args=[*deploy.args, *DIFF_RUN_FLAGS], stdin=deploy.stdin)


def build_delete_args(spec: AppResourceSpec) -> CommandArgs:
    """Build `kapp delete` arguments; only the identity is needed."""
    return CommandArgs(
        args=["delete", "-a", spec.app, "-n", spec.namespace, *CONFIRM_FLAGS]
    )


def build_template_args(spec: TemplateResourceSpec) -> CommandArgs:
    """Build `kbld` arguments."""
    args: List[str] = []
    stdin = _inline_config(spec.config_yaml, args)
    args.extend(f"--file={path}" for path in spec.files)
    return CommandArgs(args=args, stdin=stdin)


def _inline_config(config_yaml: str, args: List[str]) -> Optional[str]:
    """Append the stdin flag and return the de-indented config, if any."""
    if not config_yaml:
        return None

    args.append(STDIN_FLAG)

    try:
        return strip_indent(config_yaml)
    except FormatError as exc:
        raise FormatError(f"Formatting config_yaml: {exc}") from exc
