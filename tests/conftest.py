"""
Shared pytest fixtures for Kappsync tests.

This module provides common fixtures including:
- KappMocker: Mock kapp/kbld process launches with canned responses
- Spec builders for app and template resources
"""

import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Pattern, Union
from unittest.mock import patch

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kappsync.modules.api import AppResourceSpec


# =============================================================================
# Process Mocking Infrastructure
# =============================================================================

MOCKED_TOOLS = ("kapp", "kbld")


@dataclass
class KappResponse:
    """Represents a mocked kapp/kbld process response."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    raises: Optional[BaseException] = None
    raw_stdout: Optional[bytes] = None


@dataclass
class KappCall:
    """Record of a tool call made during testing."""
    command: List[str]
    full_command_str: str
    matched_pattern: Optional[str] = None
    response: Optional[KappResponse] = None
    stdin: Optional[str] = None


class FakePopen:
    """Popen stand-in that replays a KappResponse."""

    def __init__(self, call: KappCall):
        self._call = call
        self.returncode: Optional[int] = None

    def communicate(self, input: Optional[bytes] = None):
        self._call.stdin = input.decode("utf-8") if input is not None else None
        response = self._call.response
        self.returncode = response.returncode
        stdout = response.raw_stdout
        if stdout is None:
            stdout = response.stdout.encode("utf-8")
        return stdout, response.stderr.encode("utf-8")

    def kill(self):
        pass

    def wait(self):
        return self.returncode

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


class KappMocker:
    """
    Mock kapp/kbld process launches with pattern-matched responses.

    Usage:
        def test_drift(kapp_mocker):
            kapp_mocker.register("--diff-run", KappResponse(
                stdout="+ 1 resource created", returncode=3
            ))

            reconciler.read(spec, state)

            assert kapp_mocker.was_called_with("--diff-run")
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self._call_history: List[KappCall] = []
        self._default_response = KappResponse(
            stderr="Error: mock not configured for this command",
            returncode=1
        )

    def register(
        self,
        pattern: Union[str, Pattern],
        response: KappResponse,
        priority: int = 0
    ) -> "KappMocker":
        """
        Register a response for commands matching the pattern.

        Args:
            pattern: String (substring match) or regex pattern
            response: KappResponse to return when matched
            priority: Higher priority patterns are checked first

        Returns:
            self for chaining
        """
        self._responses.append((pattern, response, priority))
        self._responses.sort(key=lambda x: x[2], reverse=True)
        return self

    def set_default_response(self, response: KappResponse) -> "KappMocker":
        """Set the default response for unmatched commands."""
        self._default_response = response
        return self

    def mock_popen(self, cmd: List[str], **kwargs) -> FakePopen:
        """Mock implementation of subprocess.Popen for kapp/kbld."""
        cmd_str = " ".join(cmd)

        if cmd[0] not in MOCKED_TOOLS:
            raise RuntimeError(f"Unmocked command blocked: {cmd_str}")

        tool_args = " ".join(cmd[1:])
        matched_pattern = None
        response = self._default_response

        for pattern, resp, _ in self._responses:
            if isinstance(pattern, str):
                if pattern in tool_args:
                    matched_pattern = pattern
                    response = resp
                    break
            else:
                if pattern.search(tool_args):
                    matched_pattern = pattern.pattern
                    response = resp
                    break

        call = KappCall(
            command=cmd,
            full_command_str=cmd_str,
            matched_pattern=matched_pattern,
            response=response
        )
        self._call_history.append(call)

        if response.raises is not None:
            raise response.raises

        return FakePopen(call)

    @property
    def calls(self) -> List[KappCall]:
        """Get all tool calls made during the test."""
        return self._call_history

    @property
    def call_count(self) -> int:
        """Get the number of tool calls made."""
        return len(self._call_history)

    @property
    def last_call(self) -> KappCall:
        """Get the most recent tool call."""
        return self._call_history[-1]

    def was_called_with(self, pattern: str) -> bool:
        """Check if any call contained the given pattern."""
        return any(pattern in call.full_command_str for call in self._call_history)

    def get_calls_matching(self, pattern: str) -> List[KappCall]:
        """Get all calls containing the given pattern."""
        return [c for c in self._call_history if pattern in c.full_command_str]

    def reset(self):
        """Clear call history (but keep registered responses)."""
        self._call_history = []


@pytest.fixture
def kapp_mocker():
    """
    Fixture that provides a KappMocker with subprocess.Popen patched.

    Usage:
        def test_something(kapp_mocker):
            kapp_mocker.register("deploy", KappResponse(stdout="..."))
            # Your test code that runs kapp
            assert kapp_mocker.was_called_with("deploy")
    """
    mocker = KappMocker()
    with patch(
        "kappsync.modules.executor.runner.subprocess.Popen",
        side_effect=mocker.mock_popen,
    ):
        yield mocker


@pytest.fixture
def kapp_mocker_strict():
    """
    Strict mocker that fails on any unregistered command.

    Use this when you want to ensure all tool interactions are
    explicitly accounted for in your test.
    """
    mocker = KappMocker()
    mocker._default_response = KappResponse(
        stderr="STRICT MODE: No mock registered for this command",
        returncode=127
    )
    with patch(
        "kappsync.modules.executor.runner.subprocess.Popen",
        side_effect=mocker.mock_popen,
    ):
        yield mocker


# =============================================================================
# Spec Builders
# =============================================================================

@pytest.fixture
def app_spec():
    """Minimal app spec: app 'web' in namespace 'prod'."""
    return AppResourceSpec(app="web", namespace="prod")


@pytest.fixture
def make_app_spec():
    """Factory for app specs with overrides."""
    def _make(**overrides) -> AppResourceSpec:
        fields = {"app": "web", "namespace": "prod"}
        fields.update(overrides)
        return AppResourceSpec(**fields)
    return _make


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "kapp_mock: Tests using mocked kapp/kbld process launches"
    )
    config.addinivalue_line(
        "markers", "subprocess: Tests spawning real short-lived processes"
    )
