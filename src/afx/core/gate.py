"""
Executes ``if`` conditions in a shell.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "bash"


@runtime_checkable
class GateRunner(Protocol):
    """Runs a shell condition and returns its exit code."""

    def __call__(self, command: str) -> int: ...


def shell_name() -> str:
    """Shell used for conditions: ``$AFX_SHELL``, or bash when unset or empty."""
    return os.environ.get("AFX_SHELL") or DEFAULT_SHELL


class ShellGate:
    """
    Runs conditions as ``<shell> -c <command>`` and waits for the child.

    Raises ``subprocess.TimeoutExpired`` when a timeout is set and exceeded,
    and ``OSError`` when the shell cannot be started.
    """

    def __init__(self, shell: str | None = None, timeout: float | None = None):
        self.shell = shell or shell_name()
        self.timeout = timeout

    def __call__(self, command: str) -> int:
        logger.debug(f"Running condition with {self.shell}: {command}")
        proc = subprocess.run(
            [self.shell, "-c", command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=self.timeout,
        )
        return proc.returncode
