"""
Plugin Compiler — turns one package's plugin block into shell text.

Each package goes through Start (installed check), GateCheck (``if``),
SourceResolve and Emit. A fault at any step raises a PackageFault and
nothing is emitted for that package.
"""

from __future__ import annotations

import logging
import os
import subprocess

from afx.core.errors import GateFailedFault, NoSourceFilesFault, NotInstalledFault
from afx.core.gate import GateRunner, ShellGate
from afx.models.package import Package

logger = logging.getLogger(__name__)


def quote(value: str) -> str:
    """Double-quote a value for the shell, escaping backslashes and quotes."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def export_lines(env: dict[str, str]) -> list[str]:
    """
    Render environment exports in declaration order.

    PATH is never overwritten: its value is appended to the current PATH.
    """
    lines = []
    for key, value in env.items():
        value = os.path.expanduser(value)
        if key == "PATH":
            lines.append(f"export PATH=$PATH:{value}")
        else:
            lines.append(f"export {key}={quote(value)}")
    return lines


def check_gate(pkg: Package, condition: str, gate: GateRunner | None = None) -> None:
    """
    Run an ``if`` condition; an empty condition always passes.

    Raises:
        GateFailedFault: If the condition exits non-zero or cannot run.
    """
    if not condition:
        return

    gate = gate or ShellGate()
    try:
        code = gate(condition)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"{pkg.name}: if condition could not be run: {e}")
        raise GateFailedFault(pkg.name, condition) from e

    if code != 0:
        logger.error(f"{pkg.name}: if condition returns not zero, so stopped to init package")
        raise GateFailedFault(pkg.name, condition) from subprocess.CalledProcessError(code, condition)


def init_plugin(pkg: Package, gate: GateRunner | None = None) -> str:
    """
    Compile the plugin block of an installed package.

    Output order: snippet-prepare, one ``source`` line per resolved file,
    env exports, snippet.

    Raises:
        NotInstalledFault: The package or its plugin sources are missing.
        GateFailedFault: The ``if`` condition failed.
        NoSourceFilesFault: No source pattern resolved to an existing file.
    """
    plugin = pkg.plugin
    if plugin is None:
        return ""

    if not pkg.installed() or not plugin.installed(pkg):
        raise NotInstalledFault(pkg.name)

    check_gate(pkg, plugin.if_, gate)

    lines = []
    if plugin.snippet_prepare:
        lines.append(plugin.snippet_prepare.rstrip("\n"))

    sources = plugin.get_sources(pkg)
    if not sources:
        raise NoSourceFilesFault(pkg.name)
    lines.extend(f"source {src}" for src in sources)

    lines.extend(export_lines(plugin.env))

    if plugin.snippet:
        lines.append(plugin.snippet.rstrip("\n"))

    return "".join(f"{line}\n" for line in lines)


def init_command(pkg: Package, gate: GateRunner | None = None) -> str:
    """
    Compile the command block: env exports, aliases, then snippet.

    Raises:
        NotInstalledFault: The package is not installed.
        GateFailedFault: The ``if`` condition failed.
    """
    command = pkg.command
    if command is None:
        return ""

    if not pkg.installed():
        raise NotInstalledFault(pkg.name)

    check_gate(pkg, command.if_, gate)

    lines = export_lines(command.env)
    lines.extend(f"alias {name}={quote(value)}" for name, value in command.alias.items())
    if command.snippet:
        lines.append(command.snippet.rstrip("\n"))

    return "".join(f"{line}\n" for line in lines)
