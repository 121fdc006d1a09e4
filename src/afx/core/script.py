"""
Concatenates per-package init fragments into one script.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from afx.core.errors import PackageFault
from afx.core.gate import GateRunner
from afx.core.plugin import init_command, init_plugin
from afx.models.package import Package

logger = logging.getLogger(__name__)


@dataclass
class ScriptResult:
    """Generated shell script and the packages that were skipped."""

    script: str
    faults: list[PackageFault] = field(default_factory=list)


def build_script(pkgs: list[Package], gate: GateRunner | None = None) -> ScriptResult:
    """
    Compile every package in the given (already resolved) order.

    A faulty package contributes nothing; the rest are still compiled.
    """
    fragments = []
    faults = []

    for pkg in pkgs:
        try:
            fragment = init_plugin(pkg, gate) + init_command(pkg, gate)
        except PackageFault as e:
            logger.warning(str(e))
            faults.append(e)
            continue
        fragments.append(fragment)

    return ScriptResult(script="".join(fragments), faults=faults)
