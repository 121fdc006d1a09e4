"""
Error kinds raised across afx.

Fatal errors (configuration, duplicates, dependency graph) derive from
AfxError and stop the run. PackageFault covers problems that only affect
one package while compiling the init script.
"""

from __future__ import annotations


class AfxError(Exception):
    """Base class for afx errors."""


class ConfigError(AfxError):
    """Raised when configuration cannot be found or read."""


class SchemaError(ConfigError):
    """Raised when a configuration document does not match the schema."""

    def __init__(self, path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class DuplicateNameError(AfxError):
    """Raised when several packages share one name."""

    def __init__(self, names: list[str]):
        super().__init__(f"duplicated packages: [{','.join(names)}]")
        self.names = names


class MissingDependencyError(AfxError):
    """Raised when depends-on references packages that are not defined."""

    def __init__(self, missing: list, resolution=None):
        lines = "\n".join(f"  {fault}" for fault in missing)
        super().__init__(f"{len(missing)} error(s) occurred:\n{lines}")
        self.missing = missing
        self.resolution = resolution


class CycleError(AfxError):
    """Raised when the dependency graph contains a cycle."""

    def __init__(self, cycle: list[str], missing: list | None = None):
        super().__init__(
            f"failed to resolve dependency graph: circular dependency: {' -> '.join(cycle)}"
        )
        self.cycle = cycle
        self.missing = missing or []


class InstallError(AfxError):
    """Raised when a package cannot be installed."""

    def __init__(self, package: str, message: str):
        super().__init__(f"{package}: {message}")
        self.package = package


class PackageFault(AfxError):
    """A per-package failure while compiling the init script."""

    def __init__(self, package: str, message: str):
        super().__init__(f"{package}: {message}")
        self.package = package


class NotInstalledFault(PackageFault):
    def __init__(self, package: str):
        super().__init__(package, "package is not installed, so skip to init")


class GateFailedFault(PackageFault):
    def __init__(self, package: str, condition: str):
        super().__init__(package, f"failed to run if condition: {condition!r}")
        self.condition = condition


class NoSourceFilesFault(PackageFault):
    def __init__(self, package: str):
        super().__init__(package, "no source files")
