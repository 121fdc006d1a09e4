"""
Installer Protocol — Base interface for all package installers.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from afx.models.package import Package


@runtime_checkable
class Installer(Protocol):
    """
    Protocol that all installers must implement.

    Installers materialize a package's files under its home directory.
    Linking commands is done afterwards, independently of the variant.
    """

    def install(self, pkg: Package) -> None:
        """Fetch the package into ``pkg.home``. Raises InstallError on failure."""
        ...
