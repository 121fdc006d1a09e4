"""
Local packages are never fetched, only checked.
"""

import os

from afx.core.errors import InstallError
from afx.models.package import Local


class LocalInstaller:
    def install(self, pkg: Local) -> None:
        if not os.path.isdir(pkg.home):
            raise InstallError(pkg.name, f"{pkg.home}: no such directory")
