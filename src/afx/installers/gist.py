"""
Gist packages are shallow clones of the gist repository.
"""

from afx.installers.git import clone
from afx.models.package import Gist


class GistInstaller:
    def install(self, pkg: Gist) -> None:
        clone(pkg.name, pkg.url, pkg.home)
