"""
Exposes installed files as commands via symlinks.
"""

import logging
from pathlib import Path

from afx.core.errors import InstallError
from afx.models.package import LinkTarget, Package

logger = logging.getLogger(__name__)


def link_command(pkg: Package) -> list[LinkTarget]:
    """
    Create a symlink for every file matched by the command's links.

    Existing links or files at a target are replaced.

    Raises:
        InstallError: If links are declared but nothing matches, or a
            target is an existing directory.
    """
    command = pkg.command
    if command is None or not command.link:
        return []

    targets = command.resolve_links(pkg)
    if not targets:
        raise InstallError(pkg.name, "no files matched command.link")

    for link in targets:
        target = Path(link.target)
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.is_dir() and not target.is_symlink():
            raise InstallError(pkg.name, f"{target}: is a directory, cannot link")
        if target.is_symlink() or target.exists():
            target.unlink()
        target.symlink_to(link.source)
        logger.debug(f"{pkg.name}: linked {link.source} -> {target}")

    return targets
