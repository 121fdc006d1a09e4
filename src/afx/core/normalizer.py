"""
Flattens the variant lists of a Config into one package sequence.
"""

import logging

from afx.models.config import Config
from afx.models.package import Command, GitHub, Link, Package

logger = logging.getLogger(__name__)


def complete_release_links(pkg: GitHub) -> None:
    """
    Give a GitHub release package a default link to its asset.

    Applies when the package has a release block and no command block, or
    a command block whose effective link list is empty. Running it again
    on the same package is a no-op.
    """
    if pkg.release is None:
        return
    if pkg.command is not None and pkg.command.effective_links():
        return

    default_links = [Link(from_=f"**/{pkg.release.name}")]
    logger.debug(
        f"{pkg.name}: added '**/{pkg.release.name}' to link.from "
        "to complete missing links in github release"
    )
    if pkg.command is None:
        pkg.command = Command(link=default_links)
    else:
        pkg.command.link = default_links


def parse(config: Config) -> list[Package]:
    """Concatenate GitHub, Gist, Local and HTTP packages, in that order."""
    logger.info("Parsing config...")
    pkgs: list[Package] = []

    for pkg in config.github:
        complete_release_links(pkg)
        pkgs.append(pkg)

    pkgs.extend(config.gist)
    pkgs.extend(config.local)
    pkgs.extend(config.http)
    return pkgs
