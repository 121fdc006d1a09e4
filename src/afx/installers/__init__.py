"""Installers for each package variant."""

import httpx

from afx.core.errors import InstallError
from afx.installers.base import Installer
from afx.installers.gist import GistInstaller
from afx.installers.github import GitHubInstaller
from afx.installers.http import HTTPInstaller
from afx.installers.links import link_command
from afx.installers.local import LocalInstaller
from afx.models.package import Package


def get_installer(pkg: Package, client: httpx.Client, token: str | None = None) -> Installer:
    """Factory function to create an installer for a package's kind."""
    match pkg.kind:
        case "github":
            return GitHubInstaller(client=client, token=token)
        case "gist":
            return GistInstaller()
        case "local":
            return LocalInstaller()
        case "http":
            return HTTPInstaller(client=client)
        case _:
            raise InstallError(pkg.name, f"unknown package kind: {pkg.kind!r}")


def install(pkg: Package, client: httpx.Client, token: str | None = None) -> None:
    """Fetch a package, then link its commands."""
    get_installer(pkg, client, token).install(pkg)
    link_command(pkg)


__all__ = [
    "Installer",
    "GitHubInstaller",
    "GistInstaller",
    "LocalInstaller",
    "HTTPInstaller",
    "get_installer",
    "install",
    "link_command",
]
