"""
GitHub Installer — clones a repository or fetches a release asset.

Release lookups go through PyGithub; the asset itself is downloaded
with the shared httpx client.
"""

import logging
import os
from pathlib import Path

import httpx
from github import Auth, Github, GithubException

from afx.core.errors import InstallError
from afx.core.resilience import ExponentialBackoff
from afx.installers.download import download, unpack
from afx.installers.git import clone
from afx.models.package import GitHub

logger = logging.getLogger(__name__)


class GitHubInstaller:
    def __init__(
        self,
        client: httpx.Client,
        token: str | None = None,
        gh: Github | None = None,
        backoff: ExponentialBackoff | None = None,
    ):
        self.client = client
        self.token = token or os.environ.get("GITHUB_TOKEN")
        self.backoff = backoff
        self._gh = gh

    @property
    def gh(self) -> Github:
        if self._gh is None:
            if self.token:
                self._gh = Github(auth=Auth.Token(self.token))
            else:
                logger.warning("No GITHUB_TOKEN. Release lookups will be rate-limited.")
                self._gh = Github()
        return self._gh

    def install(self, pkg: GitHub) -> None:
        if pkg.release is None:
            clone(pkg.name, pkg.url, pkg.home, branch=pkg.branch)
            return
        self._install_release(pkg)

    def _install_release(self, pkg: GitHub) -> None:
        """Download the asset named by the release block and unpack it."""
        release_name, tag = pkg.release.name, pkg.release.tag
        try:
            repo = self.gh.get_repo(f"{pkg.owner}/{pkg.repo}")
            release = repo.get_release(tag) if tag else repo.get_latest_release()
            assets = list(release.get_assets())
        except GithubException as e:
            raise InstallError(pkg.name, f"failed to get release {tag or 'latest'}: {e}") from e

        asset = next((a for a in assets if a.name == release_name), None)
        if asset is None:
            found = ", ".join(a.name for a in assets) or "none"
            raise InstallError(
                pkg.name, f"asset {release_name!r} not found in release (found: {found})"
            )

        logger.info(f"[GitHub] Downloading {release_name} from {pkg.owner}/{pkg.repo}")
        home = Path(pkg.home)
        archive = download(
            self.client, pkg.name, asset.browser_download_url, home / asset.name, self.backoff
        )
        unpack(pkg.name, archive, home)
