"""
HTTP Installer — downloads a URL into the package home.
"""

from pathlib import Path

import httpx

from afx.core.resilience import ExponentialBackoff
from afx.installers.download import download, unpack
from afx.models.package import HTTP


class HTTPInstaller:
    def __init__(self, client: httpx.Client, backoff: ExponentialBackoff | None = None):
        self.client = client
        self.backoff = backoff

    def install(self, pkg: HTTP) -> None:
        home = Path(pkg.home)
        archive = download(self.client, pkg.name, pkg.url, home / pkg.filename, self.backoff)
        unpack(pkg.name, archive, home)
