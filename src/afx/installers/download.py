"""
Download and unpack helpers used by the GitHub release and HTTP installers.
"""

from __future__ import annotations

import logging
import os
import stat
import tarfile
import zipfile
from pathlib import Path

import httpx

from afx.core.errors import InstallError
from afx.core.pathglob import TAR_SUFFIXES
from afx.core.resilience import ExponentialBackoff, retry

logger = logging.getLogger(__name__)


def download(
    client: httpx.Client,
    name: str,
    url: str,
    dest: Path,
    backoff: ExponentialBackoff | None = None,
) -> Path:
    """
    Stream ``url`` into ``dest``, retrying transport errors.

    Raises:
        InstallError: On a non-2xx response or when retries are exhausted.
    """
    backoff = backoff or ExponentialBackoff()
    dest.parent.mkdir(parents=True, exist_ok=True)

    def fetch() -> None:
        with client.stream("GET", url) as resp:
            resp.raise_for_status()
            with open(dest, "wb") as f:
                for chunk in resp.iter_bytes():
                    f.write(chunk)

    try:
        retry(fetch, backoff, retry_on=(httpx.TransportError,))
    except httpx.HTTPStatusError as e:
        raise InstallError(name, f"failed to download {url}: HTTP {e.response.status_code}") from e
    except httpx.TransportError as e:
        raise InstallError(name, f"failed to download {url}: {e}") from e

    logger.debug(f"[download] Saved {url} to {dest}")
    return dest


def unpack(name: str, archive: Path, dest: Path) -> None:
    """
    Extract a tar or zip archive into ``dest``.

    Files that are not archives are made executable instead.
    """
    filename = archive.name
    try:
        if filename.endswith(".zip"):
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(dest)
        elif filename.endswith(TAR_SUFFIXES):
            with tarfile.open(archive) as tf:
                tf.extractall(dest, filter="data")
        else:
            mode = os.stat(archive).st_mode
            os.chmod(archive, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            return
    except (tarfile.TarError, zipfile.BadZipFile) as e:
        raise InstallError(name, f"failed to unpack {archive}: {e}") from e

    logger.debug(f"[download] Unpacked {archive} into {dest}")
