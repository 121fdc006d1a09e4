"""
Git helpers shared by the GitHub and Gist installers.
"""

import logging
import subprocess
from pathlib import Path

from afx.core.errors import InstallError

logger = logging.getLogger(__name__)


def clone(name: str, url: str, dest: str, branch: str = "") -> None:
    """Shallow-clone ``url`` into ``dest``."""
    cmd = ["git", "clone", "--depth", "1"]
    if branch:
        cmd += ["--branch", branch]
    cmd += [url, dest]

    Path(dest).parent.mkdir(parents=True, exist_ok=True)
    logger.debug(f"[git] {' '.join(cmd)}")
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise InstallError(name, "git command not found") from e
    except subprocess.CalledProcessError as e:
        raise InstallError(name, f"git clone failed: {e.stderr.strip()}") from e
    logger.info(f"[git] Cloned {url}")
