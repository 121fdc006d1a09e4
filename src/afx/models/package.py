"""
Package Model — the four package variants and their shared blocks.

Every variant (GitHub, Gist, Local, HTTP) is decoded from YAML into a
pydantic model that rejects unknown fields. Resolver, compiler and CLI
only rely on the structural ``Package`` protocol; installation
dispatches on the ``kind`` tag.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar, Protocol, runtime_checkable
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field

from afx.core.pathglob import expand, glob, is_archive, join_home


def afx_root() -> str:
    """Directory where fetched packages are materialized."""
    return expand(os.environ.get("AFX_ROOT") or "~/.afx")


def bin_dir() -> str:
    """Directory where command links are created."""
    return expand(os.environ.get("AFX_BIN") or "~/bin")


class Schema(BaseModel):
    """Strict base for every YAML-backed block."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, coerce_numbers_to_str=True)


class Link(Schema):
    from_: str = Field(alias="from")
    to: str = ""


@dataclass(frozen=True)
class LinkTarget:
    """A concrete link: an installed file and where it is exposed."""

    source: str
    target: str


class Release(Schema):
    name: str
    tag: str = ""


class Command(Schema):
    """How installed artifacts are exposed as commands."""

    link: list[Link] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    alias: dict[str, str] = Field(default_factory=dict)
    snippet: str = ""
    if_: str = Field(default="", alias="if")

    def effective_links(self) -> list[Link]:
        """Declared links with ``~`` and ``$VARS`` expanded; empty patterns dropped."""
        links = []
        for link in self.link:
            source = expand(link.from_)
            if not source:
                continue
            links.append(Link(from_=source, to=expand(link.to)))
        return links

    def resolve_links(self, pkg: Package) -> list[LinkTarget]:
        """
        Glob each link pattern under the package home.

        Archives are skipped: a downloaded asset stays beside its unpacked
        contents and is not a command.
        """
        targets = []
        for link in self.effective_links():
            for match in glob(join_home(pkg.home, link.from_)):
                if is_archive(match):
                    continue
                target = link.to or os.path.basename(match)
                targets.append(LinkTarget(source=match, target=join_home(bin_dir(), target)))
        return targets

    def installed(self, pkg: Package) -> bool:
        if not self.link:
            return True
        targets = self.resolve_links(pkg)
        return bool(targets) and all(os.path.lexists(t.target) for t in targets)


class Plugin(Schema):
    """How installed files contribute to shell initialization."""

    sources: list[str] = Field(min_length=1)
    env: dict[str, str] = Field(default_factory=dict)
    snippet: str = ""
    snippet_prepare: str = Field(default="", alias="snippet-prepare")
    if_: str = Field(default="", alias="if")

    def installed(self, pkg: Package) -> bool:
        """True only if every source pattern has at least one match."""
        for source in self.sources:
            if not glob(join_home(pkg.home, expand(source))):
                return False
        return True

    def get_sources(self, pkg: Package) -> list[str]:
        """Existing files matched by the source patterns, in first-seen order."""
        seen: set[str] = set()
        sources = []
        for source in self.sources:
            for path in glob(join_home(pkg.home, expand(source))):
                if path in seen or not os.path.exists(path):
                    continue
                seen.add(path)
                sources.append(path)
        return sources


@runtime_checkable
class Package(Protocol):
    """Capabilities shared by every package variant."""

    kind: ClassVar[str]
    name: str
    depends_on: list[str]
    plugin: Plugin | None
    command: Command | None

    @property
    def home(self) -> str: ...

    def installed(self) -> bool: ...


class PackageFields(Schema):
    """Fields every variant declares in YAML."""

    name: str
    description: str = ""
    depends_on: list[str] = Field(default_factory=list, alias="depends-on")
    plugin: Plugin | None = None
    command: Command | None = None

    def _artifacts_installed(self) -> bool:
        if self.plugin is not None and not self.plugin.installed(self):
            return False
        if self.command is not None and not self.command.installed(self):
            return False
        return True


class GitHub(PackageFields):
    kind: ClassVar[str] = "github"

    owner: str
    repo: str
    branch: str = ""
    release: Release | None = None

    @property
    def home(self) -> str:
        return os.path.join(afx_root(), "github.com", self.owner, self.repo)

    @property
    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"

    def installed(self) -> bool:
        return os.path.isdir(self.home) and self._artifacts_installed()


class Gist(PackageFields):
    kind: ClassVar[str] = "gist"

    owner: str
    id: str

    @property
    def home(self) -> str:
        return os.path.join(afx_root(), "gist.github.com", self.owner, self.id)

    @property
    def url(self) -> str:
        return f"https://gist.github.com/{self.owner}/{self.id}.git"

    def installed(self) -> bool:
        return os.path.isdir(self.home) and self._artifacts_installed()


class Local(PackageFields):
    kind: ClassVar[str] = "local"

    directory: str

    @property
    def home(self) -> str:
        return expand(self.directory)

    def installed(self) -> bool:
        return os.path.isdir(self.home) and self._artifacts_installed()


class HTTP(PackageFields):
    kind: ClassVar[str] = "http"

    url: str

    @property
    def home(self) -> str:
        parsed = urlparse(self.url)
        return os.path.join(afx_root(), parsed.netloc, os.path.dirname(parsed.path).lstrip("/"))

    @property
    def filename(self) -> str:
        return os.path.basename(urlparse(self.url).path) or self.name

    def installed(self) -> bool:
        return os.path.isdir(self.home) and self._artifacts_installed()
