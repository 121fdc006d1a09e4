"""
Dependency Resolver — orders packages so dependencies come first.

The name table keeps insertion order, and the depth-first walk visits
packages and their ``depends-on`` entries in declaration order, so the
same input always produces the same ordering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from afx.core.errors import CycleError, MissingDependencyError
from afx.models.package import Package

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissingDependency:
    """A depends-on entry naming no known package."""

    package: str
    dependency: str

    def __str__(self) -> str:
        return f"{self.dependency!r}: not valid package name in depends-on: {self.package}"


@dataclass
class Resolution:
    """Topologically ordered packages plus non-fatal missing dependencies."""

    packages: list[Package]
    missing: list[MissingDependency] = field(default_factory=list)

    def raise_for_missing(self) -> None:
        if self.missing:
            raise MissingDependencyError(self.missing, resolution=self)


def resolve(given: list[Package]) -> Resolution:
    """
    Order packages by their dependencies.

    Missing dependencies are collected for every package and returned with
    a best-effort ordering; they add no edges to the graph.

    Raises:
        CycleError: If the dependency graph has a cycle.
    """
    table: dict[str, Package] = {}
    for pkg in given:
        table[pkg.name] = pkg

    missing = [
        MissingDependency(package=pkg.name, dependency=dep)
        for pkg in table.values()
        for dep in pkg.depends_on
        if dep not in table
    ]

    if any(pkg.depends_on for pkg in table.values()):
        graph = "\n".join(f"{name} -> {', '.join(pkg.depends_on)}" for name, pkg in table.items())
        logger.debug(f"dependency graph is here: \n{graph}")

    visiting: list[str] = []
    visited: set[str] = set()
    order: list[str] = []

    for root in table:
        if root in visited:
            continue
        # Each frame is (name, iterator over its remaining dependencies).
        visiting.append(root)
        stack = [(root, iter(table[root].depends_on))]
        while stack:
            name, deps = stack[-1]
            dep = next((d for d in deps if d in table and d not in visited), None)
            if dep is None:
                stack.pop()
                visiting.pop()
                visited.add(name)
                order.append(name)
                continue
            if dep in visiting:
                cycle = visiting[visiting.index(dep):] + [dep]
                raise CycleError(cycle, missing=missing)
            visiting.append(dep)
            stack.append((dep, iter(table[dep].depends_on)))

    return Resolution(packages=[table[name] for name in order], missing=missing)


def sort(given: list[Package]) -> list[Package]:
    """
    Order packages by their dependencies.

    Raises:
        CycleError: If the dependency graph has a cycle.
        MissingDependencyError: If depends-on names an unknown package; the
            best-effort ordering is available on ``error.resolution``.
    """
    resolution = resolve(given)
    resolution.raise_for_missing()
    return resolution.packages
