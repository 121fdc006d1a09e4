"""
Duplicate Validator.
"""

from afx.core.errors import DuplicateNameError
from afx.models.package import Package


def validate(pkgs: list[Package]) -> None:
    """
    Check that no two packages share a name.

    Every occurrence beyond the first is reported, so three packages named
    ``foo`` yield ``foo`` twice.

    Raises:
        DuplicateNameError: If any name repeats.
    """
    seen: set[str] = set()
    duplicates: list[str] = []

    for pkg in pkgs:
        if pkg.name in seen:
            duplicates.append(pkg.name)
            continue
        seen.add(pkg.name)

    if duplicates:
        raise DuplicateNameError(duplicates)
