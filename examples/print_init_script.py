"""
Example: Build the init script for the bundled example config.

Usage:
    python examples/print_init_script.py
"""

from pathlib import Path

from afx.core.loader import load
from afx.core.normalizer import parse
from afx.core.resolver import resolve
from afx.core.script import build_script
from afx.core.validator import validate


def main():
    config = load([Path(__file__).parent / "afx.yaml"])
    pkgs = parse(config)
    validate(pkgs)

    resolution = resolve(pkgs)
    for fault in resolution.missing:
        print(f"# warning: {fault}")

    result = build_script(resolution.packages)
    print(result.script, end="")
    for fault in result.faults:
        print(f"# skipped: {fault}")


if __name__ == "__main__":
    main()
