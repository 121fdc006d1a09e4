"""
afx - Declarative package manager for shell environments.

Reads packages (GitHub, Gist, local directories, HTTP URLs) from YAML,
orders them by their dependencies, installs what is missing, and emits
a shell-sourceable initialization script.
"""

__version__ = "1.0.0"


def __getattr__(name: str):
    """Lazy import for heavy dependencies."""
    if name == "load":
        from afx.core.loader import load

        return load
    if name == "build_script":
        from afx.core.script import build_script

        return build_script
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["load", "build_script", "__version__"]
