"""
Configuration loader — finds YAML files and decodes them into Config.

Decoding is strict: duplicate mapping keys are rejected by the YAML
loader and unknown fields are rejected by the pydantic models.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from afx.core.errors import ConfigError, SchemaError
from afx.core.pathglob import expand
from afx.models.config import Config, merge_app_config

logger = logging.getLogger(__name__)

YAML_EXTENSIONS = (".yaml", ".yml")


class UniqueKeyLoader(yaml.SafeLoader):
    """
    YAML loader that raises on duplicate keys.

    Merge keys (``<<: *anchor``) are supported. Keys written in the mapping
    itself override inherited ones, and only written keys must be unique.
    """


MERGE_TAG = "tag:yaml.org,2002:merge"


def _construct_mapping(loader: yaml.SafeLoader, node: yaml.Node, deep: bool = False):
    written = sum(1 for key_node, _ in node.value if key_node.tag != MERGE_TAG)
    loader.flatten_mapping(node)
    # flatten_mapping puts inherited pairs first.
    inherited = len(node.value) - written

    mapping = {}
    seen = set()
    for index, (key_node, value_node) in enumerate(node.value):
        key = loader.construct_object(key_node, deep=deep)
        if index >= inherited:
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    None, None, f"duplicate key: {key!r}", key_node.start_mark
                )
            seen.add(key)
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_mapping)


def default_config_path() -> Path:
    return Path(expand(os.environ.get("AFX_CONFIG_PATH") or "~/.config/afx"))


def walk_dir(path: Path) -> list[Path]:
    """
    Collect YAML files from a file or directory path.

    Args:
        path: A directory (walked recursively) or a single file.

    Returns:
        Paths of all ``.yaml``/``.yml`` files, sorted for a stable order.

    Raises:
        ConfigError: If the path does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"{path}: no such file or directory")

    if path.is_dir():
        return sorted(p for p in path.rglob("*") if p.is_file() and p.suffix in YAML_EXTENSIONS)

    if path.suffix in YAML_EXTENSIONS:
        return [path]

    logger.warning(f"{path}: found but cannot be loaded. yaml is only allowed")
    return []


def read(path: Path) -> Config:
    """Read and strictly decode one YAML file."""
    logger.info(f"Reading config {path}...")

    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.load(raw, Loader=UniqueKeyLoader)
    except yaml.YAMLError as e:
        raise SchemaError(path, f"invalid YAML: {e}") from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise SchemaError(path, f"expected a YAML mapping, got {type(data).__name__}")

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise SchemaError(path, str(e)) from e


def load(paths: list[Path] | None = None) -> Config:
    """
    Discover, read and merge configuration files.

    Args:
        paths: Files or directories to load. Defaults to the config directory
            (``$AFX_CONFIG_PATH`` or ``~/.config/afx``).

    Returns:
        One Config with all package lists concatenated in file order and
        the app config merged over the defaults.
    """
    if not paths:
        paths = [default_config_path()]

    merged = Config()
    for path in paths:
        for file in walk_dir(path):
            merged.extend(read(file))

    merged.app_config = merge_app_config(merged.app_config)
    return merged
