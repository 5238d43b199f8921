"""Configuration loading utilities.

Reads the YAML config file, substitutes ${VAR} references from the
environment, and validates the result. Allowed directories given on the
command line are merged in by the CLI after loading.
"""

import os
import re
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import yaml

from fsgate.core.config.models import Config

_ENV_REF = re.compile(r"\$\{([^}]+)\}")


def _map_strings(obj: Any, fn: Callable[[str], str]) -> Any:
    """Apply ``fn`` to every string inside nested dicts and lists."""
    if isinstance(obj, dict):
        return {key: _map_strings(value, fn) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_map_strings(item, fn) for item in obj]
    if isinstance(obj, str):
        return fn(obj)
    return obj


def _iter_strings(obj: Any) -> Iterator[str]:
    """Yield every string inside nested dicts and lists."""
    if isinstance(obj, dict):
        obj = list(obj.values())
    if isinstance(obj, list):
        for item in obj:
            yield from _iter_strings(item)
    elif isinstance(obj, str):
        yield obj


def expand_env_vars(value: str) -> str:
    """Substitute ${NAME} references in ``value`` from os.environ.

    Unknown names are left as written so that check_unexpanded_vars can
    report them.

    Examples:
        >>> os.environ['DATA_ROOT'] = '/srv/data'
        >>> expand_env_vars('${DATA_ROOT}/notes')
        '/srv/data/notes'
    """
    return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)


def expand_env_vars_recursive(obj: Any) -> Any:
    """Substitute ${NAME} references in every string of a parsed YAML document."""
    return _map_strings(obj, expand_env_vars)


def check_unexpanded_vars(data: Any, source: str) -> None:
    """Fail if any ${NAME} reference survived expansion.

    Args:
        data: Expanded configuration data.
        source: Label used in the error message, usually the file path.

    Raises:
        ValueError: Listing every unresolved reference, sorted and de-duplicated.
    """
    unresolved = {
        f"${{{name}}}" for text in _iter_strings(data) for name in _ENV_REF.findall(text)
    }
    if unresolved:
        raise ValueError(
            f"Unresolved environment variable(s) in {source}: {', '.join(sorted(unresolved))}. "
            f"Set these variables or remove the ${{VAR}} references."
        )


def load_config(path: Path | str) -> Config:
    """Load configuration from a YAML file with environment variable expansion.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Parsed Config object with all ${VAR} patterns expanded.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If a ${VAR} reference cannot be resolved or validation fails.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open() as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    data = expand_env_vars_recursive(data)
    check_unexpanded_vars(data, source=str(config_path))

    return Config(**data)
