"""
TOML-based config file loading for the multiglob CLI.

Searches for `.multiglob.toml`, `multiglob.toml`, or `pyproject.toml [tool.multiglob]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)


@dataclass
class MultiglobConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    ignore_case: bool | None = None
    entry_type: str | None = None
    exclude: list[str] | None = None
    respect_ignore_file: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".multiglob.toml", "multiglob.toml", "pyproject.toml"]

# TOML keys that don't map to a field name by simply replacing dashes
_KEY_ALIASES: dict[str, str] = {
    "type": "entry_type",
}

_VALID_FIELDS = {f.name for f in fields(MultiglobConfig)}

# Tables whose keys merge into the top level
_SECTIONS = frozenset({"matching", "listing"})

ENTRY_TYPES = ("any", "file", "dir")


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.multiglob.toml` >
    `multiglob.toml` > `pyproject.toml` (only if it has `[tool.multiglob]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_multiglob_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_multiglob_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "multiglob" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> MultiglobConfig:
    """
    Load a `MultiglobConfig` from a TOML file, either standalone or the
    `[tool.multiglob]` table of a `pyproject.toml`. Kebab-case keys are mapped
    to snake_case. Unknown keys and malformed files are logged and ignored.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        log.warning("Ignoring malformed config file %s: %s", config_path, e)
        return MultiglobConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("multiglob", {})

    return _parse_config_data(data)


def _check_value(key: str, field_name: str, value: Any) -> tuple[bool, Any]:
    """Return `(ok, value)`, coercing a bare string `exclude` to a one-item list."""
    if field_name in ("ignore_case", "respect_ignore_file"):
        if isinstance(value, bool):
            return True, value
        log.warning("Ignoring config key %s: expected true or false, got %r", key, value)
        return False, None
    if field_name == "entry_type":
        if value in ENTRY_TYPES:
            return True, value
        log.warning(
            "Ignoring config key %s: expected one of %s, got %r",
            key,
            ", ".join(ENTRY_TYPES),
            value,
        )
        return False, None
    if field_name == "exclude":
        if isinstance(value, str):
            return True, [value]
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return True, cast(list[str], value)
        log.warning("Ignoring config key %s: expected a list of patterns, got %r", key, value)
        return False, None
    return True, value


def _parse_config_data(data: dict[str, Any]) -> MultiglobConfig:
    # The [matching] and [listing] sections merge into the top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            if key not in _SECTIONS:
                log.warning("Ignoring unrecognized config section: %s", key)
                continue
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEY_ALIASES.get(key, key.replace("-", "_"))
        if snake_key not in _VALID_FIELDS:
            log.warning("Ignoring unrecognized config key: %s", key)
            continue
        ok, checked = _check_value(key, snake_key, value)
        if ok:
            mapped[snake_key] = checked

    return MultiglobConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T, config: MultiglobConfig | None, explicit_flags: set[str]
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(MultiglobConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
