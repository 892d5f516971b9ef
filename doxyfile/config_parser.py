"""
config_parser.py

Responsibility: Load Doxyfile field values from a YAML file into a typed model.

Expected YAML keys (all optional):
- version, commit_number: scalars, rendered as text
- use_mdfile_as_mainpage: path of the markdown file used as the main page
- input, example_path, strip_from_path: a list of paths, or a single path

The renderer and CLI treat the parsed result as the single source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    pass


SCALAR_FIELDS = ("commit_number", "version", "use_mdfile_as_mainpage")
PATH_FIELDS = ("input", "example_path", "strip_from_path")


@dataclass(frozen=True)
class DoxyfileConfig:
    """Field values applied to a `RenderContext`."""

    commit_number: str = ""
    version: str = ""
    use_mdfile_as_mainpage: str | None = None
    input: tuple[str, ...] = ()
    example_path: tuple[str, ...] = ()
    strip_from_path: tuple[str, ...] = ()

    def merged(self, **overrides: Any) -> DoxyfileConfig:
        """
        Return a copy with every override that is not None applied.
        Path overrides replace the whole list.
        """
        changes: dict[str, Any] = {}
        for name, value in overrides.items():
            if value is None:
                continue
            if name in PATH_FIELDS:
                changes[name] = _as_paths(name, value)
            elif name in SCALAR_FIELDS:
                changes[name] = str(value)
            else:
                raise ConfigError(f"Unknown Doxyfile field: {name}")
        return replace(self, **changes)


def _as_paths(key: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"`{key}` must be a path or a list of paths.")
    out: list[str] = []
    for item in value:
        if isinstance(item, (dict, list, tuple)) or item is None:
            raise ConfigError(f"`{key}` entries must be plain paths, got: {item!r}")
        out.append(str(item))
    return tuple(out)


def _as_scalar(key: str, value: Any) -> str:
    if isinstance(value, (dict, list, tuple)):
        raise ConfigError(f"`{key}` must be a scalar value.")
    return str(value)


def parse_config(data: dict[str, Any] | None) -> DoxyfileConfig:
    """
    Validate a mapping of field values and build a `DoxyfileConfig`.
    """
    if data is None:
        return DoxyfileConfig()
    if not isinstance(data, dict):
        raise ConfigError("Doxyfile config must be a mapping/object at the top level.")

    known = {f.name for f in fields(DoxyfileConfig)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ConfigError(f"Unknown Doxyfile field(s): {', '.join(unknown)}")

    commit_number = data.get("commit_number")
    version = data.get("version")
    mainpage = data.get("use_mdfile_as_mainpage")

    return DoxyfileConfig(
        commit_number="" if commit_number is None else _as_scalar("commit_number", commit_number),
        version="" if version is None else _as_scalar("version", version),
        use_mdfile_as_mainpage=None if mainpage is None else _as_scalar("use_mdfile_as_mainpage", mainpage),
        input=_as_paths("input", data.get("input")),
        example_path=_as_paths("example_path", data.get("example_path")),
        strip_from_path=_as_paths("strip_from_path", data.get("strip_from_path")),
    )


def load_config(config_path: str | Path) -> DoxyfileConfig:
    """
    Parse a YAML config file into a `DoxyfileConfig`.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed reading config file: {path}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e

    return parse_config(data)
