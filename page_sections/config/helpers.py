"""Utility helpers shared by the builder configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from page_sections.errors import BuilderConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required_str(payload: typ.Mapping[str, typ.Any], key: str, default: str) -> str:
    """Return ``payload[key]`` as a non-empty string, or ``default`` when absent."""
    if key not in payload:
        return default
    value = _optional_str(payload[key])
    if value is None:
        msg = f"Builder setting '{key}' must not be empty."
        raise BuilderConfigError(msg)
    return value


def _string_list(value: object, key: str) -> list[str]:
    """Normalize a YAML sequence (or a single string) into non-empty strings."""
    match value:
        case str() as text:
            items: list[object] = [text]
        case list() | tuple():
            items = list(value)
        case _:
            msg = f"Builder setting '{key}' must be a list of strings."
            raise BuilderConfigError(msg)
    normalized: list[str] = []
    for item in items:
        text = _optional_str(item)
        if text:
            normalized.append(text)
    return normalized


def _optional_path(value: object | None, base_dir: Path) -> Path | None:
    """Resolve ``value`` relative to the config file directory."""
    text = _optional_str(value)
    if text is None:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else base_dir / path


__all__ = ["_optional_path", "_optional_str", "_required_str", "_string_list"]
