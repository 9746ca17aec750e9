"""Load builder configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from page_sections.sections import BUILTIN_SECTION_TYPES

from .helpers import _optional_path, _optional_str, _required_str, _string_list
from .models import BuilderConfig, BuilderConfigError


def load_builder_config(path: Path) -> BuilderConfig:
    """Load the YAML configuration describing builder behaviour.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/builder.yaml``).

    Returns
    -------
    BuilderConfig
        Parsed configuration with defaults applied for omitted settings.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    BuilderConfigError
        If a setting is present but invalid (for example, the page template
        allow-list does not name exactly two templates, or an unknown section
        type is enabled).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_builder_config(Path("config/builder.yaml"))  # doctest: +SKIP
    >>> config.allowed_page_templates  # doctest: +SKIP
    ('product', 'slideshow')
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    builder = raw.get("builder") or {}
    if not isinstance(builder, dict):
        msg = "The 'builder' section must be a mapping."
        raise BuilderConfigError(msg)

    defaults = BuilderConfig()
    return BuilderConfig(
        allowed_page_templates=_build_page_templates(
            builder.get("allowed_page_templates"), defaults.allowed_page_templates
        ),
        nonce_field=_required_str(builder, "nonce_field", defaults.nonce_field),
        nonce_action=_required_str(builder, "nonce_action", defaults.nonce_action),
        hide_header_field=_required_str(
            builder, "hide_header_field", defaults.hide_header_field
        ),
        editors=_build_editors(builder.get("editors"), defaults.editors),
        section_types=_build_section_types(
            raw.get("sections"), defaults.section_types
        ),
        templates_dir=_optional_path(builder.get("templates_dir"), path.parent),
        secret=_optional_str(builder.get("secret")),
    )


def _build_page_templates(
    value: object | None, default: tuple[str, str]
) -> tuple[str, str]:
    """Validate the builder page template allow-list."""
    if value is None:
        return default
    templates = _string_list(value, "allowed_page_templates")
    if len(templates) != 2 or templates[0] == templates[1]:
        msg = "'allowed_page_templates' must name exactly two distinct templates."
        raise BuilderConfigError(msg)
    return templates[0], templates[1]


def _build_editors(value: object | None, default: frozenset[str]) -> frozenset[str]:
    if value is None:
        return default
    return frozenset(_string_list(value, "editors"))


def _build_section_types(
    value: object | None, default: tuple[str, ...]
) -> tuple[str, ...]:
    """Validate the enabled section types, keeping their configured order."""
    if value is None:
        return default
    section_types = _string_list(value, "sections")
    unknown = [item for item in section_types if item not in BUILTIN_SECTION_TYPES]
    if unknown:
        known = ", ".join(BUILTIN_SECTION_TYPES)
        msg = f"Unknown section types: {', '.join(unknown)}. Known types: {known}"
        raise BuilderConfigError(msg)
    if len(set(section_types)) != len(section_types):
        msg = "Section types must not be listed more than once."
        raise BuilderConfigError(msg)
    return tuple(section_types)


__all__ = ["load_builder_config"]
