"""Load and validate builder configuration YAML.

This subpackage parses the project's ``builder.yaml`` file, applies defaults
for omitted settings, and produces a :class:`BuilderConfig` that the hooks and
CLI consume. The primary entry point is :func:`load_builder_config`.

Examples
--------
>>> from pathlib import Path
>>> from page_sections.config import load_builder_config
>>> config = load_builder_config(Path("config/builder.yaml"))  # doctest: +SKIP
>>> config.section_types  # doctest: +SKIP
('text', 'feature', 'banner')
"""

from .loader import load_builder_config
from .models import DEFAULT_PAGE_TEMPLATES, BuilderConfig, BuilderConfigError

__all__ = [
    "DEFAULT_PAGE_TEMPLATES",
    "BuilderConfig",
    "BuilderConfigError",
    "load_builder_config",
]
