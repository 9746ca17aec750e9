"""Typed configuration for the section builder."""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ

from page_sections._constants import SECRET_ENV_VAR
from page_sections.errors import BuilderConfigError
from page_sections.sections import DEFAULT_SECTION_TYPES

if typ.TYPE_CHECKING:
    from pathlib import Path

DEFAULT_PAGE_TEMPLATES: tuple[str, str] = ("product", "slideshow")


@dc.dataclass(frozen=True, slots=True)
class BuilderConfig:
    """Builder settings sourced from YAML config.

    Attributes
    ----------
    allowed_page_templates : tuple[str, str]
        The two page templates whose content is generated from sections.
    nonce_field : str
        Form field carrying the request integrity token.
    nonce_action : str
        Action name the integrity token is bound to.
    hide_header_field : str
        Form field holding the hide-header choice (``0`` or ``1``).
    editors : frozenset[str]
        Users allowed to edit builder pages.
    section_types : tuple[str, ...]
        Enabled section types, in collection order.
    templates_dir : Path or None
        Directory with ``_section-<type>.jinja`` templates; the package
        templates are used when unset.
    secret : str or None
        Key used to sign request tokens; see :meth:`signing_secret`.
    """

    allowed_page_templates: tuple[str, str] = DEFAULT_PAGE_TEMPLATES
    nonce_field: str = "builder-nonce"
    nonce_action: str = "save"
    hide_header_field: str = "hide-header"
    editors: frozenset[str] = frozenset({"admin"})
    section_types: tuple[str, ...] = DEFAULT_SECTION_TYPES
    templates_dir: Path | None = None
    secret: str | None = None

    def signing_secret(self) -> str:
        """Return the configured secret, falling back to the environment.

        Raises
        ------
        BuilderConfigError
            If neither ``secret`` nor ``PAGE_SECTIONS_SECRET`` is set.
        """
        secret = self.secret or os.getenv(SECRET_ENV_VAR)
        if not secret:
            msg = f"No signing secret configured; set 'secret' or {SECRET_ENV_VAR}."
            raise BuilderConfigError(msg)
        return secret


__all__ = ["DEFAULT_PAGE_TEMPLATES", "BuilderConfig", "BuilderConfigError"]
