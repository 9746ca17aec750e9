"""Registry of section types and the built-in save handlers.

Each section type contributes a :class:`SectionTypeDescriptor` whose save
handler takes no arguments, reads its own slice of the submitted form, and
returns a sanitized :class:`SectionRecord` (or ``None`` when the editor removed
the section). Handlers for the built-in types are bound to a submitted form by
:func:`build_registry`, producing a registry that lives for one save cycle.

Examples
--------
>>> form = {"section-text": {"title": "<em>Welcome</em>", "columns": ["<p>Hi</p>"]}}
>>> registry = build_registry(form, enabled=["text"])
>>> registry.type_ids
['text']
>>> registry.get("text").save_handler()["title"]
'Welcome'
"""

from __future__ import annotations

import collections.abc as cabc
import functools
import typing as typ

from page_sections._constants import SECTION_FORM_KEY
from page_sections.errors import SectionTypeError

from .models import SectionRecord, SectionTypeDescriptor
from .sanitize import (
    absint,
    process_order,
    sanitize_flag,
    sanitize_html,
    sanitize_text,
    sanitize_url,
)

FormData = cabc.Mapping[str, typ.Any]
SectionSaver = cabc.Callable[[FormData], SectionRecord | None]


class SectionRegistry:
    """Ordered collection of section types available to the builder."""

    def __init__(self, descriptors: cabc.Iterable[SectionTypeDescriptor] = ()) -> None:
        self._descriptors: dict[str, SectionTypeDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: SectionTypeDescriptor) -> SectionTypeDescriptor:
        """Add ``descriptor``; registering a type id twice is an error."""
        if descriptor.type_id in self._descriptors:
            msg = f"Section type '{descriptor.type_id}' is already registered."
            raise SectionTypeError(msg)
        self._descriptors[descriptor.type_id] = descriptor
        return descriptor

    def get(self, type_id: str) -> SectionTypeDescriptor:
        try:
            return self._descriptors[type_id]
        except KeyError as exc:
            known = ", ".join(self._descriptors) or "none"
            msg = f"Unknown section type '{type_id}'. Known types: {known}"
            raise SectionTypeError(msg) from exc

    @property
    def type_ids(self) -> list[str]:
        return list(self._descriptors)

    def __iter__(self) -> cabc.Iterator[SectionTypeDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._descriptors


def _section_payload(form: FormData, type_id: str) -> FormData | None:
    """Return the submitted mapping for ``type_id`` or None when it was removed."""
    payload = form.get(SECTION_FORM_KEY.format(type_id=type_id))
    if isinstance(payload, cabc.Mapping):
        return payload
    return None


def _as_list(value: object) -> list[typ.Any]:
    if isinstance(value, list | tuple):
        return list(value)
    return []


def save_text_section(form: FormData) -> SectionRecord | None:
    """Sanitize a text section made of a title and HTML columns."""
    payload = _section_payload(form, "text")
    if payload is None:
        return None
    columns = [sanitize_html(column) for column in _as_list(payload.get("columns"))]
    return SectionRecord(
        section_type="text",
        order=process_order(payload.get("order")) or None,
        fields={"title": sanitize_text(payload.get("title")), "columns": columns},
    )


def save_feature_section(form: FormData) -> SectionRecord | None:
    """Sanitize a feature section pairing an image with rich text."""
    payload = _section_payload(form, "feature")
    if payload is None:
        return None
    return SectionRecord(
        section_type="feature",
        order=process_order(payload.get("order")) or None,
        fields={
            "title": sanitize_text(payload.get("title")),
            "content": sanitize_html(payload.get("content")),
            "image_id": absint(payload.get("image_id")),
            "link": sanitize_url(payload.get("link")),
        },
    )


def save_banner_section(form: FormData) -> SectionRecord | None:
    """Sanitize a banner section and its slides."""
    payload = _section_payload(form, "banner")
    if payload is None:
        return None
    slides = [
        {
            "content": sanitize_html(slide.get("content")),
            "image_id": absint(slide.get("image_id")),
        }
        for slide in _as_list(payload.get("slides"))
        if isinstance(slide, cabc.Mapping)
    ]
    return SectionRecord(
        section_type="banner",
        fields={
            "title": sanitize_text(payload.get("title")),
            "slides": slides,
            "hide_arrows": sanitize_flag(payload.get("hide_arrows")),
            "hide_dots": sanitize_flag(payload.get("hide_dots")),
        },
    )


BUILTIN_SECTION_TYPES: dict[str, SectionSaver] = {
    "text": save_text_section,
    "feature": save_feature_section,
    "banner": save_banner_section,
}
DEFAULT_SECTION_TYPES: tuple[str, ...] = tuple(BUILTIN_SECTION_TYPES)


def build_registry(
    form: FormData, *, enabled: cabc.Iterable[str] = DEFAULT_SECTION_TYPES
) -> SectionRegistry:
    """Bind the enabled built-in section types to one submitted form.

    Parameters
    ----------
    form : Mapping[str, Any]
        Submitted form data for the current request.
    enabled : Iterable[str], optional
        Section type ids in the order they should be collected.

    Raises
    ------
    SectionTypeError
        If ``enabled`` names a section type that has no built-in handler, or
        names the same type twice.
    """
    registry = SectionRegistry()
    for type_id in enabled:
        try:
            saver = BUILTIN_SECTION_TYPES[type_id]
        except KeyError as exc:
            msg = f"No built-in section type named '{type_id}'."
            raise SectionTypeError(msg) from exc
        registry.register(
            SectionTypeDescriptor(type_id, functools.partial(saver, form))
        )
    return registry


__all__ = [
    "BUILTIN_SECTION_TYPES",
    "DEFAULT_SECTION_TYPES",
    "SectionRegistry",
    "build_registry",
    "save_banner_section",
    "save_feature_section",
    "save_text_section",
]
