"""Sanitizers applied to submitted section fields before they are stored.

Titles and other plain-text values lose all markup; rich content keeps its
markup but drops executable elements, event-handler attributes, and script
URLs. The helpers accept raw form values of any type and always return a safe
value of the expected type.

Examples
--------
>>> sanitize_text("<b>Hello</b>   world")
'Hello world'
>>> sanitize_html('<p onclick="x()">Hi<script>alert(1)</script></p>')
'<p>Hi</p>'
>>> process_order("builder-section-text,builder-section-image")
('text', 'image')
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from page_sections._constants import ORDER_PREFIX

DISALLOWED_TAGS = ("script", "style", "iframe", "object", "embed", "form")
URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction", "xlink:href"})
SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto"})
TRUTHY_FLAGS = frozenset({"1", "true", "on", "yes"})
WHITESPACE_PATTERN = re.compile(r"\s+")


def sanitize_text(value: object) -> str:
    """Return ``value`` as plain text with markup removed and whitespace collapsed."""
    if value is None:
        return ""
    text = str(value)
    if "<" in text:
        text = BeautifulSoup(text, "html.parser").get_text(" ")
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def sanitize_html(value: object) -> str:
    """Strip executable markup from an HTML fragment.

    Parameters
    ----------
    value : object
        Raw fragment submitted by the editor; ``None`` yields an empty string.

    Returns
    -------
    str
        The fragment without ``DISALLOWED_TAGS`` elements, ``on*`` event
        attributes, or URL attributes pointing at ``javascript:``-style
        schemes.
    """
    if value is None:
        return ""
    text = str(value)
    if "<" not in text:
        return text.strip()
    soup = BeautifulSoup(text, "html.parser")
    for element in soup.find_all(list(DISALLOWED_TAGS)):
        element.decompose()
    for element in soup.find_all(True):
        for attribute in list(element.attrs):
            name = attribute.lower()
            if name.startswith("on"):
                del element.attrs[attribute]
            elif name in URL_ATTRIBUTES and not _is_safe_url(
                str(element.attrs[attribute])
            ):
                del element.attrs[attribute]
    return str(soup).strip()


def sanitize_url(value: object) -> str:
    """Return ``value`` when it is a relative or http(s)/mailto URL, else ``""``."""
    if value is None:
        return ""
    url = str(value).strip()
    if not url or not _is_safe_url(url):
        return ""
    return url


def absint(value: object) -> int:
    """Convert ``value`` to a non-negative integer, falling back to ``0``.

    Decimal strings are truncated toward zero, so ``"1.5"`` becomes ``1``.
    """
    if isinstance(value, bool):
        return int(value)
    text = str(value).strip()
    try:
        return abs(int(text))
    except ValueError:
        pass
    try:
        return abs(int(float(text)))
    except (OverflowError, ValueError):
        return 0


def sanitize_flag(value: object) -> bool:
    """Interpret checkbox-style form values as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_FLAGS


def process_order(value: object) -> tuple[str, ...]:
    """Interpret the layout order input into order tokens.

    The editor submits element identifiers such as
    ``"builder-section-text,builder-section-image"``; the prefix is removed and
    the remainder split on commas.
    """
    if value is None:
        return ()
    text = str(value).replace(ORDER_PREFIX, "")
    if not text.strip():
        return ()
    return tuple(item.strip() for item in text.split(","))


def _is_safe_url(url: str) -> bool:
    compact = "".join(url.split()).lower()
    scheme = urlsplit(compact).scheme
    return not scheme or scheme in SAFE_URL_SCHEMES


__all__ = [
    "absint",
    "process_order",
    "sanitize_flag",
    "sanitize_html",
    "sanitize_text",
    "sanitize_url",
]
