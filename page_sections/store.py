"""Page metadata and content persistence.

The builder only needs a handful of operations from the host's post storage:
reading, updating, and deleting keyed metadata, and reading or replacing a
page's stored content. :class:`PageStore` describes that surface;
:class:`MemoryPageStore` keeps pages in a dict and :class:`JsonPageStore`
persists the same structure to a JSON file with msgspec so the CLI can save and
render pages across invocations.

Example
-------
>>> store = MemoryPageStore()
>>> store.update_meta(7, "hide_header", 1)
>>> is_header_hidden(store, 7)
True
>>> store.delete_meta(7, "hide_header")
>>> is_header_hidden(store, 7)
False
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec.json

from page_sections._constants import HIDE_HEADER_META_KEY, SECTIONS_META_KEY
from page_sections.sections import SectionList

if typ.TYPE_CHECKING:
    from pathlib import Path


class PageStore(typ.Protocol):
    """Keyed metadata and content storage for pages."""

    def get_meta(self, page_id: int, key: str, default: typ.Any = None) -> typ.Any: ...

    def update_meta(self, page_id: int, key: str, value: typ.Any) -> None: ...

    def delete_meta(self, page_id: int, key: str) -> None: ...

    def get_content(self, page_id: int) -> str: ...

    def set_content(self, page_id: int, content: str) -> None: ...


@dc.dataclass(slots=True)
class StoredPage:
    """Metadata and rendered content held for one page."""

    meta: dict[str, typ.Any] = dc.field(default_factory=dict)
    content: str = ""


class MemoryPageStore:
    """Keep pages in memory for the lifetime of the process."""

    def __init__(self, pages: dict[int, StoredPage] | None = None) -> None:
        self.pages: dict[int, StoredPage] = pages if pages is not None else {}

    def get_meta(self, page_id: int, key: str, default: typ.Any = None) -> typ.Any:
        page = self.pages.get(page_id)
        if page is None:
            return default
        return page.meta.get(key, default)

    def update_meta(self, page_id: int, key: str, value: typ.Any) -> None:
        self._page(page_id).meta[key] = value
        self._changed()

    def delete_meta(self, page_id: int, key: str) -> None:
        page = self.pages.get(page_id)
        if page is not None and key in page.meta:
            del page.meta[key]
            self._changed()

    def get_content(self, page_id: int) -> str:
        page = self.pages.get(page_id)
        return page.content if page else ""

    def set_content(self, page_id: int, content: str) -> None:
        self._page(page_id).content = content
        self._changed()

    def _page(self, page_id: int) -> StoredPage:
        return self.pages.setdefault(page_id, StoredPage())

    def _changed(self) -> None:
        """Hook for subclasses that persist changes."""


class JsonPageStore(MemoryPageStore):
    """Persist pages to a JSON document, rewriting it after every change."""

    def __init__(self, path: Path) -> None:
        """Load ``path`` when it exists; otherwise start with no pages.

        Raises
        ------
        msgspec.ValidationError
            If the file exists but does not hold a mapping of page ids to
            ``{"meta": {...}, "content": "..."}`` objects.
        """
        self.path = path
        pages: dict[int, StoredPage] = {}
        if path.exists():
            raw = path.read_bytes()
            if raw.strip():
                pages = msgspec.json.decode(raw, type=dict[int, StoredPage])
        super().__init__(pages)

    def _changed(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        encoded = msgspec.json.encode(self.pages)
        # Swap in a complete sibling file so a failed write never truncates pages.
        staging = self.path.with_name(f".{self.path.name}.tmp")
        staging.write_bytes(msgspec.json.format(encoded, indent=2) + b"\n")
        staging.replace(self.path)


def store_sections(store: PageStore, page_id: int, sections: SectionList) -> None:
    """Persist ``sections`` as the page's section metadata."""
    store.update_meta(page_id, SECTIONS_META_KEY, sections.to_payload())


def load_sections(store: PageStore, page_id: int) -> SectionList:
    """Return the stored sections for ``page_id`` (empty when none are stored)."""
    return SectionList.from_payload(store.get_meta(page_id, SECTIONS_META_KEY))


def is_header_hidden(store: PageStore, page_id: int) -> bool:
    """Return True when the page's hide-header flag is present."""
    return bool(store.get_meta(page_id, HIDE_HEADER_META_KEY))


__all__ = [
    "JsonPageStore",
    "MemoryPageStore",
    "PageStore",
    "StoredPage",
    "is_header_hidden",
    "load_sections",
    "store_sections",
]
