"""Unit tests for page metadata storage."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import msgspec
import pytest

from page_sections.sections import SectionList, SectionRecord
from page_sections.store import (
    JsonPageStore,
    MemoryPageStore,
    load_sections,
    store_sections,
)

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture


def _sections() -> SectionList:
    return SectionList(
        [
            SectionRecord("text", fields={"title": "Intro", "columns": ["<p>a</p>"]}),
            SectionRecord(
                "feature",
                order=("text", "image"),
                fields={"title": "Feature", "image_id": 7, "content": "", "link": ""},
            ),
        ]
    )


def test_memory_store_meta_and_content() -> None:
    store = MemoryPageStore()
    assert store.get_meta(1, "missing", "fallback") == "fallback"
    assert store.get_content(1) == ""
    store.update_meta(1, "hide_header", 1)
    store.set_content(1, "<p>x</p>")
    assert store.get_meta(1, "hide_header") == 1
    assert store.get_content(1) == "<p>x</p>"
    store.delete_meta(1, "hide_header")
    store.delete_meta(2, "hide_header")
    assert store.get_meta(1, "hide_header") is None


def test_json_store_persists_sections_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "state" / "pages.json"
    first = JsonPageStore(path)
    store_sections(first, 3, _sections())
    first.set_content(3, "<section>rendered</section>")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["3"]["meta"]["sections"][1]["order"] == ["text", "image"], (
        f"expected order stored as a list, got {payload!r}"
    )

    reopened = JsonPageStore(path)
    assert load_sections(reopened, 3) == _sections(), (
        "expected sections to survive a reload unchanged"
    )
    assert reopened.get_content(3) == "<section>rendered</section>"
    assert sorted(p.name for p in path.parent.iterdir()) == ["pages.json"], (
        "expected no staging file left beside the store"
    )


def test_json_store_starts_empty_without_file(tmp_path: Path) -> None:
    store = JsonPageStore(tmp_path / "pages.json")
    assert load_sections(store, 1) == SectionList()
    assert not (tmp_path / "pages.json").exists(), "expected no write on read"


def test_json_store_rejects_malformed_documents(tmp_path: Path) -> None:
    path = tmp_path / "pages.json"
    path.write_text('{"1": {"meta": []}}', encoding="utf-8")
    with pytest.raises(msgspec.ValidationError):
        JsonPageStore(path)


def test_json_store_failed_write_keeps_previous_document(
    tmp_path: Path, mocker: MockerFixture
) -> None:
    """A write that never completes must leave the last good document intact."""
    path = tmp_path / "pages.json"
    store = JsonPageStore(path)
    store.set_content(1, "<p>kept</p>")
    before = path.read_bytes()

    mocker.patch.object(Path, "replace", side_effect=OSError("disk full"))
    with pytest.raises(OSError, match="disk full"):
        store.set_content(2, "<p>lost</p>")

    assert path.read_bytes() == before, "expected the stored pages untouched"
    assert JsonPageStore(path).get_content(1) == "<p>kept</p>"
