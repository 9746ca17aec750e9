"""Tests for the ``sections`` CLI commands.

The command functions are called directly with temporary config, form, and
store files, mirroring how ``sections save`` and ``sections render`` are used
from the shell.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest
from bs4 import BeautifulSoup

from page_sections import cli
from page_sections.security import NonceSigner
from page_sections.store import JsonPageStore, is_header_hidden, load_sections

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "builder.yaml"
    path.write_text(
        dedent(
            """
            builder:
              editors: [admin]
              secret: cli-secret
            sections: [text, feature, banner]
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def form_path(tmp_path: Path) -> Path:
    path = tmp_path / "form.yaml"
    path.write_text(
        dedent(
            """
            page_template: product
            hide-header: 1
            section-banner:
              title: Welcome
              slides:
                - content: <p>First slide</p>
                  image_id: 4
            section-text:
              title: About us
              columns:
                - <p>We build things.</p>
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    return path


def test_save_then_render(
    tmp_path: Path,
    config_path: Path,
    form_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    store_path = tmp_path / "pages.json"
    cli.save(page_id=7, form=form_path, store=store_path, config=config_path)
    out = capsys.readouterr().out
    assert "saved page 7: 2 sections, header hidden" in out, (
        f"unexpected save output {out!r}"
    )

    store = JsonPageStore(store_path)
    assert load_sections(store, 7).section_types == ["text", "banner"]
    assert is_header_hidden(store, 7)
    stored = BeautifulSoup(store.get_content(7), "html.parser")
    assert len(stored.select("section.builder-section")) == 2, (
        "expected rendered content stored alongside the sections"
    )

    output = tmp_path / "public" / "page-7.html"
    cli.render(page_id=7, store=store_path, config=config_path, output=output)
    assert "wrote" in capsys.readouterr().out
    html = output.read_text(encoding="utf-8")
    assert html.endswith("\n"), "expected a trailing newline"
    blocks = BeautifulSoup(html, "html.parser").select("section.builder-section")
    assert [block["class"][1:] for block in blocks] == [
        ["first", "text", "next-banner"],
        ["prev-text", "banner", "last"],
    ]


def test_save_rejects_non_editor(
    tmp_path: Path,
    config_path: Path,
    form_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    store_path = tmp_path / "pages.json"
    with pytest.raises(SystemExit) as excinfo:
        cli.save(
            page_id=7,
            form=form_path,
            store=store_path,
            config=config_path,
            user="guest",
        )
    assert excinfo.value.code == 1, f"expected exit status 1, got {excinfo.value.code!r}"
    out = capsys.readouterr().out
    assert out.startswith("rejected page 7:"), f"expected a rejection, got {out!r}"
    assert "saved" not in out, f"expected no save reported, got {out!r}"
    assert not store_path.exists(), "expected the page store left untouched"


def test_save_rejection_keeps_existing_pages(
    tmp_path: Path,
    config_path: Path,
    form_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    store_path = tmp_path / "pages.json"
    cli.save(page_id=7, form=form_path, store=store_path, config=config_path)
    before = store_path.read_bytes()
    capsys.readouterr()

    forged = tmp_path / "forged.yaml"
    forged.write_text(
        form_path.read_text(encoding="utf-8") + "builder-nonce: forged\n",
        encoding="utf-8",
    )
    with pytest.raises(SystemExit):
        cli.save(page_id=7, form=forged, store=store_path, config=config_path)
    assert "builder-nonce" in capsys.readouterr().out
    assert store_path.read_bytes() == before, "expected stored pages unchanged"


def test_render_prints_to_stdout_for_unknown_page(
    tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.render(page_id=99, store=tmp_path / "pages.json", config=config_path)
    assert capsys.readouterr().out == "\n", "expected empty content for a new page"


def test_nonce_prints_token(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.nonce(user="admin", config=config_path)
    token = capsys.readouterr().out.strip()
    assert NonceSigner("cli-secret").verify(token, "save", "admin"), (
        f"expected a token valid for admin, got {token!r}"
    )


def test_save_requires_form_file(tmp_path: Path, config_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Form file"):
        cli.save(
            page_id=1,
            form=tmp_path / "missing.yaml",
            store=tmp_path / "pages.json",
            config=config_path,
        )
