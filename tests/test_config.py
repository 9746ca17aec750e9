"""Unit tests for loading ``builder.yaml`` into :class:`BuilderConfig`."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from page_sections.config import BuilderConfig, BuilderConfigError, load_builder_config

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "builder.yaml"
    path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
    return path


def test_load_full_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        builder:
          allowed_page_templates: [landing, gallery-page]
          nonce_field: token
          nonce_action: compose
          hide_header_field: no-header
          editors: [ada, grace]
          templates_dir: templates
          secret: s3cret
        sections: [feature, text]
        """,
    )
    config = load_builder_config(path)
    assert config.allowed_page_templates == ("landing", "gallery-page")
    assert config.nonce_field == "token"
    assert config.nonce_action == "compose"
    assert config.hide_header_field == "no-header"
    assert config.editors == frozenset({"ada", "grace"})
    assert config.section_types == ("feature", "text"), (
        f"expected configured section order, got {config.section_types!r}"
    )
    assert config.templates_dir == tmp_path / "templates", (
        "expected templates_dir resolved relative to the config file"
    )
    assert config.signing_secret() == "s3cret"


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    config = load_builder_config(_write(tmp_path, "{}"))
    assert config == BuilderConfig(), f"expected default config, got {config!r}"
    assert config.allowed_page_templates == ("product", "slideshow")
    assert config.section_types == ("text", "feature", "banner")


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_builder_config(tmp_path / "absent.yaml")


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="mapping"):
        load_builder_config(_write(tmp_path, "- just\n- a list"))


@pytest.mark.parametrize(
    ("text", "message"),
    [
        (
            "builder:\n  allowed_page_templates: [product]",
            "exactly two distinct templates",
        ),
        (
            "builder:\n  allowed_page_templates: [product, product]",
            "exactly two distinct templates",
        ),
        ("sections: [text, gallery]", "Unknown section types: gallery"),
        ("sections: [text, text]", "more than once"),
        ("builder:\n  nonce_field: ''", "must not be empty"),
        ("builder:\n  editors: 12", "list of strings"),
        ("builder: [1, 2]", "must be a mapping"),
    ],
)
def test_invalid_settings_raise(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(BuilderConfigError, match=message):
        load_builder_config(_write(tmp_path, text))


def test_signing_secret_falls_back_to_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PAGE_SECTIONS_SECRET", "from-env")
    assert BuilderConfig().signing_secret() == "from-env"
    assert BuilderConfig(secret="explicit").signing_secret() == "explicit"
