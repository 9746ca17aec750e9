"""Cyclopts CLI entrypoint for saving and rendering builder pages.

The ``sections`` console script defined here drives the builder hooks against
a JSON page store, so pages can be composed from a YAML form submission and
rendered without a host CMS. Typical usage involves running ``sections save``
with a form file, then ``sections render`` to write the stored page content.

Examples
--------
Save a page from a submitted form:

>>> from page_sections.cli import app
>>> app(["save", "--page-id", "7", "--form", "form.yaml"])  # doctest: +SKIP

Render the stored sections of that page:

>>> app(["render", "--page-id", "7", "--output", "public/7.html"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml import YAML

from .config import BuilderConfig, load_builder_config
from .errors import RequestRejected
from .hooks import BuilderRequest, build_hooks
from .renderer import ContentRenderer, JinjaTemplateDispatcher
from .security import NonceSigner
from .store import JsonPageStore, is_header_hidden, load_sections

DEFAULT_CONFIG = Path("config/builder.yaml")
DEFAULT_STORE = Path("pages.json")

app = App(name="sections", config=cyclopts.config.Env("PAGE_SECTIONS_", command=False))  # type: ignore[unknown-argument]

log = logging.getLogger(__name__)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Path | None) -> BuilderConfig:
    """Load ``path``, or the default config file when present, else defaults."""
    if path is not None:
        return load_builder_config(path)
    if DEFAULT_CONFIG.exists():
        return load_builder_config(DEFAULT_CONFIG)
    return BuilderConfig()


def _load_form(path: Path) -> dict[str, typ.Any]:
    """Read a submitted form from YAML (JSON documents are valid YAML too)."""
    if not path.exists():
        msg = f"Form file '{path}' not found."
        raise FileNotFoundError(msg)
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level form structure must be a mapping."
        raise TypeError(msg)
    return dict(loaded)


@app.command(help="Save a submitted builder form into the page store.")
def save(
    *,
    page_id: typ.Annotated[int, Parameter(help="Page identifier")],
    form: typ.Annotated[Path, Parameter(help="YAML or JSON form submission")],
    store: typ.Annotated[
        Path, Parameter(help="JSON page store", env_var="PAGE_SECTIONS_STORE")
    ] = DEFAULT_STORE,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to builder config", env_var="PAGE_SECTIONS_CONFIG"),
    ] = None,
    user: typ.Annotated[str, Parameter(help="Submitting user")] = "admin",
    verbose: bool = False,
) -> None:
    """Run the content filter and save hooks for a form submission.

    Parameters
    ----------
    page_id : int
        Page whose sections and content are replaced.
    form : Path
        Submitted form data. A request token for ``user`` is signed and added
        when the form does not carry one.
    store : Path, optional
        JSON page store that receives the metadata and rendered content.
    config : Path or None, optional
        Builder configuration; ``config/builder.yaml`` is used when present,
        otherwise built-in defaults.
    user : str, optional
        User the submission is attributed to; must be a configured editor.
    verbose : bool, optional
        Emit debug logging.

    Raises
    ------
    SystemExit
        With status 1 when the request is rejected; the store is left untouched.
    """
    _configure_logging(verbose)
    builder_config = _load_config(config)
    submitted = _load_form(form)
    page_store = JsonPageStore(store)
    hooks = build_hooks(builder_config, page_store)
    submitted.setdefault(
        builder_config.nonce_field,
        hooks.signer.create(builder_config.nonce_action, user),
    )
    request = BuilderRequest(form=submitted, user=user, page_id=page_id)
    try:
        hooks.check_request(request, page_id)
    except RequestRejected as exc:
        print(f"rejected page {page_id}: {exc}")
        raise SystemExit(1) from exc

    draft = {"post_content": page_store.get_content(page_id)}
    data = hooks.insert_post_data(draft, request)
    page_store.set_content(page_id, data["post_content"])
    hooks.save_post(page_id, data, request)

    sections = load_sections(page_store, page_id)
    log.info("page %s stored in %s", page_id, _format_path(store))
    header = "hidden" if is_header_hidden(page_store, page_id) else "shown"
    print(f"saved page {page_id}: {len(sections)} sections, header {header}")


@app.command(help="Render the stored sections of a page to HTML.")
def render(
    *,
    page_id: typ.Annotated[int, Parameter(help="Page identifier")],
    store: typ.Annotated[
        Path, Parameter(help="JSON page store", env_var="PAGE_SECTIONS_STORE")
    ] = DEFAULT_STORE,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to builder config", env_var="PAGE_SECTIONS_CONFIG"),
    ] = None,
    output: typ.Annotated[
        Path | None, Parameter(help="Write HTML here instead of stdout")
    ] = None,
    verbose: bool = False,
) -> None:
    """Render a page's stored sections, writing to ``output`` or stdout."""
    _configure_logging(verbose)
    builder_config = _load_config(config)
    page_store = JsonPageStore(store)
    renderer = ContentRenderer(
        JinjaTemplateDispatcher(templates_dir=builder_config.templates_dir)
    )
    html = renderer.render(load_sections(page_store, page_id))
    if output is None:
        print(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    if not html.endswith("\n"):
        html += "\n"
    output.write_text(html, encoding="utf-8")
    print(f"wrote {_format_path(output)}")


@app.command(help="Print a request token for a user.")
def nonce(
    *,
    user: typ.Annotated[str, Parameter(help="User the token is issued to")],
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to builder config", env_var="PAGE_SECTIONS_CONFIG"),
    ] = None,
) -> None:
    """Print the integrity token a form submitted by ``user`` must carry."""
    builder_config = _load_config(config)
    signer = NonceSigner(builder_config.signing_secret())
    print(signer.create(builder_config.nonce_action, user))


def main() -> None:
    """Invoke the Cyclopts application that powers the ``sections`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
