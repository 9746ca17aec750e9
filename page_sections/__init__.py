"""Compose CMS pages from ordered sections.

This package collects sanitized per-section form data when a page is saved,
stores it as page metadata, and renders the sections into the page's stored
HTML through per-type Jinja templates. The ``sections`` console script drives
the same pipeline against a JSON page store.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from page_sections import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
