"""Render a page's sections into stored HTML.

:class:`ContentRenderer` walks a :class:`~page_sections.sections.SectionList`
in order and asks a template dispatcher to render each section. Every pass gets
its own :class:`RenderContext`, which templates use to look at the current,
previous, and next sections. The default dispatcher resolves
``_section-<type>.jinja`` from the package templates with Jinja2.

Example
-------
>>> from page_sections.sections import SectionList, SectionRecord
>>> renderer = ContentRenderer(JinjaTemplateDispatcher())  # doctest: +SKIP
>>> renderer.render(SectionList([SectionRecord("text")]))  # doctest: +SKIP
'<section class="builder-section first text last">...'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from page_sections._constants import SECTION_TEMPLATE, UNCONSTRAINED_IMAGE_SIZE
from page_sections.sections import LayoutOrder, SectionList, SectionRecord
from page_sections.sections.sanitize import sanitize_html

log = logging.getLogger(__name__)

ContentFilter = cabc.Callable[[str], str]
DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


def layout_order(record: SectionRecord | cabc.Mapping[str, typ.Any]) -> LayoutOrder:
    """Return which side holds the image and which the text for ``record``.

    The image sits on the left unless the first order token mentions
    ``"text"``, in which case the sides swap.

    Examples
    --------
    >>> layout_order({"order": ["text-left", "image-right"]})
    LayoutOrder(image='right', text='left')
    >>> layout_order({})
    LayoutOrder(image='left', text='right')
    """
    if isinstance(record, SectionRecord):
        order = record.order
    else:
        order = record.get("order")
    if isinstance(order, list | tuple) and order and "text" in str(order[0]):
        return LayoutOrder(image="right", text="left")
    return LayoutOrder()


@dc.dataclass(slots=True)
class RenderContext:
    """Cursor over the sections of one render pass.

    Attributes
    ----------
    sections : SectionList
        Sections being rendered, in page order.
    index : int
        Zero-based position of the section currently being rendered; never
        exceeds ``len(sections)``.
    """

    sections: SectionList
    index: int = 0

    layout_order = staticmethod(layout_order)

    def current(self) -> SectionRecord | None:
        return self.sections.get(self.index)

    def current_type(self) -> str:
        record = self.current()
        return record.section_type if record else ""

    def next(self) -> SectionRecord | None:
        return self.sections.get(self.index + 1)

    def previous(self) -> SectionRecord | None:
        return self.sections.get(self.index - 1)

    def neighbor_classes(self) -> str:
        """Return the CSS classes describing the current section's neighbours.

        The result reads ``"<prev> <current> <next>"`` where ``<prev>`` is
        ``prev-<type>`` or ``first`` and ``<next>`` is ``next-<type>`` or
        ``last``.
        """
        previous = self.previous()
        following = self.next()
        prev_token = f"prev-{previous.section_type}" if previous else "first"
        next_token = f"next-{following.section_type}" if following else "last"
        return f"{prev_token} {self.current_type()} {next_token}"

    def advance(self) -> None:
        self.index = min(self.index + 1, len(self.sections))

    def reset(self) -> None:
        self.index = 0


class TemplateDispatcher(typ.Protocol):
    """Renders the template registered for a section type."""

    def dispatch(self, type_id: str, context: RenderContext) -> str: ...


def build_environment(
    templates_dir: Path | None = None,
    *,
    content_filters: cabc.Sequence[ContentFilter] = (),
) -> Environment:
    """Create the Jinja environment used for section templates.

    Parameters
    ----------
    templates_dir : Path, optional
        Directory holding ``_section-<type>.jinja`` templates; defaults to the
        templates shipped with the package.
    content_filters : Sequence[Callable[[str], str]], optional
        Callables applied, in order, by the ``builder_content`` template
        filter before the content is emitted.
    """
    env = Environment(
        loader=FileSystemLoader(str(templates_dir or DEFAULT_TEMPLATES_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["builder_content"] = _builder_content_filter(content_filters)
    return env


def _builder_content_filter(
    content_filters: cabc.Sequence[ContentFilter],
) -> cabc.Callable[[object], Markup]:
    def builder_content(content: object) -> Markup:
        text = "" if content is None else str(content)
        for content_filter in content_filters:
            text = content_filter(text)
        return Markup(text.replace("]]>", "]]&gt;"))

    return builder_content


class JinjaTemplateDispatcher:
    """Render ``_section-<type>.jinja`` templates with the pass context."""

    def __init__(
        self,
        env: Environment | None = None,
        *,
        templates_dir: Path | None = None,
        content_filters: cabc.Sequence[ContentFilter] = (),
    ) -> None:
        self.env = env or build_environment(
            templates_dir, content_filters=content_filters
        )

    def dispatch(self, type_id: str, context: RenderContext) -> str:
        """Render the template for ``type_id``; lookup and render errors propagate."""
        template = self.env.get_template(SECTION_TEMPLATE.format(type_id=type_id))
        return template.render(
            section=context.current(),
            builder=context,
            max_image_size=UNCONSTRAINED_IMAGE_SIZE,
        )


class ContentRenderer:
    """Render section lists into sanitized page content."""

    def __init__(
        self,
        dispatcher: TemplateDispatcher,
        *,
        sanitizer: ContentFilter = sanitize_html,
    ) -> None:
        self.dispatcher = dispatcher
        self.sanitizer = sanitizer
        self._active_context: RenderContext | None = None

    @property
    def active_context(self) -> RenderContext | None:
        """Context of the pass currently running, or ``None`` between passes."""
        return self._active_context

    def render(self, sections: SectionList) -> str:
        """Render ``sections`` in order and return the sanitized markup.

        Parameters
        ----------
        sections : SectionList
            Sections to render. An empty list renders to ``""``, which callers
            store to clear the page content.

        Returns
        -------
        str
            Concatenated template output passed through the sanitizer.

        Notes
        -----
        The pass context is published on :attr:`active_context` only while the
        templates run and is withdrawn on every exit path, including template
        failures, which propagate to the caller.
        """
        if not sections:
            return ""

        context = RenderContext(sections)
        enclosing = self._active_context
        self._active_context = context
        chunks: list[str] = []
        try:
            for record in sections:
                chunks.append(self.dispatcher.dispatch(record.section_type, context))
                context.advance()
        finally:
            context.reset()
            self._active_context = enclosing
        log.debug("rendered %d sections", len(chunks))
        return self.sanitizer("".join(chunks))


__all__ = [
    "ContentRenderer",
    "JinjaTemplateDispatcher",
    "RenderContext",
    "TemplateDispatcher",
    "build_environment",
    "layout_order",
]
