"""Lifecycle hooks that connect the section builder to a host CMS.

The host calls :meth:`BuilderHooks.insert_post_data` before it persists a
page's content and :meth:`BuilderHooks.save_post` once the page is saved. Both
hooks re-check the request (autosave, permission, integrity token) and leave
the page untouched when a check fails. The content filter additionally only
runs for the two builder page templates.

Example
-------
>>> from page_sections.config import BuilderConfig
>>> from page_sections.store import MemoryPageStore
>>> hooks = build_hooks(BuilderConfig(secret="s3cret"), MemoryPageStore())
>>> request = BuilderRequest(form={}, user="guest", page_id=3)
>>> hooks.insert_post_data({"post_content": "kept"}, request)
{'post_content': 'kept'}
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from page_sections._constants import HIDE_HEADER_META_KEY, PAGE_TEMPLATE_FIELD
from page_sections.collector import SectionCollector
from page_sections.errors import (
    AuthorizationDenied,
    AutosaveInProgress,
    IntegrityCheckFailed,
    RequestRejected,
    UnsupportedPageType,
)
from page_sections.renderer import ContentRenderer, JinjaTemplateDispatcher
from page_sections.sections import SectionList, SectionRegistry, build_registry
from page_sections.security import EditorAuthorizer, NonceSigner
from page_sections.store import store_sections

if typ.TYPE_CHECKING:
    from page_sections.config import BuilderConfig
    from page_sections.security import Authorizer
    from page_sections.store import PageStore

log = logging.getLogger(__name__)

RegistryFactory = cabc.Callable[[cabc.Mapping[str, typ.Any]], SectionRegistry]


@dc.dataclass(frozen=True, slots=True)
class BuilderRequest:
    """Submitted form data and the requesting user for one save cycle.

    Attributes
    ----------
    form : Mapping[str, Any]
        Raw submitted fields, including the per-section payloads, the
        integrity token, ``page_template``, and the hide-header choice.
    user : str or None
        Identifier of the requesting user.
    page_id : int or None
        Page being edited, used by the content filter's permission check.
    is_autosave : bool
        True for background autosaves, which never run the builder.
    """

    form: cabc.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    user: str | None = None
    page_id: int | None = None
    is_autosave: bool = False


class BuilderHooks:
    """Save and content-filter hooks driving the collector and renderer."""

    def __init__(
        self,
        config: BuilderConfig,
        *,
        store: PageStore,
        authorizer: Authorizer,
        signer: NonceSigner,
        renderer: ContentRenderer,
        registry_factory: RegistryFactory | None = None,
    ) -> None:
        """Wire the hooks to their collaborators.

        Parameters
        ----------
        config : BuilderConfig
            Field names, allowed page templates, and enabled section types.
        store : PageStore
            Host storage for page metadata.
        authorizer : Authorizer
            Permission check for the requesting user.
        signer : NonceSigner
            Verifies the request integrity token.
        renderer : ContentRenderer
            Renders collected sections into page content.
        registry_factory : Callable, optional
            Builds the section registry for a submitted form; defaults to the
            built-in section types enabled in ``config``.
        """
        self.config = config
        self.store = store
        self.authorizer = authorizer
        self.signer = signer
        self.renderer = renderer
        self.registry_factory = registry_factory or self._default_registry

    def save_post(self, page_id: int, page: object, request: BuilderRequest) -> None:
        """Store the page's sanitized sections and hide-header flag.

        Nothing is written when the request is an autosave, the user may not
        edit ``page_id``, or the integrity token is missing or invalid.
        """
        try:
            self.check_request(request, page_id)
        except RequestRejected as exc:
            log.debug("skipping section save for page %s: %s", page_id, exc)
            return

        sections = self.collect(request)
        store_sections(self.store, page_id, sections)
        if self._hide_header_requested(request):
            self.store.update_meta(page_id, HIDE_HEADER_META_KEY, 1)
        else:
            self.store.delete_meta(page_id, HIDE_HEADER_META_KEY)
        log.debug("saved %d sections for page %s", len(sections), page_id)

    def insert_post_data(
        self, data: cabc.Mapping[str, typ.Any], request: BuilderRequest
    ) -> dict[str, typ.Any]:
        """Return ``data`` with ``post_content`` generated from the sections.

        Parameters
        ----------
        data : Mapping[str, Any]
            Draft page data about to be persisted by the host.
        request : BuilderRequest
            The submission that produced ``data``.

        Returns
        -------
        dict[str, Any]
            A copy of ``data``. It is unchanged when the request is rejected or
            the page template is not a builder template; otherwise
            ``post_content`` holds the rendered sections, or ``""`` when every
            section was removed.
        """
        result = dict(data)
        try:
            self.check_request(request, request.page_id)
            self._check_page_template(request)
        except RequestRejected as exc:
            log.debug("leaving page content unchanged: %s", exc)
            return result

        sections = self.collect(request)
        result["post_content"] = self.renderer.render(sections)
        return result

    def collect(self, request: BuilderRequest) -> SectionList:
        """Collect the sanitized sections submitted with ``request``."""
        return SectionCollector(self.registry_factory(request.form)).collect()

    def _default_registry(self, form: cabc.Mapping[str, typ.Any]) -> SectionRegistry:
        return build_registry(form, enabled=self.config.section_types)

    def check_request(self, request: BuilderRequest, page_id: int | None) -> None:
        """Raise a :class:`RequestRejected` subclass unless the builder may run.

        Autosaves are refused first, then submissions without a valid token for
        the submitting user, then users who may not edit ``page_id``.
        """
        if request.is_autosave:
            msg = "autosave requests never run the builder"
            raise AutosaveInProgress(msg)
        token = request.form.get(self.config.nonce_field)
        if not self.signer.verify(token, self.config.nonce_action, request.user):
            msg = f"missing or invalid '{self.config.nonce_field}' token"
            raise IntegrityCheckFailed(msg)
        if not self.authorizer.can_edit_page(request.user, page_id):
            msg = f"user {request.user!r} may not edit page {page_id}"
            raise AuthorizationDenied(msg)

    def _check_page_template(self, request: BuilderRequest) -> None:
        template = request.form.get(PAGE_TEMPLATE_FIELD)
        if template not in self.config.allowed_page_templates:
            msg = f"page template {template!r} is not a builder template"
            raise UnsupportedPageType(msg)

    def _hide_header_requested(self, request: BuilderRequest) -> bool:
        value = request.form.get(self.config.hide_header_field)
        return value is not None and str(value).strip() == "1"


def build_hooks(
    config: BuilderConfig,
    store: PageStore,
    *,
    authorizer: Authorizer | None = None,
    renderer: ContentRenderer | None = None,
) -> BuilderHooks:
    """Construct hooks with the default collaborators for ``config``."""
    return BuilderHooks(
        config,
        store=store,
        authorizer=authorizer or EditorAuthorizer(config.editors),
        signer=NonceSigner(config.signing_secret()),
        renderer=renderer
        or ContentRenderer(JinjaTemplateDispatcher(templates_dir=config.templates_dir)),
    )


__all__ = ["BuilderHooks", "BuilderRequest", "build_hooks"]
