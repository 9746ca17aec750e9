"""Gather sanitized section records from a section type registry."""

from __future__ import annotations

import logging
import typing as typ

from page_sections.sections import SectionList

if typ.TYPE_CHECKING:
    from page_sections.sections import SectionRecord, SectionRegistry

log = logging.getLogger(__name__)


class SectionCollector:
    """Invoke every registered save handler and assemble the page's sections."""

    def __init__(self, registry: SectionRegistry) -> None:
        self.registry = registry

    def collect(self) -> SectionList:
        """Return the sanitized sections in registry order.

        Handlers that report a removed section (``None`` or an empty record)
        contribute nothing, so a submission without sections yields an empty
        list. Exceptions raised by a handler propagate unchanged.
        """
        records: list[SectionRecord] = []
        for descriptor in self.registry:
            record = descriptor.save_handler()
            if record:
                records.append(record)
        sections = SectionList(records)
        log.debug(
            "collected %d of %d section types: %s",
            len(sections),
            len(self.registry),
            ", ".join(sections.section_types) or "none",
        )
        return sections


__all__ = ["SectionCollector"]
