"""Section records, the section type registry, and field sanitizers."""

from .models import LayoutOrder, SectionList, SectionRecord, SectionTypeDescriptor
from .registry import (
    BUILTIN_SECTION_TYPES,
    DEFAULT_SECTION_TYPES,
    SectionRegistry,
    build_registry,
)
from .sanitize import process_order, sanitize_html, sanitize_text

__all__ = [
    "BUILTIN_SECTION_TYPES",
    "DEFAULT_SECTION_TYPES",
    "LayoutOrder",
    "SectionList",
    "SectionRecord",
    "SectionRegistry",
    "SectionTypeDescriptor",
    "build_registry",
    "process_order",
    "sanitize_html",
    "sanitize_text",
]
