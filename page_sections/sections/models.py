"""Shared dataclasses describing builder sections.

A save cycle produces one :class:`SectionList` holding frozen
:class:`SectionRecord` values in submission order. Records are rebuilt from
stored metadata with :meth:`SectionList.from_payload` and serialized back with
:meth:`SectionList.to_payload`.

Examples
--------
>>> sections = SectionList(
...     [SectionRecord("text", fields={"title": "Intro"}), SectionRecord("feature")]
... )
>>> sections.get(0)["title"]
'Intro'
>>> sections.get(5) is None
True
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ


@dc.dataclass(frozen=True, slots=True)
class SectionRecord:
    """Sanitized data for one section of a composed page.

    Attributes
    ----------
    section_type : str
        Identifier of the section type; selects the template used to render it.
    order : tuple[str, ...] or None
        Layout order tokens (for example ``("text", "image")``), when the
        section type supports reordering.
    fields : dict[str, Any]
        Remaining sanitized values, available by item access and as template
        attributes.
    """

    section_type: str
    order: tuple[str, ...] | None = None
    fields: dict[str, typ.Any] = dc.field(default_factory=dict)

    def __getitem__(self, key: str) -> typ.Any:
        return self.fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def __bool__(self) -> bool:
        return bool(self.section_type)

    def get(self, key: str, default: typ.Any = None) -> typ.Any:
        """Return a sanitized field value or ``default`` when it is missing."""
        return self.fields.get(key, default)

    def to_mapping(self) -> dict[str, typ.Any]:
        """Return a plain mapping suitable for metadata storage."""
        return {
            "section_type": self.section_type,
            "order": list(self.order) if self.order is not None else None,
            "fields": dict(self.fields),
        }

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> SectionRecord:
        """Rebuild a record from a mapping produced by :meth:`to_mapping`."""
        order = payload.get("order")
        fields = payload.get("fields") or {}
        return cls(
            section_type=str(payload.get("section_type") or ""),
            order=tuple(str(item) for item in order) if order is not None else None,
            fields=dict(fields),
        )


@dc.dataclass(frozen=True, slots=True)
class SectionTypeDescriptor:
    """A registered section type and the handler that saves it."""

    type_id: str
    save_handler: cabc.Callable[[], SectionRecord | None]


@dc.dataclass(frozen=True, slots=True)
class LayoutOrder:
    """Which side of a feature section holds the image and which the text."""

    image: str = "left"
    text: str = "right"

    def as_dict(self) -> dict[str, str]:
        return {"image": self.image, "text": self.text}


class SectionList(cabc.Sequence[SectionRecord]):
    """Ordered, immutable run of sections for one page.

    Order matches submission order exactly and is never sorted. Indexing is
    zero-based; :meth:`get` returns ``None`` instead of raising when the index
    falls outside the list.
    """

    __slots__ = ("_records",)

    def __init__(self, records: cabc.Iterable[SectionRecord] = ()) -> None:
        self._records: tuple[SectionRecord, ...] = tuple(records)

    @typ.overload
    def __getitem__(self, index: int) -> SectionRecord: ...

    @typ.overload
    def __getitem__(self, index: slice) -> SectionList: ...

    def __getitem__(self, index: int | slice) -> SectionRecord | SectionList:
        if isinstance(index, slice):
            return SectionList(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SectionList):
            return self._records == other._records
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SectionList({list(self._records)!r})"

    def get(self, index: int) -> SectionRecord | None:
        """Return the record at ``index`` or ``None`` when out of bounds."""
        if 0 <= index < len(self._records):
            return self._records[index]
        return None

    @property
    def section_types(self) -> list[str]:
        return [record.section_type for record in self._records]

    def to_payload(self) -> list[dict[str, typ.Any]]:
        """Serialize the list into plain mappings for metadata storage."""
        return [record.to_mapping() for record in self._records]

    @classmethod
    def from_payload(cls, payload: object) -> SectionList:
        """Rebuild a list from stored metadata, ignoring malformed entries."""
        if not isinstance(payload, list):
            return cls()
        records = [
            SectionRecord.from_mapping(entry)
            for entry in payload
            if isinstance(entry, cabc.Mapping)
        ]
        return cls(record for record in records if record)


__all__ = ["LayoutOrder", "SectionList", "SectionRecord", "SectionTypeDescriptor"]
