"""Core records describing an XSD-derived field catalog.

Two catalogs feed the form layer:

* a *field catalog*: an ordered list of :class:`FieldDescriptor` records, each
  annotated with an id, a nesting level, a unique path and the path of its
  parent, mimicking the element hierarchy of the source XSD;
* a *type catalog*: :class:`FieldType` records referenced by name from
  ``FieldDescriptor.xsd_type`` and carrying the simple type restriction
  (base type, facets and enumerations).

Both are decoded from the camelCase JSON records produced by the schema
extraction tooling::

        {
            "id": 3, "level": 1, "tag": "MsgId",
            "path": "GrpHdr.MsgId", "parentPath": "GrpHdr",
            "xsdType": "Max35Text", "minOccurs": "1", "maxOccurs": "1",
            "isChoice": false,
            "documentationName": "Message Identification",
            "documentationDefinition": "Point to point reference...",
            "subPaths": []
        }

Design notes:
        * Records are frozen; catalogs are loaded once and never mutated.
        * Sequences are stored as tuples for the same reason.
        * ``to_dict`` emits the same camelCase keys that ``from_dict`` accepts so
            API payloads look like the source catalogs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import MalformedCatalog


@dataclass(frozen=True)
class EnumerationValue:
    """One allowed value of an enumerated simple type.

    Example:
        >>> EnumerationValue(value="CRED", documentation_name="Credit").label
        'Credit'
        >>> EnumerationValue(value="DEBT").label
        'DEBT'
    """

    value: str
    documentation_name: str = ""
    documentation_definition: str = ""

    @property
    def label(self) -> str:
        return self.documentation_name or self.value

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EnumerationValue":
        return cls(
            value=str(data["value"]),
            documentation_name=data.get("documentationName") or "",
            documentation_definition=data.get("documentationDefinition") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "documentationName": self.documentation_name,
            "documentationDefinition": self.documentation_definition,
        }


@dataclass(frozen=True)
class Facets:
    """Restriction facets. Advisory only; nothing enforces them server side."""

    pattern: Optional[str] = None
    min_inclusive: Optional[str] = None
    total_digits: Optional[str] = None
    fraction_digits: Optional[str] = None
    min_length: Optional[str] = None
    max_length: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["Facets"]:
        if not data:
            return None
        return cls(
            pattern=_opt_str(data.get("pattern")),
            min_inclusive=_opt_str(data.get("minInclusive")),
            total_digits=_opt_str(data.get("totalDigits")),
            fraction_digits=_opt_str(data.get("fractionDigits")),
            min_length=_opt_str(data.get("minLength")),
            max_length=_opt_str(data.get("maxLength")),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "pattern": self.pattern,
            "minInclusive": self.min_inclusive,
            "totalDigits": self.total_digits,
            "fractionDigits": self.fraction_digits,
            "minLength": self.min_length,
            "maxLength": self.max_length,
        }


@dataclass(frozen=True)
class Restriction:
    """``xs:restriction`` of a simple type.

    Attributes:
        base: Base primitive, usually prefixed (``xs:string``, ``xs:decimal``).
        facets: Optional constraint facets.
        enumerations: Ordered allowed values; when present they take precedence
            over the base type for input selection.
    """

    base: str = "xs:string"
    facets: Optional[Facets] = None
    enumerations: Tuple[EnumerationValue, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["Restriction"]:
        if not data:
            return None
        return cls(
            base=data.get("base") or "xs:string",
            facets=Facets.from_dict(data.get("facets")),
            enumerations=tuple(
                EnumerationValue.from_dict(item)
                for item in (data.get("enumerations") or [])
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base": self.base,
            "facets": self.facets.to_dict() if self.facets else None,
            "enumerations": (
                [item.to_dict() for item in self.enumerations]
                if self.enumerations
                else None
            ),
        }


@dataclass(frozen=True)
class FieldType:
    """Named simple type referenced by ``FieldDescriptor.xsd_type``."""

    name: str
    restriction: Optional[Restriction] = None
    documentation_name: str = ""
    documentation_definition: str = ""
    definition_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldType":
        """Decode one type catalog record, restriction included.

        Raises:
            MalformedCatalog: If the record, its restriction, facets or
                enumeration entries are not JSON objects, or the name is missing.
        """
        if not isinstance(data, Mapping):
            raise MalformedCatalog(f"Field type record must be a JSON object: {data!r}")
        try:
            return cls(
                name=str(data["name"]),
                restriction=Restriction.from_dict(data.get("restriction")),
                documentation_name=data.get("documentationName") or "",
                documentation_definition=data.get("documentationDefinition") or "",
                definition_type=data.get("definitionType") or "",
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise MalformedCatalog(f"Invalid field type record {data!r}: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "documentationName": self.documentation_name,
            "documentationDefinition": self.documentation_definition,
            "definitionType": self.definition_type,
            "restriction": self.restriction.to_dict() if self.restriction else None,
        }


# Used whenever an ``xsdType`` name has no entry in the type catalog.
DEFAULT_FIELD_TYPE = FieldType(name="string", restriction=Restriction(base="xs:string"))


@dataclass(frozen=True)
class FieldDescriptor:
    """One element of the XSD-derived form.

    A descriptor with ``xsd_type is None`` is a *group header*: it has no value
    of its own and only groups its children. Any other descriptor is a *leaf
    field* bound to a single submitted value keyed by ``path``.

    Attributes:
        id: Stable ordering key within the catalog.
        level: Nesting depth, 0 for top-level sections.
        tag: XML element local name used when serializing.
        path: Unique key; doubles as the submission key.
        parent_path: Path of the parent descriptor, empty for top-level entries.
        xsd_type: Name of a :class:`FieldType`, or ``None`` for group headers.
        min_occurs: Occurrence lower bound as found in the XSD (``"1"`` = required).
        max_occurs: Occurrence upper bound (``"unbounded"`` allowed).
        is_choice: Marks mutually-alternative siblings (presentational only).
        documentation_name: Human readable label.
        documentation_definition: Help text.
        sub_paths: Cached descendant paths from the extraction tool. Not trusted;
            see :meth:`FieldCatalog.descendant_paths`.

    Example:
        >>> d = FieldDescriptor(id=1, level=0, tag="GrpHdr", path="GrpHdr")
        >>> d.is_group, d.label, d.required
        (True, 'GrpHdr', False)
    """

    id: int
    level: int
    tag: str
    path: str
    parent_path: str = ""
    xsd_type: Optional[str] = None
    min_occurs: str = "0"
    max_occurs: str = "1"
    is_choice: bool = False
    documentation_name: str = ""
    documentation_definition: str = ""
    sub_paths: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def is_group(self) -> bool:
        return self.xsd_type is None

    @property
    def is_top_level(self) -> bool:
        return not self.parent_path

    @property
    def required(self) -> bool:
        return self.min_occurs == "1"

    @property
    def repeatable(self) -> bool:
        return self.max_occurs == "unbounded" or (
            self.max_occurs.isdigit() and int(self.max_occurs) > 1
        )

    @property
    def label(self) -> str:
        return self.documentation_name or self.tag

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldDescriptor":
        """Decode one catalog record.

        Raises:
            MalformedCatalog: If the record is not a JSON object, a mandatory
                key is missing or ``id``/``level`` are not integers.
        """
        if not isinstance(data, Mapping):
            raise MalformedCatalog(f"Field descriptor record must be a JSON object: {data!r}")
        try:
            return cls(
                id=_as_int(data["id"]),
                level=_as_int(data["level"]),
                tag=str(data["tag"]),
                path=str(data["path"]),
                parent_path=data.get("parentPath") or "",
                xsd_type=data.get("xsdType"),
                min_occurs=str(data.get("minOccurs", "0")),
                max_occurs=str(data.get("maxOccurs", "1")),
                is_choice=bool(data.get("isChoice", False)),
                documentation_name=data.get("documentationName") or "",
                documentation_definition=data.get("documentationDefinition") or "",
                sub_paths=tuple(data.get("subPaths") or ()),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise MalformedCatalog(
                f"Invalid field descriptor record {data!r}: {exc}",
                path=data.get("path"),
            ) from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "level": self.level,
            "tag": self.tag,
            "path": self.path,
            "parentPath": self.parent_path,
            "xsdType": self.xsd_type,
            "minOccurs": self.min_occurs,
            "maxOccurs": self.max_occurs,
            "isChoice": self.is_choice,
            "documentationName": self.documentation_name,
            "documentationDefinition": self.documentation_definition,
            "subPaths": list(self.sub_paths),
        }


def _as_int(value: Any) -> int:
    """Integer catalog value; rejects booleans and non-integral numbers."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
