"""Map field types to the closed set of form input kinds.

The resolver inspects a :class:`~xsd_form_api.models.FieldType` once and
returns one member of a small tagged union:

======================  ==============  =====================================
Condition (in order)    Kind            Derived metadata
======================  ==============  =====================================
enumerations present    ``enum-select`` ordered (value, label) options
base ``boolean``        ``boolean``     none
base decimal/integer    ``numeric``     step (``1`` or ``any``), minimum
base date/dateTime      ``datetime``    whether the value is date only
anything else           ``text``        max/min length, pattern
======================  ==============  =====================================

Base types may carry a namespace prefix (``xs:decimal``); it is ignored.
A missing type never fails: callers pass ``None`` and get the default string
type, i.e. a plain text input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from .models import DEFAULT_FIELD_TYPE, FieldType

NUMERIC_BASES = {"decimal", "integer"}
DATETIME_BASES = {"date", "dateTime"}


@dataclass(frozen=True)
class EnumOption:
    value: str
    label: str
    definition: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"value": self.value, "label": self.label, "definition": self.definition}


@dataclass(frozen=True)
class EnumSelect:
    kind: ClassVar[str] = "enum-select"
    options: Tuple[EnumOption, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "options": [o.to_dict() for o in self.options]}


@dataclass(frozen=True)
class BooleanInput:
    kind: ClassVar[str] = "boolean"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind}


@dataclass(frozen=True)
class NumericInput:
    """Number input. ``step`` is ``"1"`` for integers and ``"any"`` otherwise."""

    kind: ClassVar[str] = "numeric"
    step: str = "any"
    minimum: Optional[str] = None
    total_digits: Optional[str] = None
    fraction_digits: Optional[str] = None

    @property
    def integer(self) -> bool:
        return self.step == "1"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "step": self.step,
            "min": self.minimum,
            "total_digits": self.total_digits,
            "fraction_digits": self.fraction_digits,
        }


@dataclass(frozen=True)
class DateTimeInput:
    kind: ClassVar[str] = "datetime"
    date_only: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "date_only": self.date_only}


@dataclass(frozen=True)
class TextInput:
    kind: ClassVar[str] = "text"
    max_length: Optional[str] = None
    min_length: Optional[str] = None
    pattern: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "max_length": self.max_length,
            "min_length": self.min_length,
            "pattern": self.pattern,
        }


InputKind = Union[EnumSelect, BooleanInput, NumericInput, DateTimeInput, TextInput]


def base_type_name(base: Optional[str]) -> str:
    """Strip any namespace prefix from an XSD base type name.

    >>> base_type_name("xs:dateTime")
    'dateTime'
    >>> base_type_name(None)
    'string'
    """
    if not base:
        return "string"
    return base.rsplit(":", 1)[-1]


def resolve_input_kind(field_type: Optional[FieldType]) -> InputKind:
    """Select the input kind for a field type.

    Args:
        field_type: Resolved type, or ``None`` when the ``xsdType`` lookup
            failed (treated as the default string type).

    Returns:
        One of :class:`EnumSelect`, :class:`BooleanInput`,
        :class:`NumericInput`, :class:`DateTimeInput`, :class:`TextInput`.
    """
    field_type = field_type or DEFAULT_FIELD_TYPE
    restriction = field_type.restriction
    base = base_type_name(restriction.base if restriction else None)
    facets = restriction.facets if restriction else None

    if restriction is not None and restriction.enumerations:
        return EnumSelect(
            options=tuple(
                EnumOption(
                    value=item.value,
                    label=item.label,
                    definition=item.documentation_definition,
                )
                for item in restriction.enumerations
            )
        )
    if base == "boolean":
        return BooleanInput()
    if base in NUMERIC_BASES:
        return NumericInput(
            step="1" if base == "integer" else "any",
            minimum=facets.min_inclusive if facets else None,
            total_digits=facets.total_digits if facets else None,
            fraction_digits=facets.fraction_digits if facets else None,
        )
    if base in DATETIME_BASES:
        return DateTimeInput(date_only=base == "date")
    if facets is None:
        return TextInput()
    return TextInput(
        max_length=facets.max_length,
        min_length=facets.min_length,
        pattern=facets.pattern,
    )
