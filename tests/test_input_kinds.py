from pathlib import Path

import pytest

from xsd_form_api.catalog import load_named_catalog
from xsd_form_api.input_kinds import (
    BooleanInput,
    DateTimeInput,
    EnumSelect,
    NumericInput,
    TextInput,
    base_type_name,
    resolve_input_kind,
)
from xsd_form_api.models import FieldType

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "catalog"


@pytest.fixture(scope="module")
def catalog():
    return load_named_catalog(FIXTURE_DIR, "message")


def _kind(catalog, path):
    return catalog.input_kind(catalog.get(path))


def test_enumerations_take_precedence_over_decimal_base(catalog):
    kind = _kind(catalog, "Doc.A.B.D")
    assert isinstance(kind, EnumSelect)
    assert [(o.value, o.label) for o in kind.options] == [("1", "One"), ("2", "2")]
    assert kind.options[0].definition == "First code."


def test_boolean_base(catalog):
    assert isinstance(_kind(catalog, "Header.Flag"), BooleanInput)


def test_decimal_is_numeric_with_any_step(catalog):
    kind = _kind(catalog, "Doc.A.C")
    assert kind == NumericInput(step="any", minimum="0", total_digits="18", fraction_digits="5")
    assert not kind.integer


def test_integer_is_numeric_with_unit_step(catalog):
    kind = _kind(catalog, "Header.Count")
    assert isinstance(kind, NumericInput)
    assert kind.step == "1"
    assert kind.minimum == "1"
    assert kind.integer


def test_date_base_is_date_only(catalog):
    assert _kind(catalog, "Header.Created") == DateTimeInput(date_only=True)


def test_string_with_facets_carries_text_hints(catalog):
    kind = _kind(catalog, "Header.MsgId")
    assert kind == TextInput(max_length="35", min_length="1", pattern="[A-Z0-9]+")
    assert kind.to_dict() == {
        "kind": "text",
        "max_length": "35",
        "min_length": "1",
        "pattern": "[A-Z0-9]+",
    }


def test_unknown_type_name_falls_back_to_text(catalog):
    assert _kind(catalog, "Header.Note") == TextInput()


def test_group_has_no_input_kind(catalog):
    assert catalog.input_kind(catalog.get("Doc.A")) is None


def test_none_resolves_to_default_text():
    assert resolve_input_kind(None) == TextInput()


def test_date_time_base_without_prefix():
    field_type = FieldType.from_dict({"name": "ISODateTime", "restriction": {"base": "dateTime"}})
    assert resolve_input_kind(field_type) == DateTimeInput(date_only=False)


def test_type_without_restriction_is_text():
    assert resolve_input_kind(FieldType(name="Opaque")) == TextInput()


@pytest.mark.parametrize(
    "base, expected",
    [("xs:decimal", "decimal"), ("xsd:boolean", "boolean"), ("date", "date"), ("", "string")],
)
def test_base_type_name(base, expected):
    assert base_type_name(base) == expected


def test_kind_tags():
    assert EnumSelect(options=()).to_dict() == {"kind": "enum-select", "options": []}
    assert BooleanInput().to_dict() == {"kind": "boolean"}
    assert NumericInput().to_dict()["kind"] == "numeric"
    assert DateTimeInput().to_dict() == {"kind": "datetime", "date_only": False}
