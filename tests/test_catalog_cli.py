import json
from pathlib import Path

import pytest

from xsd_form_api.catalog_cli import main

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "catalog"


def test_check_valid_catalog(capsys):
    assert main(["check", str(FIXTURE_DIR)]) == 0
    out = capsys.readouterr().out
    assert "✓ Catalog 'message' is valid" in out
    assert "groups: 2" in out
    assert "fields: 7" in out


def test_check_malformed_catalog(capsys):
    assert main(["check", str(FIXTURE_DIR / "malformed")]) == 1
    out = capsys.readouterr().out
    assert "✗ Catalog 'message' is invalid" in out
    assert "Doc.X" in out


def test_check_missing_catalog(tmp_path, capsys):
    assert main(["check", str(tmp_path), "--catalog", "header"]) == 1
    assert "is invalid" in capsys.readouterr().out


def test_tree_marks_collapsed_and_required(capsys):
    assert main(["tree", str(FIXTURE_DIR), "--collapse", "Doc.A.B"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == " Section A [Doc.A] *"
    assert lines[1] == "  +B [Doc.A.B]"
    assert lines[2] == "   Amount C [Doc.A.C]"
    assert len(lines) == 8


def test_serialize_to_stdout(capsys):
    assert main(["serialize", str(FIXTURE_DIR), str(FIXTURE_DIR / "submission.json")]) == 0
    out = capsys.readouterr().out
    assert out.startswith("<Document>\n  <MsgId>ABC123</MsgId>")
    assert "<Flag>" not in out


def test_serialize_to_file(tmp_path):
    output = tmp_path / "document.xml"
    args = ["serialize", str(FIXTURE_DIR), str(FIXTURE_DIR / "submission.json"), "-o", str(output)]
    assert main(args) == 0
    assert output.read_text().endswith("</Document>\n")


def test_serialize_rejects_non_object_submission(tmp_path, capsys):
    submission = tmp_path / "submission.json"
    submission.write_text(json.dumps(["Header.MsgId", "ABC123"]))
    assert main(["serialize", str(FIXTURE_DIR), str(submission)]) == 1
    assert "must be a JSON object" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage: xsd-form" in capsys.readouterr().out


def test_unknown_catalog_choice():
    with pytest.raises(SystemExit):
        main(["check", str(FIXTURE_DIR), "--catalog", "bogus"])


@pytest.mark.parametrize(
    "types",
    [["oops"], [{"name": "T", "restriction": "xs:string"}]],
)
def test_check_undecodable_type_catalog(tmp_path, capsys, types):
    fields = [{"id": 1, "level": 0, "tag": "T", "path": "T", "xsdType": "T"}]
    (tmp_path / "messageFields.json").write_text(json.dumps(fields))
    (tmp_path / "fieldTypes.json").write_text(json.dumps(types))
    assert main(["check", str(tmp_path)]) == 1
    assert "✗ Catalog 'message' is invalid" in capsys.readouterr().out
