import json
import os
import subprocess
import sys
from pathlib import Path

from xsd_form_api.app import app
from xsd_form_api.graphql_schema import schema as graphql_schema

ROOT = Path(__file__).resolve().parents[1]
EXPORT_SCRIPT = ROOT / "scripts" / "export_schemas.py"


def test_openapi_contains_catalog_paths():
    spec = app.openapi()
    assert "/metadata" in spec["paths"]
    assert "/catalogs/{name}/serialize" in spec["paths"]
    assert spec["info"]["title"] == "XSD Form API"


def test_graphql_schema_basic_defs():
    sdl = graphql_schema.as_str()
    assert "type Query" in sdl
    assert "type Mutation" in sdl


def test_export_script_runs(tmp_path):
    out_dir = tmp_path / "schemas"
    cmd = [sys.executable, str(EXPORT_SCRIPT), "--out-dir", str(out_dir), "--forms"]
    env = {**os.environ, "PYTHONPATH": str(ROOT / "src")}
    subprocess.check_call(cmd, env=env)
    openapi_path = out_dir / "openapi.json"
    assert openapi_path.exists()
    assert (out_dir / "graphql_schema.graphql").exists()
    assert json.loads(openapi_path.read_text()).get("openapi")
    rows = json.loads((out_dir / "forms" / "message.json").read_text())
    assert rows[0]["path"] == "GrpHdr"
    assert (out_dir / "forms" / "header.json").exists()
