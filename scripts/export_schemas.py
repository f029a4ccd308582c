#!/usr/bin/env python
"""Export API schema artifacts and the bundled form definitions.

Usage:
    python scripts/export_schemas.py --out-dir build/schemas

Outputs:
    openapi.json              FastAPI OpenAPI spec
    graphql_schema.graphql    GraphQL SDL
    forms/<catalog>.json      Form rows for each bundled catalog (with --forms)
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path

from xsd_form_api.app import app
from xsd_form_api.catalog import available_catalogs, load_named_catalog
from xsd_form_api.form_schema import FormSchemaBuilder
from xsd_form_api.graphql_schema import schema as graphql_schema
from xsd_form_api.repository import DEFAULT_CATALOG_DIR


def export_openapi(out_dir: Path) -> Path:
    path = out_dir / "openapi.json"
    path.write_text(json.dumps(app.openapi(), indent=2))
    return path


def export_graphql(out_dir: Path) -> Path:
    path = out_dir / "graphql_schema.graphql"
    path.write_text(graphql_schema.as_str())
    return path


def export_forms(out_dir: Path, catalog_dir: Path) -> list:
    forms_dir = out_dir / "forms"
    forms_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for name in available_catalogs(catalog_dir):
        rows = FormSchemaBuilder(load_named_catalog(catalog_dir, name)).build()
        path = forms_dir / f"{name}.json"
        path.write_text(json.dumps(rows, indent=2))
        written.append(path)
    return written


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--out-dir", default="build/schemas", help="Output directory")
    parser.add_argument("--forms", action="store_true", help="Also export form rows")
    parser.add_argument(
        "--catalog-dir", default=str(DEFAULT_CATALOG_DIR), help="Catalog directory for --forms"
    )
    args = parser.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    print(f"Exported OpenAPI -> {export_openapi(out_dir)}")
    print(f"Exported GraphQL SDL -> {export_graphql(out_dir)}")
    if args.forms:
        for path in export_forms(out_dir, Path(args.catalog_dir)):
            print(f"Exported form rows -> {path}")


if __name__ == "__main__":  # pragma: no cover
    main()
