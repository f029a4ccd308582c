"""GraphQL endpoint tests against the fixture catalog."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from xsd_form_api.app import app
from xsd_form_api.graphql_schema import schema
from xsd_form_api.repository import CatalogRepository, RepositoryConfig, get_repository

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "catalog"


@pytest.fixture
def client():
    app.dependency_overrides[get_repository] = lambda: CatalogRepository(
        RepositoryConfig(catalog_dir=FIXTURE_DIR)
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def run_query(client, query, variables=None):
    response = client.post("/graphql", json={"query": query, "variables": variables or {}})
    assert response.status_code == 200
    return response.json()


def test_health_query(client):
    result = run_query(client, "{ health }")
    assert result["data"]["health"] == "OK"


def test_catalogs_query(client):
    result = run_query(client, "{ catalogs { name totalFields totalGroups maxDepth } }")
    assert result["data"]["catalogs"] == [
        {"name": "message", "totalFields": 7, "totalGroups": 2, "maxDepth": 3}
    ]


def test_traversal_query_with_collapsed_group(client):
    query = """
        query Rows($hidden: [String!]) {
            traversal(catalog: "message", collapsed: $hidden) {
                role depth expanded field { path }
            }
        }
    """
    result = run_query(client, query, {"hidden": ["Doc.A.B"]})
    rows = result["data"]["traversal"]
    assert [row["field"]["path"] for row in rows[:3]] == ["Doc.A", "Doc.A.B", "Doc.A.C"]
    assert rows[1] == {"role": "group", "depth": 1, "expanded": False, "field": {"path": "Doc.A.B"}}


def test_field_query_with_input(client):
    query = """
        {
            field(catalog: "message", path: "Doc.A.B.D") {
                tag label parentPath xsdType isChoice required
                input { kind options { value label } }
            }
        }
    """
    field = run_query(client, query)["data"]["field"]
    assert field["tag"] == "D"
    assert field["parentPath"] == "Doc.A.B"
    assert field["isChoice"] is True
    assert field["input"] == {
        "kind": "enum-select",
        "options": [{"value": "1", "label": "One"}, {"value": "2", "label": "2"}],
    }


def test_field_query_unknown_path(client):
    result = run_query(client, '{ field(catalog: "message", path: "Nope") { path } }')
    assert result["data"]["field"] is None


def test_unknown_catalog_is_an_error(client):
    result = run_query(client, '{ traversal(catalog: "nope") { depth } }')
    assert result["data"] is None
    assert result["errors"][0]["message"] == "Catalog not found: nope"


def test_serialize_mutation(client):
    mutation = """
        mutation {
            serialize(catalog: "message", entries: [
                { path: "Header.MsgId", value: "ABC123" },
                { path: "Header.Note", value: "" },
                { path: "Other", value: "x" }
            ]) { xml elementCount message }
        }
    """
    result = run_query(client, mutation)["data"]["serialize"]
    assert result["elementCount"] == 2
    assert result["message"] == "XML generated successfully!"
    assert result["xml"] == (
        "<Document>\n  <MsgId>ABC123</MsgId>\n  <unknown>x</unknown>\n</Document>"
    )


def test_schema_sdl():
    sdl = schema.as_str()
    assert "type Query" in sdl
    assert "type Mutation" in sdl
    assert "input SubmissionEntry" in sdl


def test_serialize_mutation_accepts_booleans_and_numbers(client):
    mutation = """
        mutation Submit($entries: [SubmissionEntry!]!) {
            serialize(catalog: "message", entries: $entries) { xml elementCount }
        }
    """
    entries = [
        {"path": "Header.Flag", "value": True},
        {"path": "Header.Count", "value": 3},
        {"path": "Doc.A.C", "value": 12.5},
        {"path": "Header.MsgId", "value": False},
    ]
    result = run_query(client, mutation, {"entries": entries})["data"]["serialize"]
    assert result["elementCount"] == 3
    assert result["xml"] == (
        "<Document>\n  <Flag>true</Flag>\n  <Count>3</Count>\n  <C>12.5</C>\n</Document>"
    )
