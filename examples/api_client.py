#!/usr/bin/env python3
"""
Example client for the XSD Form API.

Walks a catalog the way a form front end would: list the catalogs, render
the traversal with optional groups collapsed, inspect a field's input kind,
then submit values and print the generated XML.
"""

from typing import Any, Dict, Iterable, List, Optional

import httpx


class XSDFormClient:
    """Client for interacting with the XSD Form API."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = base_url
        self.client = httpx.Client(base_url=base_url, timeout=30.0)
        self.etag_cache: Dict[str, str] = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.client.close()

    def get_health(self) -> Dict:
        response = self.client.get("/health")
        response.raise_for_status()
        return response.json()

    def get_metadata(self, use_cache: bool = True) -> Optional[Dict]:
        """
        Get catalog metadata with ETag support.

        Returns:
            Metadata dict or None if not modified (304)
        """
        headers = {}
        if use_cache and "metadata" in self.etag_cache:
            headers["If-None-Match"] = self.etag_cache["metadata"]

        response = self.client.get("/metadata", headers=headers)
        if response.status_code == 304:
            return None

        response.raise_for_status()
        if "ETag" in response.headers:
            self.etag_cache["metadata"] = response.headers["ETag"]
        return response.json()

    def list_catalogs(self) -> List[Dict]:
        response = self.client.get("/catalogs")
        response.raise_for_status()
        return response.json()["catalogs"]

    def get_tree(self, catalog: str, collapsed: Iterable[str] = ()) -> List[Dict]:
        """
        Get the traversal rows of a catalog.

        Args:
            catalog: Catalog name (``header`` or ``message``)
            collapsed: Group paths whose subtrees should be hidden
        """
        response = self.client.get(
            f"/catalogs/{catalog}/tree", params={"collapsed": list(collapsed)}
        )
        response.raise_for_status()
        return response.json()["entries"]

    def get_field(self, catalog: str, path: str) -> Dict:
        response = self.client.get(f"/catalogs/{catalog}/fields", params={"path": path})
        response.raise_for_status()
        return response.json()

    def get_form(self, catalog: str, collapse_optional: bool = False) -> List[Dict]:
        response = self.client.get(
            f"/catalogs/{catalog}/form", params={"collapse_optional": collapse_optional}
        )
        response.raise_for_status()
        return response.json()["rows"]

    def search(self, catalog: str, query: str, limit: int = 100) -> List[Dict]:
        response = self.client.get(
            f"/catalogs/{catalog}/search", params={"query": query, "limit": limit}
        )
        response.raise_for_status()
        return response.json()["results"]

    def serialize(self, catalog: str, values: Dict[str, Any]) -> Dict:
        """Submit ``path -> value`` entries and return the JSON envelope."""
        response = self.client.post(f"/catalogs/{catalog}/serialize", json={"values": values})
        response.raise_for_status()
        return response.json()

    def serialize_xml(self, catalog: str, values: Dict[str, Any]) -> str:
        response = self.client.post(f"/catalogs/{catalog}/xml", json={"values": values})
        response.raise_for_status()
        return response.text

    def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict:
        response = self.client.post(
            "/graphql", json={"query": query, "variables": variables or {}}
        )
        response.raise_for_status()
        body = response.json()
        if body.get("errors"):
            raise RuntimeError(body["errors"][0]["message"])
        return body["data"]


def print_rows(rows: List[Dict]) -> None:
    for row in rows:
        marker = "+" if row["role"] == "group" and not row["expanded"] else " "
        suffix = f" ({row['input']['kind']})" if row.get("input") else ""
        print(f"   {'  ' * row['depth']}{marker}{row['label']}{suffix}")


def main():
    with XSDFormClient() as client:
        print("1. Checking API health...")
        health = client.get_health()
        print(f"   Status: {health['status']}, catalogs: {', '.join(health['catalogs'])}")

        print("\n2. Loaded catalogs...")
        for summary in client.list_catalogs():
            print(
                f"   {summary['name']}: {summary['total_groups']} groups, "
                f"{summary['total_fields']} fields, depth {summary['max_depth']}"
            )

        print("\n3. Message form with optional groups collapsed...")
        print_rows(client.get_form("message", collapse_optional=True))

        print("\n4. Inspecting a field...")
        try:
            info = client.get_field("message", "CdtTrfTxInf.ChrgBr")
            options = [o["value"] for o in info["input"].get("options", [])]
            print(f"   {info['label']}: {info['input']['kind']} {options}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                print("   Field not found in catalog")
            else:
                raise

        print("\n5. Searching for 'amount'...")
        for result in client.search("message", "amount", limit=5):
            print(f"   {result['label']} [{result['path']}]")

        print("\n6. Serializing a submission...")
        result = client.serialize(
            "message",
            {
                "GrpHdr.MsgId": "MSG-0001",
                "GrpHdr.NbOfTxs": "1",
                "GrpHdr.SttlmInf.SttlmMtd": "CLRG",
                "CdtTrfTxInf.ChrgBr": "SHAR",
                "CdtTrfTxInf.Dbtr.Nm": "",
            },
        )
        print(f"   {result['message']} ({result['element_count']} elements)")
        print(result["xml"])

        print("\n7. Same catalog over GraphQL...")
        data = client.graphql('{ catalogs { name totalFields } }')
        for summary in data["catalogs"]:
            print(f"   {summary['name']}: {summary['totalFields']} fields")

        print("\n8. Testing caching with metadata...")
        client.get_metadata()
        if client.get_metadata(use_cache=True) is None:
            print("   Second request: Using cache (304 Not Modified)")
        else:
            print("   Second request: Data received (cache miss)")


if __name__ == "__main__":
    try:
        main()
    except httpx.ConnectError:
        print("\nError: Could not connect to API server.")
        print("Make sure the server is running: python -m xsd_form_api.run_server")
