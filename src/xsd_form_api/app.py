"""FastAPI application exposing XSD-derived form catalogs.

Serves the form structure (traversal order, input kinds, validation hints)
derived from the field catalogs and turns form submissions into ``Document``
XML.

Quick start (run the server)::

    uvicorn xsd_form_api.app:app --reload

Core endpoints (REST):

    GET  /health                          Basic health probe
    GET  /metadata                        Catalog provenance + ETag
    GET  /catalogs                        Loaded catalogs and their sizes
    GET  /catalogs/{name}/tree            Traversal rows (?collapsed=<path>)
    GET  /catalogs/{name}/fields?path=..  One descriptor, its input + children
    GET  /catalogs/{name}/form            Form rows with input kinds
    GET  /catalogs/{name}/search?query=.. Search by label, tag or path
    POST /catalogs/{name}/serialize       Submission -> JSON wrapped XML
    POST /catalogs/{name}/xml             Submission -> application/xml

Example: collapse one section of the message form::

    curl "http://localhost:8000/catalogs/message/tree?collapsed=GrpHdr" | jq .

Example: serialize a submission::

    curl -X POST http://localhost:8000/catalogs/message/xml \
         -H "Content-Type: application/json" \
         -d '{"values": {"GrpHdr.MsgId": "ABC123", "GrpHdr.NbOfTxs": "1"}}'

GraphQL endpoint (mounted at /graphql)::

    curl -X POST http://localhost:8000/graphql \
         -H "Content-Type: application/json" \
         -d '{"query": "{ catalogs { name totalFields } }"}'

Error handling:
    * 404 responses are wrapped with JSON payloads (``error``, ``detail``, ``path``).
    * A structurally corrupt catalog yields a 500 ``Malformed Catalog`` payload;
      no partial XML is ever returned.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .catalog import FieldCatalog
from .errors import MalformedCatalog
from .form_schema import FormSchemaBuilder, collapse_optional_groups
from .graphql_schema import graphql_router
from .repository import CatalogRepository, get_repository
from .serializer import SUCCESS_MESSAGE, render
from .tree import VisibilityState


app = FastAPI(
    title="XSD Form API",
    version=__version__,
    description="API for XSD-derived form catalogs and XML serialization of form submissions",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(graphql_router, tags=["GraphQL"])


@app.middleware("http")
async def time_requests(request: Request, call_next):
    """Attach response timing and API version headers."""
    start_time = time.time()
    response = await call_next(request)
    response.headers["X-Response-Time"] = f"{time.time() - start_time:.3f}s"
    response.headers["X-API-Version"] = __version__
    return response


class SubmissionRequest(BaseModel):
    """Form submission keyed by catalog path."""

    values: Dict[str, Any] = Field(
        ..., description="Mapping of field path to entered value, in form order"
    )


class SerializationResponse(BaseModel):
    """Serialized document plus acknowledgment."""

    xml: str = Field(..., description="XML document rooted at <Document>")
    element_count: int = Field(..., description="Number of elements written")
    message: str = Field(SUCCESS_MESSAGE, description="Acknowledgment message")


def _catalog(repo: CatalogRepository, name: str) -> FieldCatalog:
    try:
        return repo.get(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Catalog not found: {name}")


@app.get("/health")
def health(repo: CatalogRepository = Depends(get_repository)) -> Dict[str, Any]:
    """Health check endpoint."""
    return {"status": "healthy", "catalogs": repo.names()}


@app.get("/metadata")
def metadata(
    response: Response,
    if_none_match: Optional[str] = Header(None),
    repo: CatalogRepository = Depends(get_repository),
) -> Dict[str, object]:
    """Catalog provenance with conditional GET support via *ETag*."""
    if if_none_match and if_none_match == repo.etag:
        response.status_code = 304
        return {}

    response.headers["ETag"] = repo.etag
    response.headers["Last-Modified"] = repo.last_modified.strftime(
        "%a, %d %b %Y %H:%M:%S GMT"
    )
    response.headers["Cache-Control"] = "public, max-age=3600"
    return repo.metadata


@app.get("/catalogs")
def catalogs(repo: CatalogRepository = Depends(get_repository)) -> Dict[str, object]:
    """List loaded catalogs with descriptor and type counts."""
    return {"catalogs": [repo.get(name).summary() for name in repo.names()]}


@app.get("/catalogs/{name}/tree")
def tree(
    name: str,
    collapsed: List[str] = Query([], description="Group paths to hide"),
    repo: CatalogRepository = Depends(get_repository),
) -> Dict[str, object]:
    """Pre-order traversal rows of catalog *name*.

    Example::

        curl "http://localhost:8000/catalogs/header/tree?collapsed=Fr" | jq '.entries[].path'
    """
    catalog = _catalog(repo, name)
    entries = catalog.traverse(VisibilityState(collapsed))
    return {
        "catalog": name,
        "entries": [entry.to_dict() for entry in entries],
        "total": len(entries),
    }


@app.get("/catalogs/{name}/fields")
def fields(
    name: str,
    path: str = Query(..., description="Descriptor path"),
    repo: CatalogRepository = Depends(get_repository),
) -> Dict[str, object]:
    """Return one descriptor with its input kind, type and direct children."""
    catalog = _catalog(repo, name)
    descriptor = catalog.get(path)
    if descriptor is None:
        raise HTTPException(status_code=404, detail=f"Field not found: {path}")
    kind = catalog.input_kind(descriptor)
    return {
        "field": descriptor.to_dict(),
        "label": descriptor.label,
        "required": descriptor.required,
        "input": kind.to_dict() if kind else None,
        "type": None if descriptor.is_group else catalog.find_type(descriptor.xsd_type).to_dict(),
        "children": [child.to_dict() for child in catalog.children(path)],
        "descendants": catalog.descendant_paths(path),
    }


@app.get("/catalogs/{name}/form")
def form(
    name: str,
    collapsed: List[str] = Query([], description="Group paths to hide"),
    collapse_optional: bool = Query(
        False, description="Start with only required groups expanded"
    ),
    repo: CatalogRepository = Depends(get_repository),
) -> Dict[str, object]:
    """Form rows (traversal + input kinds) for catalog *name*."""
    catalog = _catalog(repo, name)
    state = collapse_optional_groups(catalog) if collapse_optional else VisibilityState()
    for path in collapsed:
        state.hide(path)
    return {"catalog": name, "rows": FormSchemaBuilder(catalog).build(state)}


@app.get("/catalogs/{name}/search")
def search(
    name: str,
    query: str = Query(..., min_length=2, description="Case-insensitive search"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of results"),
    repo: CatalogRepository = Depends(get_repository),
) -> Dict[str, object]:
    """Search descriptors by label, tag or path."""
    catalog = _catalog(repo, name)
    matches = catalog.search(query, limit=limit)
    return {
        "results": [
            {
                "path": d.path,
                "tag": d.tag,
                "label": d.label,
                "role": "group" if d.is_group else "field",
            }
            for d in matches
        ],
        "total": len(matches),
        "limited": len(matches) == limit,
    }


@app.post("/catalogs/{name}/serialize")
def serialize_submission(
    name: str,
    request: SubmissionRequest,
    repo: CatalogRepository = Depends(get_repository),
) -> SerializationResponse:
    """Serialize a submission and return the XML in a JSON envelope."""
    _catalog(repo, name)
    element = repo.serializer(name).to_element(request.values)
    return SerializationResponse(xml=render(element), element_count=len(element))


@app.post("/catalogs/{name}/xml")
def serialize_submission_xml(
    name: str,
    request: SubmissionRequest,
    repo: CatalogRepository = Depends(get_repository),
) -> Response:
    """Serialize a submission and return the raw XML document."""
    _catalog(repo, name)
    xml_text = repo.serializer(name).to_xml(request.values)
    return Response(content=xml_text, media_type="application/xml")


@app.exception_handler(404)
async def not_found_handler(request, exc):
    """Custom 404 handler with more helpful error messages."""
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "detail": (
                str(exc.detail)
                if hasattr(exc, "detail")
                else "The requested resource was not found"
            ),
            "path": str(request.url.path),
        },
    )


@app.exception_handler(MalformedCatalog)
async def malformed_catalog_handler(request, exc: MalformedCatalog):
    """Structural catalog corruption aborts the request."""
    return JSONResponse(
        status_code=500,
        content={
            "error": "Malformed Catalog",
            "detail": str(exc),
            "field_path": exc.path,
        },
    )


@app.exception_handler(500)
async def internal_error_handler(request, exc):
    """Custom 500 handler for internal errors."""
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred processing your request",
        },
    )
