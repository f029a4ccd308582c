"""GraphQL schema for the XSD Form API.

Mirrors the REST surface for clients that prefer a single query endpoint:
catalog listing, traversal rows, single field lookup, and submission
serialization.

Example Queries (GraphiQL / curl)
---------------------------------
::

        query {
            catalogs { name totalFields totalGroups }
            traversal(catalog: "message", collapsed: ["GrpHdr"]) {
                role depth expanded field { path tag label }
            }
        }

        query {
            field(catalog: "message", path: "GrpHdr.MsgId") {
                label required input { kind maxLength pattern }
            }
        }

Example Mutation::

        mutation {
            serialize(catalog: "message",
                      entries: [{ path: "GrpHdr.MsgId", value: "ABC123" }]) {
                xml elementCount message
            }
        }

The repository is injected through the router's context getter, which
resolves :func:`~xsd_form_api.repository.get_repository` as a FastAPI
dependency, so dependency overrides apply here as well as to REST routes.
``QueryDepthLimiter`` caps nesting at 10.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import strawberry
from fastapi import Depends
from strawberry.extensions import QueryDepthLimiter
from strawberry.fastapi import GraphQLRouter
from strawberry.scalars import JSON
from strawberry.types import Info

from .catalog import FieldCatalog
from .input_kinds import EnumSelect, InputKind, NumericInput, TextInput
from .models import FieldDescriptor as FieldDescriptorModel
from .repository import CatalogRepository, get_repository
from .serializer import SUCCESS_MESSAGE, render
from .tree import TraversalEntry as TraversalEntryModel
from .tree import VisibilityState


@strawberry.type
class EnumOption:
    value: str
    label: str


@strawberry.type
class InputDescriptor:
    """Flattened view of the resolved input kind."""

    kind: str
    step: Optional[str] = None
    minimum: Optional[str] = None
    max_length: Optional[str] = None
    min_length: Optional[str] = None
    pattern: Optional[str] = None
    options: List[EnumOption] = strawberry.field(default_factory=list)

    @classmethod
    def from_model(cls, kind: InputKind) -> "InputDescriptor":
        result = cls(kind=kind.kind)
        if isinstance(kind, EnumSelect):
            result.options = [EnumOption(value=o.value, label=o.label) for o in kind.options]
        elif isinstance(kind, NumericInput):
            result.step = kind.step
            result.minimum = kind.minimum
        elif isinstance(kind, TextInput):
            result.max_length = kind.max_length
            result.min_length = kind.min_length
            result.pattern = kind.pattern
        return result


@strawberry.type
class FieldNode:
    """GraphQL view of a field descriptor."""

    id: int
    level: int
    tag: str
    path: str
    parent_path: str
    xsd_type: Optional[str]
    label: str
    description: Optional[str]
    required: bool
    is_choice: bool
    input: Optional[InputDescriptor] = None

    @classmethod
    def from_model(cls, descriptor: FieldDescriptorModel, catalog: FieldCatalog) -> "FieldNode":
        kind = catalog.input_kind(descriptor)
        return cls(
            id=descriptor.id,
            level=descriptor.level,
            tag=descriptor.tag,
            path=descriptor.path,
            parent_path=descriptor.parent_path,
            xsd_type=descriptor.xsd_type,
            label=descriptor.label,
            description=descriptor.documentation_definition or None,
            required=descriptor.required,
            is_choice=descriptor.is_choice,
            input=InputDescriptor.from_model(kind) if kind else None,
        )


@strawberry.type
class TraversalItem:
    role: str
    depth: int
    expanded: bool
    field: FieldNode

    @classmethod
    def from_model(cls, entry: TraversalEntryModel, catalog: FieldCatalog) -> "TraversalItem":
        return cls(
            role=entry.role.value,
            depth=entry.depth,
            expanded=entry.expanded,
            field=FieldNode.from_model(entry.descriptor, catalog),
        )


@strawberry.type
class CatalogSummary:
    name: str
    total_fields: int
    total_groups: int
    total_types: int
    max_depth: int


@strawberry.type
class SerializationResult:
    xml: str
    element_count: int
    message: str


@strawberry.input
class SubmissionEntry:
    """One submitted value; entries are serialized in list order.

    ``value`` is any JSON scalar, so booleans and numbers are coerced the same
    way as in the REST submission body.
    """

    path: str
    value: Optional[JSON] = None


def _repository(info: Info) -> CatalogRepository:
    return info.context["repository"]


def _catalog(info: Info, name: str) -> FieldCatalog:
    repo = _repository(info)
    if name not in repo.catalogs:
        raise ValueError(f"Catalog not found: {name}")
    return repo.get(name)


@strawberry.type
class Query:
    """Root query type."""

    @strawberry.field
    async def health(self) -> str:
        return "OK"

    @strawberry.field
    async def catalogs(self, info: Info) -> List[CatalogSummary]:
        repo = _repository(info)
        return [CatalogSummary(**repo.get(name).summary()) for name in repo.names()]

    @strawberry.field
    async def traversal(
        self, info: Info, catalog: str, collapsed: Optional[List[str]] = None
    ) -> List[TraversalItem]:
        """Pre-order rows of ``catalog`` with the given groups hidden."""
        field_catalog = _catalog(info, catalog)
        entries = field_catalog.traverse(VisibilityState(collapsed or []))
        return [TraversalItem.from_model(entry, field_catalog) for entry in entries]

    @strawberry.field
    async def field(self, info: Info, catalog: str, path: str) -> Optional[FieldNode]:
        field_catalog = _catalog(info, catalog)
        descriptor = field_catalog.get(path)
        if descriptor is None:
            return None
        return FieldNode.from_model(descriptor, field_catalog)


@strawberry.type
class Mutation:
    """Root mutation type."""

    @strawberry.mutation
    async def serialize(
        self, info: Info, catalog: str, entries: List[SubmissionEntry]
    ) -> SerializationResult:
        """Serialize submitted entries to ``Document`` XML."""
        _catalog(info, catalog)
        submission = {entry.path: entry.value for entry in entries}
        element = _repository(info).serializer(catalog).to_element(submission)
        return SerializationResult(
            xml=render(element), element_count=len(element), message=SUCCESS_MESSAGE
        )


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[
        QueryDepthLimiter(max_depth=10),
    ],
)


async def get_context(
    repository: CatalogRepository = Depends(get_repository),
) -> Dict[str, Any]:
    return {"repository": repository}


graphql_router = GraphQLRouter(
    schema, graphql_ide="graphiql", path="/graphql", context_getter=get_context
)
