"""XSD Form API
============

Toolkit and service layer for forms derived from XML Schema (XSD) field
catalogs, and for serializing the submitted values back into XML.

Key capabilities
----------------
- Load flat, id/level/path annotated field catalogs and their type catalogs
  into a validated :class:`~xsd_form_api.catalog.FieldCatalog`.
- Rebuild the element hierarchy as an explicit tree and walk it depth-first
  with per-group visibility for progressive disclosure.
- Resolve each field type to a closed set of input kinds (enumeration select,
  boolean, numeric, date-time, text) with validation hints.
- Serialize ``path -> value`` submissions into a flat ``<Document>`` XML
  document using the schema's element names.
- FastAPI and GraphQL endpoints plus a small CLI over the same core.

Design principles
-----------------
1. **Load once, read only** – catalogs are validated and indexed at load time
   and never mutated afterwards.
2. **Fail on structure, degrade on data** – dangling parents raise
   :class:`~xsd_form_api.errors.MalformedCatalog`; unknown types and unknown
   submission keys fall back to text inputs and ``<unknown>`` elements.

Minimal quick start
-------------------
>>> from xsd_form_api import FieldCatalog, FieldDescriptor, serialize
>>> catalog = FieldCatalog([
...     FieldDescriptor(id=1, level=0, tag="GrpHdr", path="GrpHdr"),
...     FieldDescriptor(id=2, level=1, tag="MsgId", path="GrpHdr.MsgId",
...                     parent_path="GrpHdr", xsd_type="Max35Text"),
... ])
>>> print(serialize({"GrpHdr.MsgId": "ABC123"}, catalog))
<Document>
  <MsgId>ABC123</MsgId>
</Document>
"""

__version__ = "0.1.0"

from .catalog import FieldCatalog, load_field_catalog, load_named_catalog
from .errors import MalformedCatalog
from .input_kinds import resolve_input_kind
from .models import FieldDescriptor, FieldType
from .serializer import serialize
from .tree import VisibilityState, build_tree, traverse

__all__ = [
    "FieldCatalog",
    "FieldDescriptor",
    "FieldType",
    "MalformedCatalog",
    "VisibilityState",
    "build_tree",
    "load_field_catalog",
    "load_named_catalog",
    "resolve_input_kind",
    "serialize",
    "traverse",
]
