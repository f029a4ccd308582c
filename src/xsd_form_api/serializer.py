"""Serialize form submissions into XML documents.

A submission is a flat mapping of catalog ``path`` to the raw value the user
entered. The serializer turns it into a document rooted at ``<Document>``
with one child element per submitted value, named after the descriptor's
``tag``::

        <Document>
          <MsgId>ABC123</MsgId>
          <CreDtTm>2024-05-01T10:00</CreDtTm>
        </Document>

Rules:
        * Entries are emitted in the mapping's iteration order.
        * Empty values are skipped (see :func:`is_present`).
        * Keys with no catalog entry become ``<unknown>`` elements; this keeps
            documents produced from newer forms readable by older catalogs.
        * Every element is a direct child of ``Document``. The catalog hierarchy
            is deliberately not reproduced in the output.
        * Control characters that XML 1.0 does not allow are removed from values.
        * Output uses two-space indentation, explicit end tags for empty
            elements and no XML declaration.

No occurrence, pattern or enumeration checks happen here; those facets are
advisory hints for the form layer only.
"""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from typing import Any, Iterable, Mapping, Union

from .catalog import FieldCatalog
from .models import FieldDescriptor

logger = logging.getLogger(__name__)

ROOT_ELEMENT = "Document"
UNKNOWN_ELEMENT = "unknown"
INDENT = "  "
SUCCESS_MESSAGE = "XML generated successfully!"

# Code points outside the XML 1.0 Char production.
ILLEGAL_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def is_present(value: Any) -> bool:
    """Return True when ``value`` should be written to the document.

    ``None``, ``False``, numeric zero, NaN and the empty string are dropped.
    Non-empty strings are always kept, including ``"0"`` and ``"false"``.

    >>> [is_present(v) for v in ("", "0", False, 0, None, "X")]
    [False, True, False, False, False, True]
    """
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def coerce_text(value: Any) -> str:
    """String form of a submitted scalar, with XML-illegal characters removed.

    >>> coerce_text(True), coerce_text(12.0), coerce_text(12.5), coerce_text(7)
    ('true', '12', '12.5', '7')
    >>> coerce_text("x\\x01y")
    'xy'
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return ILLEGAL_XML_CHARS.sub("", str(value))


class SubmissionSerializer:
    """Convert submission maps to ``Document`` XML for one catalog.

    Args:
        catalog: Validated catalog providing the path to tag mapping.

    Example:
        serializer = SubmissionSerializer(catalog)
        xml_text = serializer.to_xml({"GrpHdr.MsgId": "ABC123"})
    """

    def __init__(self, catalog: FieldCatalog) -> None:
        self.catalog = catalog

    def element_name(self, path: str) -> str:
        descriptor = self.catalog.get(path)
        if descriptor is None:
            logger.debug(f"Submission key '{path}' not in catalog '{self.catalog.name}'")
            return UNKNOWN_ELEMENT
        return descriptor.tag

    def to_element(self, submission: Mapping[str, Any]) -> ET.Element:
        """Build the detached ``Document`` element for ``submission``."""
        root = ET.Element(ROOT_ELEMENT)
        for path, value in submission.items():
            if not is_present(value):
                logger.debug(f"Skipping empty value for '{path}'")
                continue
            child = ET.SubElement(root, self.element_name(path))
            child.text = coerce_text(value)
        return root

    def to_xml(self, submission: Mapping[str, Any]) -> str:
        """Serialize ``submission`` to indented XML text."""
        return render(self.to_element(submission))


def render(root: ET.Element) -> str:
    """Render an element tree with two-space indentation and explicit end tags."""
    ET.indent(root, space=INDENT)
    return ET.tostring(root, encoding="unicode", short_empty_elements=False)


def serialize(
    submission: Mapping[str, Any],
    catalog: Union[FieldCatalog, Iterable[FieldDescriptor]],
) -> str:
    """Serialize ``submission`` against ``catalog``.

    Args:
        submission: ``path -> value`` map in the order the values should appear.
        catalog: A :class:`FieldCatalog`, or bare descriptors which are
            validated first.

    Returns:
        XML text rooted at ``<Document>``.

    Raises:
        MalformedCatalog: If bare descriptors violate the catalog invariants;
            nothing is serialized in that case.
    """
    if not isinstance(catalog, FieldCatalog):
        catalog = FieldCatalog(catalog)
    return SubmissionSerializer(catalog).to_xml(submission)
