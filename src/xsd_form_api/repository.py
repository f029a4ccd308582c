"""Process-wide access to the named field catalogs.

Catalogs are loaded once, validated, and then shared read-only by the REST and
GraphQL layers. Configuration comes from environment variables:

    XSD_FORM_CATALOG_DIR   Directory with the catalog JSON files
                           (default: sample catalogs bundled with the package).
    XSD_FORM_CATALOGS      Comma separated catalog names to load
                           (default: every known catalog present in the directory).

Example::

        from xsd_form_api.repository import get_repository

        repo = get_repository()
        catalog = repo.get("message")
"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from .catalog import CATALOG_SOURCES, FieldCatalog, available_catalogs, load_named_catalog
from .serializer import SubmissionSerializer

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_DIR = Path(__file__).resolve().parent / "data"


@dataclass
class RepositoryConfig:
    """Where to find catalogs and which ones to load.

    Args:
        catalog_dir: Directory holding the JSON catalog files.
        catalog_names: Catalog names to load; empty means every known catalog
            whose field file exists.
    """

    catalog_dir: Path = DEFAULT_CATALOG_DIR
    catalog_names: List[str] = field(default_factory=list)


def _get_repository_config() -> RepositoryConfig:
    """Read repository configuration from environment variables."""
    config = RepositoryConfig()
    catalog_dir = os.getenv("XSD_FORM_CATALOG_DIR", "")
    if catalog_dir:
        config.catalog_dir = Path(catalog_dir)
    names = os.getenv("XSD_FORM_CATALOGS", "")
    if names:
        config.catalog_names = [n.strip() for n in names.split(",") if n.strip()]
    return config


class CatalogRepository:
    """Load-once holder of named :class:`FieldCatalog` instances.

    Loading errors propagate: a structurally corrupt catalog
    (:class:`~xsd_form_api.errors.MalformedCatalog`) must not be served.

    Args:
        config: Repository configuration; read from the environment if omitted.
    """

    def __init__(self, config: Optional[RepositoryConfig] = None) -> None:
        self.config = config or _get_repository_config()
        directory = Path(self.config.catalog_dir)
        names = self.config.catalog_names or available_catalogs(directory)
        unknown = [n for n in names if n not in CATALOG_SOURCES]
        if unknown:
            raise ValueError(
                f"Unknown catalog names {unknown}; expected one of {sorted(CATALOG_SOURCES)}"
            )

        self.catalogs: Dict[str, FieldCatalog] = {}
        for name in names:
            try:
                self.catalogs[name] = load_named_catalog(directory, name)
            except Exception as e:
                logger.error(f"Failed to load catalog '{name}' from {directory}: {e}")
                raise
        self._serializers: Dict[str, SubmissionSerializer] = {
            name: SubmissionSerializer(catalog) for name, catalog in self.catalogs.items()
        }

        self.metadata: Dict[str, Any] = {
            "source": str(directory),
            "loaded_at": datetime.now().isoformat(),
            "catalogs": [catalog.summary() for catalog in self.catalogs.values()],
        }
        self._calculate_etag()

    def _calculate_etag(self) -> None:
        """Compute an ETag from the catalog file contents."""
        digest = hashlib.md5()
        directory = Path(self.config.catalog_dir)
        for name in sorted(self.catalogs):
            source = CATALOG_SOURCES[name]
            for file_name in (source.fields_file, source.types_file):
                path = directory / file_name
                if path.exists():
                    digest.update(path.read_bytes())
        self.etag = f'"{digest.hexdigest()}"'
        self.last_modified = datetime.now()

    def names(self) -> List[str]:
        return list(self.catalogs)

    def get(self, name: str) -> FieldCatalog:
        """Return catalog ``name``.

        Raises:
            KeyError: If the catalog is not loaded.
        """
        return self.catalogs[name]

    def serializer(self, name: str) -> SubmissionSerializer:
        return self._serializers[name]


@lru_cache(maxsize=1)
def get_repository() -> CatalogRepository:
    return CatalogRepository()
