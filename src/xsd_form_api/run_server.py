"""Executable entry point for launching the XSD Form API.

Process managers can import the stable ``app`` object from
``xsd_form_api.app``; this module exists for ``python -m
xsd_form_api.run_server`` during local development.

Environment Variables:
    PORT (int): Override listening port (default 8000).
    XSD_FORM_CATALOG_DIR: Catalog directory (see :mod:`xsd_form_api.repository`).

Example:
    $ XSD_FORM_CATALOG_DIR=./catalogs python -m xsd_form_api.run_server

Production Recommendation:
    uvicorn xsd_form_api.app:app --host 0.0.0.0 --port 8000 --workers 4
"""

from __future__ import annotations

import os

import uvicorn

from .app import app


def main() -> None:
    """Launch the ASGI server with development-friendly defaults."""
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    main()
