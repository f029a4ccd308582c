"""
CLI commands for checking catalogs and serializing submissions.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .catalog import CATALOG_SOURCES, load_named_catalog
from .errors import MalformedCatalog
from .serializer import SubmissionSerializer
from .tree import VisibilityState

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def cmd_check(args):
    """Validate catalog structure and print a summary."""
    setup_logging(args.verbose)

    try:
        catalog = load_named_catalog(Path(args.directory), args.catalog)
    except (MalformedCatalog, OSError) as e:
        print(f"✗ Catalog '{args.catalog}' is invalid: {e}")
        return 1

    summary = catalog.summary()
    print(f"✓ Catalog '{args.catalog}' is valid")
    print(f"  groups: {summary['total_groups']}")
    print(f"  fields: {summary['total_fields']}")
    print(f"  types:  {summary['total_types']}")
    print(f"  depth:  {summary['max_depth']}")
    return 0


def cmd_tree(args):
    """Print the form traversal, one row per line."""
    setup_logging(args.verbose)

    try:
        catalog = load_named_catalog(Path(args.directory), args.catalog)
    except (MalformedCatalog, OSError) as e:
        print(f"✗ Failed to load catalog '{args.catalog}': {e}")
        return 1

    for entry in catalog.traverse(VisibilityState(args.collapse)):
        descriptor = entry.descriptor
        marker = "+" if entry.role.value == "group" and not entry.expanded else " "
        required = " *" if descriptor.required else ""
        print(f"{'  ' * entry.depth}{marker}{descriptor.label} [{descriptor.path}]{required}")
    return 0


def cmd_serialize(args):
    """Serialize a JSON submission file to XML."""
    setup_logging(args.verbose)

    try:
        catalog = load_named_catalog(Path(args.directory), args.catalog)
        with open(args.submission, "r", encoding="utf-8") as f:
            submission = json.load(f)
    except (MalformedCatalog, OSError, json.JSONDecodeError) as e:
        print(f"✗ Failed to serialize: {e}", file=sys.stderr)
        return 1

    if not isinstance(submission, dict):
        print("✗ Submission must be a JSON object of path -> value", file=sys.stderr)
        return 1

    xml_text = SubmissionSerializer(catalog).to_xml(submission)
    if args.output:
        Path(args.output).write_text(xml_text + "\n", encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        print(xml_text)
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="XSD form catalog CLI",
        prog="xsd-form"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands"
    )

    def add_catalog_args(sub):
        sub.add_argument("directory", help="Directory containing the catalog JSON files")
        sub.add_argument(
            "--catalog",
            default="message",
            choices=sorted(CATALOG_SOURCES),
            help="Catalog to load (default: message)"
        )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate catalog structure"
    )
    add_catalog_args(check_parser)
    check_parser.set_defaults(func=cmd_check)

    tree_parser = subparsers.add_parser(
        "tree",
        help="Print the form traversal"
    )
    add_catalog_args(tree_parser)
    tree_parser.add_argument(
        "--collapse",
        action="append",
        default=[],
        metavar="PATH",
        help="Hide the subtree of a group (repeatable)"
    )
    tree_parser.set_defaults(func=cmd_tree)

    serialize_parser = subparsers.add_parser(
        "serialize",
        help="Serialize a JSON submission to XML"
    )
    add_catalog_args(serialize_parser)
    serialize_parser.add_argument("submission", help="JSON file with path -> value entries")
    serialize_parser.add_argument("-o", "--output", help="Write XML here instead of stdout")
    serialize_parser.set_defaults(func=cmd_serialize)

    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
