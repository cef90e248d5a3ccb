"""Command-line interface for genref-core."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

from contract.validation import validate_metadata
from metadata.store import DegradedMetadataError, MalformedRecordError, MetadataStore
from parse.treesitter_declarations import TreeSitterDeclarationSource
from paths.utils import normalize
from resolve.specifiers import InvalidReferenceError, ModuleReferenceResolver
from settings.config import ConfigError, load_config
from vfs.filesystem import LocalFileSystem

if TYPE_CHECKING:
    from resolve.layout import ProjectLayout
    from settings.config import GenrefConfig

logger = logging.getLogger("genref")


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Project root holding genref.toml (default: .)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log resolution and loading details to stderr",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="genref")
    subparsers = parser.add_subparsers(dest="command", required=True)

    specifier_parser = subparsers.add_parser(
        "specifier", help="Print the import specifier between two files"
    )
    _add_common_options(specifier_parser)
    specifier_parser.add_argument("imported", help="File being imported")
    specifier_parser.add_argument("importing", help="File containing the import")

    metadata_parser = subparsers.add_parser(
        "metadata", help="Print the metadata records of a module as JSON"
    )
    _add_common_options(metadata_parser)
    metadata_parser.add_argument("file", help="Module or declaration file")
    metadata_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when version-2 metadata cannot be synthesized",
    )

    validate_parser = subparsers.add_parser(
        "validate", help="Validate stored metadata files"
    )
    _add_common_options(validate_parser)
    validate_parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Directory to scan (default: configured source root)",
    )
    validate_parser.add_argument(
        "--strict-schema-version",
        action="store_true",
        help="Treat legacy-only and duplicated schema versions as errors",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _absolute(path: str) -> str:
    return normalize(Path(path).expanduser().resolve().as_posix())


def _handle_specifier(layout: ProjectLayout, imported: str, importing: str) -> int:
    resolver = ModuleReferenceResolver(layout)
    try:
        specifier = resolver.specifier_for(_absolute(imported), _absolute(importing))
    except InvalidReferenceError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    sys.stdout.write(f"{specifier}\n")
    return 0


def _handle_metadata(
    layout: ProjectLayout, config: GenrefConfig, file: str, *, strict: bool
) -> int:
    filesystem = LocalFileSystem()
    store = MetadataStore(
        filesystem,
        TreeSitterDeclarationSource(filesystem),
        file_spec=config.metadata_file_spec(),
        module_extensions=layout.module_extensions,
        declaration_extensions=layout.declaration_extensions,
        strict=strict or config.metadata.strict,
    )
    target = _absolute(file)
    try:
        lookup = store.lookup(target)
    except MalformedRecordError as exc:
        sys.stderr.write(f"{exc.path}: {exc.reason}\n")
        return 2
    except DegradedMetadataError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    if lookup is None:
        sys.stderr.write(f"{target}: no metadata\n")
        return 1

    payload = [record.to_json() for record in lookup.records]
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
    sys.stdout.write("\n")
    return 0


def _handle_validate(
    layout: ProjectLayout,
    config: GenrefConfig,
    directory: str | None,
    *,
    strict: bool,
) -> int:
    if directory is None:
        target = layout.source_root
    else:
        target = _absolute(directory)

    result = validate_metadata(
        target,
        LocalFileSystem(),
        file_spec=config.metadata_file_spec(),
        strict_schema_version=strict,
    )
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.location()}: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    logger.info("validated %d metadata file(s) under %s", len(result.checked), target)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()
    try:
        config = load_config(root)
        layout = config.to_layout(root)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if args.command == "specifier":
        return _handle_specifier(layout, args.imported, args.importing)

    if args.command == "metadata":
        return _handle_metadata(layout, config, args.file, strict=args.strict)

    if args.command == "validate":
        return _handle_validate(
            layout, config, args.directory, strict=args.strict_schema_version
        )

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
