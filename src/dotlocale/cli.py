"""``dotlocale`` command line interface.

Sub-commands:
    extract  Scan sources for translation keys and report missing/unused ones
    export   Export every key x locale into one CSV/JSON/YAML file
    sort     Rewrite locale documents with sorted keys and locales

Settings come from ``[tool.dotlocale]`` in ``<root>/pyproject.toml``;
command line flags override them.

Exit Codes:
    0: Success (unused keys and dynamic call sites are advisory)
    1: Error, or missing keys with --strict

Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from dotlocale import __version__
from dotlocale.config import LocalizationConfig
from dotlocale.diagnostics import DotLocaleError, OutputFormat
from dotlocale.enums import MissedBehavior
from dotlocale.extraction.generator import export, sort_documents, write_minified, write_missing
from dotlocale.extraction.runner import load_locale_roots, run_extraction

__all__ = ["main", "parse_args", "parse_translation"]


def parse_translation(value: str) -> tuple[str, str]:
    """Parse ``-t`` values: ``KEY`` or ``KEY => TEXT`` (quotes around either are dropped)."""
    key, separator, text = value.partition("=>")
    key = key.strip().strip('"')
    if not separator:
        return key, key
    return key, text.strip().strip('"')


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Project root holding pyproject.toml (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dotlocale",
        description="Find, diff and maintain translation keys.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)"
    )
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    commands = parser.add_subparsers(dest="command", required=True)

    extract_parser = commands.add_parser("extract", help="Report missing and unused keys")
    _add_common(extract_parser)
    extract_parser.add_argument(
        "sources",
        type=Path,
        nargs="*",
        help="Source directories or files to scan (default: the project root)",
    )
    extract_parser.add_argument(
        "--locales",
        type=Path,
        action="append",
        default=[],
        help="Locale directory (repeatable; default: load-path from configuration)",
    )
    extract_parser.add_argument(
        "--marker",
        action="append",
        default=[],
        help="Translation function/macro name (repeatable; default: t, tr, translate)",
    )
    extract_parser.add_argument("--namespace", help="Prefix every extracted key with NAMESPACE")
    extract_parser.add_argument("--base-locale", help="Locale to diff against (default locale)")
    extract_parser.add_argument(
        "--minify", action="store_true", help="Assign short codes to extracted keys"
    )
    extract_parser.add_argument(
        "--minified-output", type=Path, help="Write the key -> code mapping to this file"
    )
    extract_parser.add_argument(
        "--write-todo",
        action="store_true",
        help="Write missing keys to TODO.yml in the first locale directory",
    )
    extract_parser.add_argument(
        "--strict", action="store_true", help="Exit with code 1 when keys are missing"
    )
    extract_parser.add_argument(
        "--format",
        choices=[str(f) for f in OutputFormat],
        default=str(OutputFormat.RUST),
        help="Report format (default: rust)",
    )
    extract_parser.add_argument(
        "-t",
        "--translate",
        action="append",
        default=[],
        metavar="TEXT",
        help='Register a dynamically used key: "KEY" or "KEY => TRANSLATION" (repeatable)',
    )
    extract_parser.add_argument(
        "-j", "--workers", type=int, default=1, help="Threads used for scanning (default: 1)"
    )

    export_parser = commands.add_parser("export", help="Export all translations to one file")
    _add_common(export_parser)
    export_parser.add_argument(
        "-l",
        "--locales",
        action="append",
        default=[],
        help="Locale selection, e.g. 'en,+es,!fr' (repeatable)",
    )
    export_parser.add_argument(
        "-m",
        "--missed",
        choices=[str(m) for m in MissedBehavior],
        default=str(MissedBehavior.DEFAULT),
        help="Fill for missing translations (default: default locale text)",
    )
    export_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("exported.csv"),
        help="Output file; .csv, .json, .yml or .yaml (default: exported.csv)",
    )

    sort_parser = commands.add_parser("sort", help="Sort locale documents by key and locale")
    _add_common(sort_parser)
    sort_parser.add_argument(
        "-i", "--inplace", action="store_true", help="Overwrite files instead of *-sorted copies"
    )
    sort_parser.add_argument("-r", "--reverse", action="store_true", help="Descending order")
    return parser


def parse_args(args: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return _build_parser().parse_args(args)


def _configure_logging(options: argparse.Namespace) -> None:
    if options.quiet:
        level = logging.ERROR
    elif options.verbose >= 2:
        level = logging.DEBUG
    elif options.verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load_path(root: Path, config: LocalizationConfig) -> Path:
    path = Path(config.load_path)
    return path if path.is_absolute() else root / path


def _run_extract(options: argparse.Namespace, config: LocalizationConfig) -> int:
    locale_roots = options.locales or [_load_path(options.root, config)]
    markers = frozenset(options.marker) or config.call_markers
    minify = config.minify
    if options.minify and not minify.enabled:
        minify = replace(minify, enabled=True)
    extra = dict(parse_translation(value) for value in options.translate)

    report = run_extraction(
        options.sources or [options.root],
        locale_roots,
        markers,
        minify,
        base_locale=options.base_locale or config.default_locale,
        namespace=options.namespace,
        extra_keys=extra,
        workers=options.workers,
    )
    print(report.format(options.format))

    if options.minified_output is not None and report.minified:
        write_minified(report.minified, options.minified_output)
    if options.write_todo:
        locales = config.available_locales or report.locales
        written = write_missing(report, locales, locale_roots[0])
        if written is not None:
            print(f"Missing keys written to {written}", file=sys.stderr)
    return report.exit_code(strict=options.strict or config.strict)


def _run_export(options: argparse.Namespace, config: LocalizationConfig) -> int:
    store = load_locale_roots([_load_path(options.root, config)])
    written = export(
        store,
        options.output,
        locales=options.locales,
        available_locales=config.available_locales,
        default_locale=config.default_locale,
        missed=options.missed,
    )
    print(f"Exported to {written}")
    return 0


def _run_sort(options: argparse.Namespace, config: LocalizationConfig) -> int:
    written = sort_documents(
        _load_path(options.root, config),
        inplace=options.inplace,
        reverse=options.reverse,
        available_locales=config.available_locales,
    )
    for path in written:
        print(f"Sorted to {path}")
    return 0


def main(args: Sequence[str] | None = None) -> int:
    """Entry point of the ``dotlocale`` console script."""
    options = parse_args(args)
    _configure_logging(options)
    try:
        config = LocalizationConfig.load(options.root)
        match options.command:
            case "extract":
                return _run_extract(options, config)
            case "export":
                return _run_export(options, config)
            case "sort":
                return _run_sort(options, config)
            case _:
                msg = f"Unknown command {options.command!r}"
                raise ValueError(msg)
    except (DotLocaleError, OSError, ValueError) as e:
        print(f"dotlocale: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
