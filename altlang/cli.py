"""CLI entrypoints for altlang commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict

from .config import (
    LOOKUPS_ATTRIBUTE,
    REPORT_ATTRIBUTE,
    SUMMARY_ATTRIBUTE,
    ConfigError,
    load_config,
    parse_attribute_overrides,
)
from .logging import configure_logging
from .orchestrator import ConversionError, Converter, list_listings


def _add_verbose_option(parser: argparse.ArgumentParser, *, inherited: bool = False) -> None:
    # Subcommands must not reset a -v given before the command name.
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if inherited else False,
        help="Log lookups, misses and cache reuse.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="altlang",
        description="Convert AsciiDoc to DocBook with alternative language listings inlined.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a document, inlining alternatives for configured listings.",
    )
    _add_verbose_option(convert_parser, inherited=True)
    convert_parser.add_argument("input", help="AsciiDoc document to convert.")
    convert_parser.add_argument(
        "-o",
        "--output",
        help="DocBook destination (defaults to the input path with an .xml suffix).",
    )
    convert_parser.add_argument(
        "-a",
        "--attribute",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a document attribute; may be repeated.",
    )
    convert_parser.add_argument(
        "--lookup",
        action="append",
        default=[],
        metavar="SOURCE,ALTERNATIVE,DIRECTORY",
        help="Add an alternative lookup directory; may be repeated.",
    )
    convert_parser.add_argument("--report", help="Write the alternatives report here.")
    convert_parser.add_argument("--summary", help="Write the JSON coverage summary here.")
    convert_parser.add_argument(
        "--config",
        help="Path to .altlang.yml or the directory holding it (defaults to the input's directory).",
    )
    convert_parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print warnings and errors.",
    )
    convert_parser.add_argument("--log-file", help="Also write debug logs to this file.")

    digest_parser = subparsers.add_parser(
        "digest",
        help="List the digest (alternative file name) of every source listing.",
    )
    _add_verbose_option(digest_parser, inherited=True)
    digest_parser.add_argument("input", help="AsciiDoc document to inspect.")
    digest_parser.add_argument("--lang", help="Only list listings in this language.")

    return parser


def _collect_attributes(args: argparse.Namespace, input_path: Path) -> Dict[str, str]:
    config_location = Path(args.config) if args.config else input_path.parent
    attributes = load_config(config_location).to_attributes()
    attributes.update(parse_attribute_overrides(args.attribute))
    if args.lookup:
        attributes[LOOKUPS_ATTRIBUTE] = "\n".join(args.lookup)
    if args.report:
        attributes[REPORT_ATTRIBUTE] = str(Path(args.report).expanduser().resolve())
    if args.summary:
        attributes[SUMMARY_ATTRIBUTE] = str(Path(args.summary).expanduser().resolve())
    return attributes


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for altlang commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = getattr(args, "log_file", None)
    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(getattr(args, "quiet", False)),
        log_file=Path(log_file).expanduser() if log_file else None,
    )

    input_path = Path(args.input).expanduser()

    if args.command == "convert":
        try:
            attributes = _collect_attributes(args, input_path)
            outcome = Converter().convert_file(
                input_path,
                Path(args.output).expanduser() if args.output else None,
                attributes=attributes,
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"altlang convert failed: {exc}\n")
        except ConversionError as exc:
            parser.exit(1, f"altlang convert failed: {exc}\nRun with --verbose for more details.\n")
        print(f"DocBook written to {_display(outcome.output_path or input_path)}")
        if outcome.listings:
            print(f"Checked alternatives for {outcome.listings} listing(s)")
    elif args.command == "digest":
        if not input_path.is_file():
            parser.exit(1, f"Input document not found: {input_path}\n")
        text = input_path.read_text(encoding="utf-8")
        for line in list_listings(text, path=input_path.resolve(), language=args.lang):
            print(line)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _display(path: Path) -> str:
    cwd = Path.cwd()
    return str(path.relative_to(cwd)) if path.is_relative_to(cwd) else str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
