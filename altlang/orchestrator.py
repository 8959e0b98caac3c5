"""Conversion pipeline: parse, look up alternatives, report, render."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from .asciidoc.docbook import DocBookRenderer
from .asciidoc.nodes import Diagnostic, Document
from .asciidoc.parser import parse_document
from .config import REPORT_ATTRIBUTE, SUMMARY_ATTRIBUTE
from .logging import get_logger
from .lookup.digest import DigestCache
from .lookup.engine import AlternativeLanguageLookup
from .lookup.report import Report
from .lookup.summary import CoverageAccumulator, write_summary


class ConversionError(RuntimeError):
    """Raised when the source document itself cannot be converted."""

    def __init__(self, message: str, diagnostics: Sequence[Diagnostic]) -> None:
        super().__init__(message)
        self.diagnostics = list(diagnostics)


@dataclass
class ConversionOutcome:
    """Result of converting one document."""

    output: str
    document: Document
    summary: Dict[str, Dict[str, object]] = field(default_factory=dict)
    listings: int = 0
    report_path: Optional[Path] = None
    summary_path: Optional[Path] = None
    output_path: Optional[Path] = None


class Converter:
    """Coordinates a single document conversion.

    Every call to :meth:`convert` works on its own accumulator and lookup
    state, so one converter can be reused for many documents.
    """

    def __init__(
        self,
        lookup: AlternativeLanguageLookup | None = None,
        renderer: DocBookRenderer | None = None,
    ) -> None:
        self.lookup = lookup or AlternativeLanguageLookup()
        self.renderer = renderer or DocBookRenderer()
        self.logger = get_logger("orchestrator")

    def convert(
        self,
        text: str,
        *,
        path: Path | None = None,
        attributes: Mapping[str, str] | None = None,
    ) -> ConversionOutcome:
        document = parse_document(text, path=path, attributes=attributes)
        if document.errors:
            raise ConversionError(
                f"{len(document.errors)} error(s) while reading "
                f"{document.path or '<stdin>'}: {document.errors[0]}",
                document.errors,
            )

        accumulator = CoverageAccumulator()
        report_path = _optional_path(document.attributes.get(REPORT_ATTRIBUTE))
        summary_path = _optional_path(document.attributes.get(SUMMARY_ATTRIBUTE))
        outcome = ConversionOutcome(output="", document=document)

        index = self.lookup.resolve(document)
        if index:
            self.logger.debug(
                "Looking up %d alternatives for %s",
                len(index),
                ", ".join(index.source_languages),
            )
            with ExitStack() as stack:
                report = stack.enter_context(Report.open(report_path)) if report_path else None
                outcome.listings = self.lookup.process(
                    document, accumulator, index=index, report=report
                )
            if report_path is not None:
                outcome.report_path = report_path
            if summary_path is not None and write_summary(summary_path, accumulator):
                outcome.summary_path = summary_path

        outcome.summary = accumulator.as_dict()
        outcome.output = self.renderer.render(document)
        return outcome

    def convert_file(
        self,
        input_path: Path,
        output_path: Path | None = None,
        *,
        attributes: Mapping[str, str] | None = None,
    ) -> ConversionOutcome:
        """Convert ``input_path`` and write DocBook next to it (or to ``output_path``)."""
        input_path = input_path.expanduser().resolve()
        if not input_path.is_file():
            raise FileNotFoundError(f"Input document not found: {input_path}")
        self.logger.info("Converting %s", input_path)
        text = input_path.read_text(encoding="utf-8")
        outcome = self.convert(text, path=input_path, attributes=attributes)

        target = output_path or input_path.with_suffix(".xml")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(outcome.output + "\n", encoding="utf-8")
        outcome.output_path = target
        self.logger.info("Wrote %s", target)
        return outcome


def list_listings(
    text: str,
    *,
    path: Path | None = None,
    language: str | None = None,
) -> List[str]:
    """Return ``* <digest>.adoc: <location>`` lines for the listings of a document."""
    document = parse_document(text, path=path)
    digests = DigestCache()
    lines: List[str] = []
    for _, listing in document.find_listings():
        if listing.language is None:
            continue
        if language is not None and listing.language != language:
            continue
        lines.append(f"* {digests.get(listing.source)}.adoc: {listing.location}")
    return lines


def _optional_path(value: Optional[str]) -> Optional[Path]:
    if value is None or not value.strip():
        return None
    return Path(value).expanduser()


__all__ = ["ConversionError", "ConversionOutcome", "Converter", "list_listings"]
