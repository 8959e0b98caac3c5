"""Human readable report of alternative coverage, one entry per listing."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Collection, Iterator, Optional, TextIO

from jinja2 import Environment, FileSystemLoader

from .listing import RESULT_SUFFIX, ListingSpec

CHECK = "&check;"
CROSS = "&cross;"

_TEMPLATES_DIR = Path(__file__).with_name("templates")


def escape_callouts(source: str) -> str:
    """Escape ``<`` so the copied listing never turns into live callouts."""
    return source.replace("<", "\\<")


def _create_env(templates_dir: Optional[Path] = None) -> Environment:
    loader = FileSystemLoader(str(templates_dir or _TEMPLATES_DIR))
    env = Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["escape_callouts"] = escape_callouts
    return env


class Report:
    """Writes an AsciiDoc report of every processed listing, in document order."""

    HEADER = "== Alternatives Report\n\n"

    def __init__(self, stream: TextIO, *, templates_dir: Optional[Path] = None) -> None:
        self._stream = stream
        self._template = _create_env(templates_dir).get_template("report_entry.adoc.j2")
        self.entries = 0
        self._stream.write(self.HEADER)

    @classmethod
    @contextmanager
    def open(cls, path: Path) -> Iterator["Report"]:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            yield cls(handle)

    def report(self, listing: ListingSpec, found_langs: Collection[str]) -> None:
        self._stream.write(
            self._template.render(
                location=listing.location if listing.location is not None else "<stdin>",
                digest=listing.digest,
                language=listing.language,
                source=listing.source,
                header=self.lang_header(listing),
                row=self.lang_line(listing, found_langs),
            )
        )
        self.entries += 1

    @staticmethod
    def lang_header(listing: ListingSpec) -> str:
        suffix = RESULT_SUFFIX if listing.is_result else ""
        return " ".join(f"| {entry.alternative_lang}{suffix}" for entry in listing.alternatives)

    @staticmethod
    def lang_line(listing: ListingSpec, found_langs: Collection[str]) -> str:
        return " ".join(
            f"| {CHECK if entry.alternative_lang in found_langs else CROSS}"
            for entry in listing.alternatives
        )


__all__ = ["CHECK", "CROSS", "Report", "escape_callouts"]
