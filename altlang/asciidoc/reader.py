"""Line reader that expands ``include::`` directives."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..logging import get_logger, log_at
from .nodes import Diagnostic, SourceLocation

MAX_INCLUDE_DEPTH = 64

_INCLUDE_PATTERN = re.compile(r"^include::([^\[\s][^\[]*)\[(.*)\]$")


@dataclass(frozen=True)
class SourceLine:
    """One line of input together with where it came from."""

    text: str
    location: SourceLocation


class Reader:
    """Turns document text into :class:`SourceLine` objects, inlining includes.

    Include targets resolve against the directory of the file holding the
    directive, or ``base_dir`` for text that did not come from a file.
    Problems are logged and collected in ``diagnostics``; the reader never
    raises for a bad include.
    """

    def __init__(
        self,
        *,
        base_dir: Path,
        display_root: Optional[Path] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.base_dir = base_dir
        self.display_root = display_root
        self.logger = logger or get_logger("asciidoc")
        self.diagnostics: List[Diagnostic] = []

    def read(self, text: str, path: Optional[Path] = None) -> List[SourceLine]:
        lines: List[SourceLine] = []
        self._read_into(lines, text, path, depth=0)
        return lines

    def _read_into(
        self, lines: List[SourceLine], text: str, path: Optional[Path], *, depth: int
    ) -> None:
        normalised = text.replace("\r\n", "\n").replace("\r", "\n")
        if normalised.endswith("\n"):
            normalised = normalised[:-1]
        if not normalised:
            return
        directory = path.parent if path is not None else self.base_dir
        for lineno, raw in enumerate(normalised.split("\n"), start=1):
            location = SourceLocation(path, lineno, self.display_root)
            match = _INCLUDE_PATTERN.match(raw)
            if match is None:
                lines.append(SourceLine(raw, location))
                continue
            target = match.group(1).strip()
            target_path = (directory / target).resolve()
            if depth >= MAX_INCLUDE_DEPTH:
                self._diagnose(
                    "error", location, f"maximum include depth of {MAX_INCLUDE_DEPTH} exceeded"
                )
                lines.append(SourceLine(self._unresolved(location, raw), location))
                continue
            if not target_path.is_file():
                self._diagnose("error", location, f"include file not found: {target_path}")
                lines.append(SourceLine(self._unresolved(location, raw), location))
                continue
            try:
                included = target_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                self._diagnose("error", location, f"include file not readable: {target_path} ({exc})")
                lines.append(SourceLine(self._unresolved(location, raw), location))
                continue
            self._read_into(lines, included, target_path, depth=depth + 1)

    def _diagnose(self, severity: str, location: SourceLocation, message: str) -> None:
        level = logging.ERROR if severity == "error" else logging.WARNING
        log_at(self.logger, level, location, message)
        self.diagnostics.append(Diagnostic(severity, location, message))

    @staticmethod
    def _unresolved(location: SourceLocation, directive: str) -> str:
        return f"Unresolved directive in {location.display_path} - {directive}"


__all__ = ["MAX_INCLUDE_DEPTH", "Reader", "SourceLine"]
