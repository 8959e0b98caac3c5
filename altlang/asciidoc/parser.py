"""Block parser for the AsciiDoc subset used by documentation sources."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Set, Union

from ..logging import get_logger, log_at
from .nodes import (
    Block,
    Callout,
    CalloutItem,
    CalloutList,
    Diagnostic,
    Document,
    Listing,
    Paragraph,
    Section,
    SourceLocation,
)
from .reader import Reader, SourceLine

_DOC_TITLE = re.compile(r"^=\s+(\S.*?)\s*$")
_ATTRIBUTE_ENTRY = re.compile(r"^:([A-Za-z0-9_][\w-]*):(?:\s+(.*?))?\s*$")
_SECTION = re.compile(r"^(={2,6})\s+(\S.*?)\s*$")
_ANCHOR = re.compile(r"^\[\[([A-Za-z_][\w:.-]*)\]\]$")
_BLOCK_ATTRS = re.compile(r"^\[([^\[\]]*)\]$")
_BLOCK_TITLE = re.compile(r"^\.([^.\s].*)$")
_LISTING_DELIMITER = re.compile(r"^-{4,}$")
_COMMENT_DELIMITER = re.compile(r"^/{4,}$")
_CALLOUT_ITEM = re.compile(r"^<(\d+)>\s+(.*)$")

_MARKER_PREFIX = r"(?:(?://|#|--|;;) ?)?"
_CALLOUT_MARKER = re.compile(
    rf"{_MARKER_PREFIX}<(\d+)>(?=(?: ?{_MARKER_PREFIX}<\d+>)*\s*$)"
)


def split_callouts(line: str) -> List[Union[str, int]]:
    """Split a listing line into text runs and trailing callout numbers."""
    segments: List[Union[str, int]] = []
    position = 0
    for match in _CALLOUT_MARKER.finditer(line):
        if match.start() > position:
            segments.append(line[position : match.start()])
        segments.append(int(match.group(1)))
        position = match.end()
    if position < len(line):
        segments.append(line[position:])
    return segments


@dataclass
class _PendingAttributes:
    id: Optional[str] = None
    title: Optional[str] = None
    style: Optional[str] = None
    language: Optional[str] = None
    roles: List[str] = field(default_factory=list)

    def apply(self, raw: str, default_language: Optional[str]) -> None:
        positional: List[str] = []
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            name, sep, value = part.partition("=")
            if sep:
                value = value.strip().strip('"')
                if name.strip() == "role":
                    self.roles.extend(value.split())
                elif name.strip() == "id":
                    self.id = value
                continue
            positional.append(part.strip('"'))
        if not positional:
            return
        style, *shorthand_roles = positional[0].split(".")
        self.roles.extend(role for role in shorthand_roles if role)
        self.style = style or None
        if self.style == "source":
            self.language = positional[1] if len(positional) > 1 else default_language


class Parser:
    """Builds a :class:`Document` from reader output."""

    def __init__(
        self,
        lines: List[SourceLine],
        document: Document,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._lines = lines
        self._pos = 0
        self._document = document
        self._ids: Set[str] = set()
        self._locked: Set[str] = set()
        self.logger = logger or get_logger("asciidoc")

    def parse(self, overrides: Mapping[str, str]) -> Document:
        """Parse header and body; ``overrides`` win over attribute entries."""
        self._parse_header()
        self._document.attributes.update(overrides)
        self._locked = set(overrides)
        self._parse_blocks(self._document.blocks, level=0)
        return self._document

    # ------------------------------------------------------------------
    # Header

    def _parse_header(self) -> None:
        self._skip_blank()
        if self._pos >= len(self._lines):
            return
        match = _DOC_TITLE.match(self._lines[self._pos].text)
        if match is None:
            return
        self._document.title = match.group(1)
        self._pos += 1
        while self._pos < len(self._lines):
            text = self._lines[self._pos].text
            entry = _ATTRIBUTE_ENTRY.match(text)
            if entry is not None:
                self._document.attributes[entry.group(1)] = entry.group(2) or ""
            elif not text.startswith("//") or not text.strip():
                break
            self._pos += 1

    # ------------------------------------------------------------------
    # Blocks

    def _parse_blocks(self, container: List[Block], level: int) -> None:
        pending = _PendingAttributes()
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            text = line.text
            if not text.strip():
                self._pos += 1
                continue
            if _COMMENT_DELIMITER.match(text):
                self._skip_delimited(line)
                continue
            if text.startswith("//"):
                self._pos += 1
                continue
            entry = _ATTRIBUTE_ENTRY.match(text)
            if entry is not None:
                if entry.group(1) not in self._locked:
                    self._document.attributes[entry.group(1)] = entry.group(2) or ""
                self._pos += 1
                continue

            section = _SECTION.match(text)
            if section is not None:
                section_level = len(section.group(1)) - 1
                if section_level <= level:
                    return
                self._pos += 1
                title = section.group(2)
                block = Section(
                    location=line.location,
                    id=self._register_id(pending.id or self._section_id(title)),
                    title=title,
                    roles=pending.roles,
                    level=section_level,
                )
                container.append(block)
                pending = _PendingAttributes()
                self._parse_blocks(block.blocks, section_level)
                continue

            anchor = _ANCHOR.match(text)
            if anchor is not None:
                pending.id = anchor.group(1)
                self._pos += 1
                continue
            attributes = _BLOCK_ATTRS.match(text)
            if attributes is not None:
                pending.apply(
                    attributes.group(1), self._document.attributes.get("source-language")
                )
                self._pos += 1
                continue
            block_title = _BLOCK_TITLE.match(text)
            if block_title is not None:
                pending.title = block_title.group(1)
                self._pos += 1
                continue

            if _LISTING_DELIMITER.match(text):
                container.append(self._parse_listing(pending))
            elif _CALLOUT_ITEM.match(text):
                container.append(self._parse_callout_list(container, pending))
            else:
                container.append(self._parse_paragraph(pending))
            pending = _PendingAttributes()

    def _parse_listing(self, pending: _PendingAttributes) -> Listing:
        opening = self._lines[self._pos]
        delimiter = opening.text
        self._pos += 1
        body: List[str] = []
        while self._pos < len(self._lines):
            text = self._lines[self._pos].text
            self._pos += 1
            if text == delimiter:
                break
            body.append(text)
        else:
            self._warn(opening.location, "unterminated listing block")

        listing = Listing(
            location=opening.location,
            id=self._register_id(pending.id) if pending.id else None,
            title=pending.title,
            roles=list(pending.roles),
            language=pending.language,
            lines=body,
        )
        self._collect_callouts(listing)
        return listing

    def _collect_callouts(self, listing: Listing) -> None:
        numbers = [
            segment
            for line in listing.lines
            for segment in split_callouts(line)
            if isinstance(segment, int)
        ]
        if not numbers:
            return
        owner = self._document.reserve_callout_owner()
        listing.callouts = [
            Callout(number=number, ordinal=ordinal, owner=owner)
            for ordinal, number in enumerate(numbers, start=1)
        ]

    def _parse_callout_list(
        self, container: List[Block], pending: _PendingAttributes
    ) -> CalloutList:
        first = self._lines[self._pos]
        previous = container[-1] if container else None
        listing = previous if isinstance(previous, Listing) else None
        colist = CalloutList(
            location=first.location,
            id=self._register_id(pending.id) if pending.id else None,
            title=pending.title,
            roles=list(pending.roles),
            listing=listing,
        )
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            match = _CALLOUT_ITEM.match(line.text)
            if match is None:
                break
            self._pos += 1
            text_lines = [match.group(2)]
            while self._pos < len(self._lines):
                following = self._lines[self._pos].text
                if (
                    not following.strip()
                    or _CALLOUT_ITEM.match(following)
                    or _LISTING_DELIMITER.match(following)
                    or _BLOCK_ATTRS.match(following)
                ):
                    break
                text_lines.append(following)
                self._pos += 1
            colist.items.append(
                CalloutItem(
                    number=int(match.group(1)),
                    text="\n".join(text_lines),
                    location=line.location,
                )
            )
            self._skip_blank_before(_CALLOUT_ITEM)

        for expected, item in enumerate(colist.items, start=1):
            if item.number != expected:
                self._warn(
                    item.location,
                    f"callout list item index: expected {expected}, got {item.number}",
                )
            if not colist.arearefs(item):
                self._warn(item.location, f"no callout found for <{item.number}>")
        return colist

    def _parse_paragraph(self, pending: _PendingAttributes) -> Paragraph:
        first = self._lines[self._pos]
        lines: List[str] = []
        while self._pos < len(self._lines):
            text = self._lines[self._pos].text
            if lines and (_BLOCK_ATTRS.match(text) or _ANCHOR.match(text)):
                break
            if (
                not text.strip()
                or _LISTING_DELIMITER.match(text)
                or _COMMENT_DELIMITER.match(text)
            ):
                break
            lines.append(text)
            self._pos += 1
        return Paragraph(
            location=first.location,
            id=self._register_id(pending.id) if pending.id else None,
            title=pending.title,
            roles=list(pending.roles),
            lines=lines,
        )

    # ------------------------------------------------------------------
    # Helpers

    def _skip_blank(self) -> None:
        while self._pos < len(self._lines) and not self._lines[self._pos].text.strip():
            self._pos += 1

    def _skip_blank_before(self, pattern: re.Pattern[str]) -> None:
        position = self._pos
        while position < len(self._lines) and not self._lines[position].text.strip():
            position += 1
        if position < len(self._lines) and pattern.match(self._lines[position].text):
            self._pos = position

    def _skip_delimited(self, opening: SourceLine) -> None:
        self._pos += 1
        while self._pos < len(self._lines):
            text = self._lines[self._pos].text
            self._pos += 1
            if text == opening.text:
                return
        self._warn(opening.location, "unterminated comment block")

    def _section_id(self, title: str) -> str:
        slug = re.sub(r"[^\w]+", "_", title.lower()).strip("_")
        return f"_{slug}"

    def _register_id(self, candidate: str) -> str:
        resolved = candidate
        counter = 2
        while resolved in self._ids:
            resolved = f"{candidate}_{counter}"
            counter += 1
        self._ids.add(resolved)
        return resolved

    def _warn(self, location: Optional[SourceLocation], message: str) -> None:
        log_at(self.logger, logging.WARNING, location, message)
        self._document.diagnostics.append(Diagnostic("warning", location, message))


def parse_document(
    text: str,
    *,
    path: Optional[Path] = None,
    base_dir: Optional[Path] = None,
    attributes: Optional[Mapping[str, str]] = None,
    display_root: Optional[Path] = None,
) -> Document:
    """Parse ``text`` into a :class:`Document`, expanding includes on the way."""
    if path is not None:
        path = path.resolve()
    if base_dir is None:
        base_dir = path.parent if path is not None else Path.cwd()
    if display_root is None:
        display_root = base_dir
    reader = Reader(base_dir=base_dir, display_root=display_root)
    lines = reader.read(text, path)
    document = Document(path=path, base_dir=base_dir)
    document.diagnostics.extend(reader.diagnostics)
    return Parser(lines, document).parse(attributes or {})


def load_document(
    path: Path,
    *,
    attributes: Optional[Mapping[str, str]] = None,
    display_root: Optional[Path] = None,
) -> Document:
    """Read and parse an AsciiDoc file."""
    text = path.read_text(encoding="utf-8")
    return parse_document(text, path=path, attributes=attributes, display_root=display_root)


__all__ = ["Parser", "load_document", "parse_document", "split_callouts"]
