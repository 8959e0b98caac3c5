"""Document tree for the AsciiDoc subset understood by altlang.

Blocks are plain dataclasses, one class per block kind. Only :class:`Listing`
carries a language, so code that wants "blocks with a language" asks for
listings explicitly instead of probing attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class SourceLocation:
    """File and line a block or diagnostic originates from."""

    path: Optional[Path]
    lineno: int
    root: Optional[Path] = None

    @property
    def display_path(self) -> str:
        if self.path is None:
            return "<stdin>"
        if self.root is not None:
            try:
                return self.path.relative_to(self.root).as_posix()
            except ValueError:
                pass
        return str(self.path)

    def __str__(self) -> str:
        return f"{self.display_path}: line {self.lineno}"


@dataclass(frozen=True)
class Diagnostic:
    """A warning or error raised while reading or parsing a document."""

    severity: str
    location: Optional[SourceLocation]
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location}: {self.message}"


@dataclass
class Callout:
    """A ``<n>`` marker inside a listing.

    ``ordinal`` is the 1-based position of the marker among all markers of its
    listing; ``owner`` scopes the anchor id (``CO1``, ``A0-CO1``...).
    """

    number: int
    ordinal: int
    owner: str

    @property
    def anchor_id(self) -> str:
        return f"{self.owner}-{self.ordinal}"


@dataclass(eq=False)
class Block:
    location: Optional[SourceLocation] = None
    id: Optional[str] = None
    title: Optional[str] = None
    roles: List[str] = field(default_factory=list)

    @property
    def role(self) -> Optional[str]:
        return " ".join(self.roles) if self.roles else None

    def add_role(self, role: str) -> None:
        if role not in self.roles:
            self.roles.append(role)


@dataclass(eq=False)
class Paragraph(Block):
    lines: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(eq=False)
class Listing(Block):
    """A delimited code block, ``[source,<language>]`` when it has a language."""

    language: Optional[str] = None
    lines: List[str] = field(default_factory=list)
    callouts: List[Callout] = field(default_factory=list)

    @property
    def source(self) -> str:
        return "\n".join(self.lines)

    @property
    def callout_owner(self) -> Optional[str]:
        return self.callouts[0].owner if self.callouts else None

    def callout_ids(self, number: int) -> List[str]:
        return [callout.anchor_id for callout in self.callouts if callout.number == number]


@dataclass
class CalloutItem:
    number: int
    text: str
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class CalloutList(Block):
    """Explanations for the markers of the listing right before it."""

    items: List[CalloutItem] = field(default_factory=list)
    listing: Optional[Listing] = None

    def arearefs(self, item: CalloutItem) -> List[str]:
        if self.listing is None:
            return []
        return self.listing.callout_ids(item.number)


@dataclass(eq=False)
class Section(Block):
    level: int = 1
    blocks: List[Block] = field(default_factory=list)


@dataclass(eq=False)
class Document:
    """Root of a parsed document.

    ``callout_lists`` counts the callout owners handed out so far; the next
    listing with callouts (or a caller reserving one) gets ``CO<n+1>``.
    """

    path: Optional[Path] = None
    base_dir: Path = field(default_factory=Path.cwd)
    title: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    blocks: List[Block] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    callout_lists: int = 0

    @property
    def errors(self) -> List[Diagnostic]:
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.is_error]

    def reserve_callout_owner(self) -> str:
        self.callout_lists += 1
        return f"CO{self.callout_lists}"

    def iter_blocks(self) -> Iterator[Tuple[List[Block], Block]]:
        """Yield ``(sibling list, block)`` pairs in document order."""
        yield from _walk(self.blocks)

    def find_listings(self) -> List[Tuple[List[Block], Listing]]:
        """Snapshot every listing with the block list that holds it."""
        return [
            (siblings, block)
            for siblings, block in self.iter_blocks()
            if isinstance(block, Listing)
        ]


def _walk(blocks: List[Block]) -> Iterator[Tuple[List[Block], Block]]:
    for block in blocks:
        yield blocks, block
        if isinstance(block, Section):
            yield from _walk(block.blocks)


__all__ = [
    "Block",
    "Callout",
    "CalloutItem",
    "CalloutList",
    "Diagnostic",
    "Document",
    "Listing",
    "Paragraph",
    "Section",
    "SourceLocation",
]
