"""Core data models shared across altlang components."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .asciidoc.nodes import Document


@dataclass(frozen=True)
class AlternativeConfigEntry:
    """One configured ``source_lang -> alternative_lang`` lookup directory."""

    source_lang: str
    alternative_lang: str
    directory: Path


@dataclass
class AlternativeOutcome:
    """What happened when looking up one alternative for one listing."""

    alternative_lang: str
    found: bool
    fragment: Optional[Document] = None
    path: Optional[Path] = None


__all__ = ["AlternativeConfigEntry", "AlternativeOutcome"]
