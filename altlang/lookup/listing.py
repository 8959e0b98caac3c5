"""Listings that qualify for alternative lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..asciidoc.nodes import Listing, SourceLocation
from ..models import AlternativeConfigEntry
from .digest import DigestCache

RESULT_SUFFIX = "-result"


def split_result_language(language: str) -> Tuple[str, bool]:
    """Split ``console-result`` into ``("console", True)``."""
    if language.endswith(RESULT_SUFFIX) and len(language) > len(RESULT_SUFFIX):
        return language[: -len(RESULT_SUFFIX)], True
    return language, False


@dataclass
class ListingSpec:
    """A listing that qualifies for alternative lookup.

    ``language`` is the listing's own language (``console`` or
    ``console-result``); ``source_lang`` is the configured language it is
    grouped under. The digest is computed on first access.
    """

    language: str
    source: str
    location: Optional[SourceLocation]
    is_result: bool
    source_lang: str
    alternatives: Tuple[AlternativeConfigEntry, ...]
    digests: DigestCache = field(default_factory=DigestCache, repr=False, compare=False)
    _digest: Optional[str] = field(default=None, init=False, repr=False, compare=False)

    @property
    def digest(self) -> str:
        if self._digest is None:
            self._digest = self.digests.get(self.source)
        return self._digest

    def expected_language(self, entry: AlternativeConfigEntry) -> str:
        """Language an alternative fragment must declare for this listing."""
        if self.is_result:
            return f"{entry.alternative_lang}{RESULT_SUFFIX}"
        return entry.alternative_lang

    @classmethod
    def from_listing(
        cls,
        listing: Listing,
        alternatives: Tuple[AlternativeConfigEntry, ...],
        *,
        digests: DigestCache | None = None,
    ) -> "ListingSpec":
        language = listing.language or ""
        source_lang, is_result = split_result_language(language)
        return cls(
            language=language,
            source=listing.source,
            location=listing.location,
            is_result=is_result,
            source_lang=source_lang,
            alternatives=alternatives,
            digests=digests or DigestCache(),
        )


__all__ = ["ListingSpec", "RESULT_SUFFIX", "split_result_language"]
