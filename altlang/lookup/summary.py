"""Coverage accounting for alternative lookups."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Sequence

from ..models import AlternativeOutcome
from .listing import ListingSpec


@dataclass
class LanguageCoverage:
    total: int = 0
    found: Dict[str, int] = field(default_factory=dict)


class CoverageAccumulator:
    """Counts listings and found alternatives per source language.

    One accumulator belongs to one conversion run. ``total`` counts listings
    (result listings included) and each alternative's ``found`` count can
    never exceed it.
    """

    def __init__(self) -> None:
        self._languages: Dict[str, LanguageCoverage] = {}

    def __bool__(self) -> bool:
        return bool(self._languages)

    def start_listing(self, source_lang: str, alternative_langs: Iterable[str] = ()) -> None:
        coverage = self._languages.setdefault(source_lang, LanguageCoverage())
        coverage.total += 1
        for alternative_lang in alternative_langs:
            coverage.found.setdefault(alternative_lang, 0)

    def record(self, source_lang: str, alternative_lang: str, found: bool) -> None:
        coverage = self._languages.setdefault(source_lang, LanguageCoverage())
        coverage.found.setdefault(alternative_lang, 0)
        if found:
            coverage.found[alternative_lang] += 1

    def record_listing(self, listing: ListingSpec, outcomes: Sequence[AlternativeOutcome]) -> None:
        """Count ``listing`` once and every outcome against its alternative."""
        self.start_listing(
            listing.source_lang, (entry.alternative_lang for entry in listing.alternatives)
        )
        for outcome in outcomes:
            self.record(listing.source_lang, outcome.alternative_lang, outcome.found)

    def total(self, source_lang: str) -> int:
        coverage = self._languages.get(source_lang)
        return coverage.total if coverage else 0

    def found(self, source_lang: str, alternative_lang: str) -> int:
        coverage = self._languages.get(source_lang)
        return coverage.found.get(alternative_lang, 0) if coverage else 0

    def as_dict(self) -> Dict[str, Dict[str, object]]:
        return {
            source_lang: {
                "total": coverage.total,
                "alternatives": {
                    alternative_lang: {"found": count}
                    for alternative_lang, count in coverage.found.items()
                },
            }
            for source_lang, coverage in self._languages.items()
        }


def write_summary(path: Path, accumulator: CoverageAccumulator) -> bool:
    """Write the JSON summary; nothing is written when no listing was seen."""
    if not accumulator:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(accumulator.as_dict(), indent=2) + "\n", encoding="utf-8")
    return True


__all__ = ["CoverageAccumulator", "LanguageCoverage", "write_summary"]
