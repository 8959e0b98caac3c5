"""Parsing and validation of ``alternative_language_lookups``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from ..config import LOOKUPS_ATTRIBUTE, ConfigError
from ..models import AlternativeConfigEntry
from .listing import split_result_language


class LookupConfigError(ConfigError):
    """Raised when the lookup configuration cannot be used.

    ``reason`` names the failed check and ``subject`` the offending value
    (directory, language or raw record).
    """

    def __init__(self, reason: str, subject: str, detail: str) -> None:
        super().__init__(f"invalid {LOOKUPS_ATTRIBUTE}, {detail}")
        self.reason = reason
        self.subject = subject


class LookupIndex:
    """Configured alternatives grouped by source language, in input order."""

    def __init__(self, entries: Mapping[str, Tuple[AlternativeConfigEntry, ...]] | None = None) -> None:
        self._entries: Dict[str, Tuple[AlternativeConfigEntry, ...]] = dict(entries or {})

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __iter__(self) -> Iterator[AlternativeConfigEntry]:
        for entries in self._entries.values():
            yield from entries

    @property
    def source_languages(self) -> List[str]:
        return list(self._entries)

    def alternatives_for(self, source_lang: str) -> Tuple[AlternativeConfigEntry, ...]:
        return self._entries.get(source_lang, ())

    def lookup_listing_language(
        self, language: Optional[str]
    ) -> Optional[Tuple[str, Tuple[AlternativeConfigEntry, ...]]]:
        """Return ``(source_lang, alternatives)`` for an eligible listing language.

        ``console`` and ``console-result`` both resolve to the ``console``
        entries; anything without configured alternatives yields ``None``.
        """
        if not language:
            return None
        alternatives = self._entries.get(language)
        if alternatives:
            return language, alternatives
        source_lang, is_result = split_result_language(language)
        if is_result:
            alternatives = self._entries.get(source_lang)
            if alternatives:
                return source_lang, alternatives
        return None

    def as_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            source_lang: [
                {"alternative_lang": entry.alternative_lang, "directory": str(entry.directory)}
                for entry in entries
            ]
            for source_lang, entries in self._entries.items()
        }


def parse_lookups(config_text: Optional[str], *, base_dir: Path | None = None) -> LookupIndex:
    """Parse ``source_lang,alternative_lang,directory`` records into an index.

    Blank input disables lookups and yields an empty index. A missing
    directory, an alternative language configured twice (across all source
    languages) or a record without three fields raises
    :class:`LookupConfigError`.
    """
    if config_text is None or not config_text.strip():
        return LookupIndex()

    root = base_dir or Path.cwd()
    grouped: Dict[str, List[AlternativeConfigEntry]] = {}
    seen_alternatives: Dict[str, AlternativeConfigEntry] = {}

    for raw in config_text.splitlines():
        record = raw.strip()
        if not record:
            continue
        fields = [part.strip() for part in record.split(",", 2)]
        if len(fields) != 3 or not all(fields):
            raise LookupConfigError(
                "malformed record",
                record,
                f"expected source_lang,alternative_lang,directory but got [{record}]",
            )
        source_lang, alternative_lang, directory_text = fields

        directory = _absolute(root, directory_text)
        if not directory.is_dir():
            raise LookupConfigError(
                "directory does not exist", str(directory), f"[{directory}] doesn't exist"
            )
        if alternative_lang in seen_alternatives:
            raise LookupConfigError(
                "duplicate alternative language",
                alternative_lang,
                f"duplicate alternative_lang [{alternative_lang}]",
            )

        entry = AlternativeConfigEntry(
            source_lang=source_lang,
            alternative_lang=alternative_lang,
            directory=directory,
        )
        seen_alternatives[alternative_lang] = entry
        grouped.setdefault(source_lang, []).append(entry)

    return LookupIndex({source_lang: tuple(entries) for source_lang, entries in grouped.items()})


def _absolute(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return Path(os.path.normpath(path))


__all__ = ["LookupConfigError", "LookupIndex", "parse_lookups"]
