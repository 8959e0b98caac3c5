"""Loading alternative fragments from lookup directories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ..asciidoc.nodes import Document, Listing, SourceLocation
from ..asciidoc.parser import parse_document
from ..logging import get_logger, log_at

FRAGMENT_SUFFIX = ".adoc"


@dataclass
class LoadResult:
    """Outcome of a fragment lookup.

    ``path`` is set whenever a file was found on disk, even if the fragment
    was then rejected; ``document`` only when it may be spliced.
    """

    found: bool
    document: Optional[Document] = None
    path: Optional[Path] = None

    @classmethod
    def not_found(cls, path: Optional[Path] = None) -> "LoadResult":
        return cls(found=False, path=path)


class FragmentLoader:
    """Finds ``<digest>.adoc`` files and parses them as nested documents.

    Each configured directory is indexed once, recursively, so fragments may be
    organised in subdirectories. File contents are read once per path; every
    :meth:`load` still parses afresh so each splice owns its blocks.
    """

    def __init__(
        self,
        *,
        display_root: Optional[Path] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.display_root = display_root
        self.logger = logger or get_logger("lookup")
        self._indexes: Dict[Path, Dict[str, Path]] = {}
        self._texts: Dict[Path, str] = {}

    def locate(self, directory: Path, digest: str) -> Optional[Path]:
        candidate = directory / f"{digest}{FRAGMENT_SUFFIX}"
        if candidate.is_file():
            return candidate
        return self._index(directory).get(digest)

    def load(
        self,
        directory: Path,
        digest: str,
        alternative_lang: str,
        source_lang: Optional[str] = None,
    ) -> LoadResult:
        """Load the ``alternative_lang`` fragment for ``digest`` from ``directory``."""
        path = self.locate(directory, digest)
        if path is None:
            self.logger.debug(
                "No %s alternative for %s listing %s in %s",
                alternative_lang,
                source_lang or "source",
                digest,
                directory,
            )
            return LoadResult.not_found()

        try:
            text = self._read(path)
        except (OSError, UnicodeDecodeError) as exc:
            log_at(
                self.logger,
                logging.ERROR,
                SourceLocation(path.resolve(), 1, self.display_root).display_path,
                f"cannot read {alternative_lang} alternative: {exc}",
            )
            return LoadResult.not_found(path)

        fragment = parse_document(
            text,
            path=path,
            display_root=self.display_root,
        )

        first = fragment.blocks[0] if fragment.blocks else None
        actual = first.language if isinstance(first, Listing) else None
        if actual != alternative_lang:
            location = (
                first.location
                if first is not None and first.location is not None
                else SourceLocation(path.resolve(), 1, self.display_root)
            )
            log_at(
                self.logger,
                logging.WARNING,
                location,
                f"Alternative language listing must have lang={alternative_lang} but was {actual or ''}.",
            )
            return LoadResult.not_found(path)

        return LoadResult(found=True, document=fragment, path=path)

    def _read(self, path: Path) -> str:
        text = self._texts.get(path)
        if text is None:
            text = path.read_text(encoding="utf-8")
            self._texts[path] = text
        return text

    def _index(self, directory: Path) -> Dict[str, Path]:
        index = self._indexes.get(directory)
        if index is None:
            index = {}
            for candidate in sorted(directory.rglob(f"*{FRAGMENT_SUFFIX}")):
                if candidate.is_file():
                    index.setdefault(candidate.stem, candidate)
            self._indexes[directory] = index
        return index


__all__ = ["FRAGMENT_SUFFIX", "FragmentLoader", "LoadResult"]
