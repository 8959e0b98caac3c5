"""Content digests for listing bodies."""

from __future__ import annotations

from typing import Dict

import mmh3

# Byte offsets of the four 32-bit words of the 128-bit hash, printed last word first.
_WORD_ORDER = (12, 8, 4, 0)


def digest_of(source: str) -> str:
    """Return the MurmurHash3 x64_128 digest of ``source`` as 32 hex characters.

    The digest names the alternative file (``<digest>.adoc``) and anchors the
    listing in the report. Line endings are normalised to ``\\n`` first.
    """
    normalised = source.replace("\r\n", "\n").replace("\r", "\n")
    raw = mmh3.hash_bytes(normalised.encode("utf-8"), 0, True)
    return "".join(raw[offset : offset + 4].hex() for offset in _WORD_ORDER)


class DigestCache:
    """Memoises digests for the bodies seen during one conversion."""

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}
        self.hits = 0

    def get(self, source: str) -> str:
        digest = self._entries.get(source)
        if digest is not None:
            self.hits += 1
            return digest
        digest = digest_of(source)
        self._entries[source] = digest
        return digest

    def __contains__(self, source: object) -> bool:
        return source in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["DigestCache", "digest_of"]
