"""Callout id reconciliation between a listing and its alternatives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..asciidoc.nodes import CalloutList, Document, Listing


@dataclass
class AlternativeBlocks:
    """The listing of a loaded fragment and the callout list explaining it."""

    listing: Listing
    callout_list: Optional[CalloutList] = None

    @property
    def language(self) -> str:
        return self.listing.language or ""

    @classmethod
    def from_fragment(cls, fragment: Document) -> "AlternativeBlocks":
        listing = fragment.blocks[0]
        if not isinstance(listing, Listing):
            raise TypeError("fragment must start with a listing")
        following = fragment.blocks[1] if len(fragment.blocks) > 1 else None
        colist = (
            following
            if isinstance(following, CalloutList) and following.listing is listing
            else None
        )
        return cls(listing=listing, callout_list=colist)


class CalloutMerger:
    """Re-owns alternative callouts so their anchors never collide.

    Every fragment numbers its callouts from ``CO1`` because it was parsed on
    its own. Alternatives are renamed to ``A<ordinal>-CO<n>``, where ``CO<n>``
    is the original listing's owner (or a fresh owner reserved from the host
    document when the original has no callouts). Visible numbers stay as
    written; the number of callouts may differ between listings.
    """

    def merge(
        self,
        document: Document,
        original: Listing,
        alternatives: Sequence[AlternativeBlocks],
    ) -> None:
        base = original.callout_owner
        for ordinal, alternative in enumerate(alternatives):
            if not alternative.listing.callouts:
                continue
            if base is None:
                base = document.reserve_callout_owner()
            owner = f"A{ordinal}-{base}"
            for callout in alternative.listing.callouts:
                callout.owner = owner


__all__ = ["AlternativeBlocks", "CalloutMerger"]
