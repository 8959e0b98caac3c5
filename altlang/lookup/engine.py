"""Tree processor that inlines alternative language listings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..asciidoc.nodes import Block, CalloutList, Document, Listing
from ..config import LOOKUPS_ATTRIBUTE
from ..logging import get_logger
from ..models import AlternativeConfigEntry, AlternativeOutcome
from .callouts import AlternativeBlocks, CalloutMerger
from .digest import DigestCache
from .listing import ListingSpec
from .loader import FragmentLoader
from .report import Report
from .resolver import LookupConfigError, LookupIndex, parse_lookups
from .summary import CoverageAccumulator


@dataclass
class _Insertion:
    siblings: List[Block]
    anchor: Block
    blocks: List[Block]
    after: bool


class SplicePlan:
    """Insertions collected during the walk and applied once it is over."""

    def __init__(self) -> None:
        self._insertions: List[_Insertion] = []

    def __len__(self) -> int:
        return len(self._insertions)

    def insert_before(self, siblings: List[Block], anchor: Block, blocks: Sequence[Block]) -> None:
        if blocks:
            self._insertions.append(_Insertion(siblings, anchor, list(blocks), after=False))

    def insert_after(self, siblings: List[Block], anchor: Block, blocks: Sequence[Block]) -> None:
        if blocks:
            self._insertions.append(_Insertion(siblings, anchor, list(blocks), after=True))

    def apply(self) -> None:
        for insertion in self._insertions:
            index = _index_of(insertion.siblings, insertion.anchor)
            if insertion.after:
                index += 1
            insertion.siblings[index:index] = insertion.blocks
        self._insertions.clear()


class AlternativeLanguageLookup:
    """Finds alternatives for configured listings and splices them in.

    The pass is a no-op unless ``alternative_language_lookups`` resolves to at
    least one entry. For every eligible listing, found alternatives are
    inserted right before it (config order), their callout lists right
    before the original callout list, and the outcome is recorded in the
    accumulator and the optional report.
    """

    def __init__(
        self,
        *,
        loader_factory: Callable[..., FragmentLoader] = FragmentLoader,
        merger: CalloutMerger | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loader_factory = loader_factory
        self.merger = merger or CalloutMerger()
        self.logger = logger or get_logger("lookup")

    def resolve(self, document: Document, *, base_dir: Path | None = None) -> LookupIndex:
        """Return the lookup index for ``document``; empty when disabled or invalid."""
        try:
            return parse_lookups(document.attributes.get(LOOKUPS_ATTRIBUTE), base_dir=base_dir)
        except LookupConfigError as exc:
            self.logger.error(str(exc))
            return LookupIndex()

    def process(
        self,
        document: Document,
        accumulator: CoverageAccumulator,
        *,
        index: LookupIndex | None = None,
        report: Optional[Report] = None,
    ) -> int:
        """Walk ``document`` once and return how many listings were processed."""
        if index is None:
            index = self.resolve(document)
        if not index:
            return 0

        digests = DigestCache()
        loader = self._loader_factory(display_root=document.base_dir)
        plan = SplicePlan()
        processed = 0

        for siblings, listing in document.find_listings():
            match = index.lookup_listing_language(listing.language)
            if match is None:
                continue
            _, alternatives = match
            spec = ListingSpec.from_listing(listing, alternatives, digests=digests)
            outcomes = [self._lookup(loader, spec, entry) for entry in alternatives]
            found = [outcome for outcome in outcomes if outcome.found]
            if found:
                self._plan_splice(document, plan, siblings, listing, found)

            accumulator.record_listing(spec, outcomes)
            if report is not None:
                report.report(spec, {outcome.alternative_lang for outcome in found})
            processed += 1

        plan.apply()
        self.logger.debug(
            "Processed %d listings (%d cached digests reused)", processed, digests.hits
        )
        return processed

    def _lookup(
        self, loader: FragmentLoader, spec: ListingSpec, entry: AlternativeConfigEntry
    ) -> AlternativeOutcome:
        result = loader.load(
            entry.directory,
            spec.digest,
            spec.expected_language(entry),
            spec.source_lang,
        )
        return AlternativeOutcome(
            alternative_lang=entry.alternative_lang,
            found=result.found,
            fragment=result.document,
            path=result.path,
        )

    def _plan_splice(
        self,
        document: Document,
        plan: SplicePlan,
        siblings: List[Block],
        listing: Listing,
        found: Sequence[AlternativeOutcome],
    ) -> None:
        alternatives = [
            AlternativeBlocks.from_fragment(outcome.fragment)
            for outcome in found
            if outcome.fragment is not None
        ]
        self.merger.merge(document, listing, alternatives)

        has_roles = [f"has-{outcome.alternative_lang}" for outcome in found]
        for alternative in alternatives:
            alternative.listing.roles.insert(0, "alternative")
            if alternative.callout_list is not None:
                alternative.callout_list.roles[:0] = ["alternative", f"lang-{alternative.language}"]
        for role in ["default", *has_roles]:
            listing.add_role(role)

        plan.insert_before(siblings, listing, [alternative.listing for alternative in alternatives])

        alternative_colists = [
            alternative.callout_list
            for alternative in alternatives
            if alternative.callout_list is not None
        ]
        colist = _callout_list_after(siblings, listing)
        if colist is not None:
            for role in ["default", *has_roles, f"lang-{listing.language}"]:
                colist.add_role(role)
            plan.insert_before(siblings, colist, alternative_colists)
        else:
            plan.insert_after(siblings, listing, alternative_colists)


def _callout_list_after(siblings: List[Block], listing: Listing) -> Optional[CalloutList]:
    index = _index_of(siblings, listing)
    following = siblings[index + 1] if index + 1 < len(siblings) else None
    if isinstance(following, CalloutList) and following.listing is listing:
        return following
    return None


def _index_of(blocks: Sequence[Block], anchor: Block) -> int:
    for index, block in enumerate(blocks):
        if block is anchor:
            return index
    raise ValueError("block is no longer part of its parent")


__all__ = ["AlternativeLanguageLookup", "SplicePlan"]
