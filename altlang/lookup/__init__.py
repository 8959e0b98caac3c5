"""Alternative language lookup for source listings."""

from .callouts import AlternativeBlocks, CalloutMerger
from .digest import DigestCache, digest_of
from .engine import AlternativeLanguageLookup, SplicePlan
from .listing import ListingSpec
from .loader import FragmentLoader, LoadResult
from .report import Report
from .resolver import LookupConfigError, LookupIndex, parse_lookups
from .summary import CoverageAccumulator, write_summary

__all__ = [
    "AlternativeBlocks",
    "AlternativeLanguageLookup",
    "CalloutMerger",
    "CoverageAccumulator",
    "DigestCache",
    "FragmentLoader",
    "ListingSpec",
    "LoadResult",
    "LookupConfigError",
    "LookupIndex",
    "Report",
    "SplicePlan",
    "digest_of",
    "parse_lookups",
    "write_summary",
]
