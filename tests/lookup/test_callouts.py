"""Tests for altlang.lookup.callouts."""

from __future__ import annotations

import pytest

from altlang.asciidoc.parser import parse_document
from altlang.lookup.callouts import AlternativeBlocks, CalloutMerger


def _fragment(language: str, markers: int):
    body = "\n".join(f"line {n} <{n}>" for n in range(1, markers + 1))
    items = "\n".join(f"<{n}> Explains line {n}." for n in range(1, markers + 1))
    text = f"[source,{language}]\n----\n{body}\n----\n{items}\n" if markers else (
        f"[source,{language}]\n----\nno markers\n----\n"
    )
    return AlternativeBlocks.from_fragment(parse_document(text))


def test_alternative_blocks_pick_up_following_callout_list() -> None:
    blocks = _fragment("js", 2)
    assert blocks.language == "js"
    assert blocks.callout_list is not None
    assert blocks.callout_list.listing is blocks.listing


def test_alternative_blocks_without_callout_list() -> None:
    blocks = _fragment("js", 0)
    assert blocks.callout_list is None


def test_from_fragment_requires_a_leading_listing() -> None:
    with pytest.raises(TypeError):
        AlternativeBlocks.from_fragment(parse_document("Only prose."))


def test_merge_reuses_original_callout_owner() -> None:
    host = parse_document("[source,console]\n----\nGET / <1>\n----\n<1> Root.\n")
    original = host.blocks[0]
    alternatives = [_fragment("js", 1), _fragment("csharp", 3)]

    CalloutMerger().merge(host, original, alternatives)

    assert [c.anchor_id for c in original.callouts] == ["CO1-1"]
    assert [c.anchor_id for c in alternatives[0].listing.callouts] == ["A0-CO1-1"]
    assert [c.anchor_id for c in alternatives[1].listing.callouts] == [
        "A1-CO1-1",
        "A1-CO1-2",
        "A1-CO1-3",
    ]
    assert alternatives[1].callout_list.arearefs(alternatives[1].callout_list.items[2]) == [
        "A1-CO1-3"
    ]


def test_merge_reserves_owner_when_original_has_no_callouts() -> None:
    host = parse_document(
        "[source,console]\n----\nGET / <1>\n----\n<1> Root.\n\n"
        "[source,console]\n----\nGET /_cat\n----\n"
    )
    original = host.blocks[2]
    alternatives = [_fragment("js", 2)]

    CalloutMerger().merge(host, original, alternatives)

    assert [c.anchor_id for c in alternatives[0].listing.callouts] == ["A0-CO2-1", "A0-CO2-2"]
    assert host.callout_lists == 2


def test_merged_ids_are_unique_for_many_alternatives() -> None:
    host = parse_document("[source,console]\n----\nGET / <1>\nPUT / <2>\n----\n")
    original = host.blocks[0]
    alternatives = [_fragment(f"lang{n}", n % 3 + 1) for n in range(8)]

    CalloutMerger().merge(host, original, alternatives)

    ids = [c.anchor_id for c in original.callouts] + [
        c.anchor_id for alternative in alternatives for c in alternative.listing.callouts
    ]
    assert len(ids) == len(set(ids))


def test_merge_without_alternative_callouts_reserves_nothing() -> None:
    host = parse_document("[source,console]\n----\nGET /\n----\n")
    CalloutMerger().merge(host, host.blocks[0], [_fragment("js", 0)])
    assert host.callout_lists == 0
