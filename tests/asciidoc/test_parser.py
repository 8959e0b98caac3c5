"""Tests for the AsciiDoc reader and block parser."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from altlang.asciidoc.nodes import CalloutList, Listing, Paragraph, Section
from altlang.asciidoc.parser import load_document, parse_document, split_callouts
from altlang.asciidoc.reader import MAX_INCLUDE_DEPTH


def test_split_callouts_only_matches_trailing_markers() -> None:
    assert split_callouts("GET / <1>") == ["GET / ", 1]
    assert split_callouts("a <1> <2>") == ["a ", 1, " ", 2]
    assert split_callouts("x = 1 // <3>") == ["x = 1 ", 3]
    assert split_callouts("if a <1> b") == ["if a <1> b"]
    assert split_callouts("<html>") == ["<html>"]


def test_header_title_and_attributes() -> None:
    document = parse_document("= Guide\n:source-language: console\n:empty:\n\nBody text.\n")
    assert document.title == "Guide"
    assert document.attributes == {"source-language": "console", "empty": ""}
    (paragraph,) = document.blocks
    assert isinstance(paragraph, Paragraph)
    assert paragraph.text == "Body text."


def test_passed_attributes_win_over_document_entries() -> None:
    document = parse_document(
        "= Guide\n:lookups: from-header\n\n:lookups: from-body\n:other: body\n",
        attributes={"lookups": "passed"},
    )
    assert document.attributes["lookups"] == "passed"
    assert document.attributes["other"] == "body"


def test_source_listing_language_and_location(tmp_path: Path) -> None:
    path = tmp_path / "doc.adoc"
    path.write_text("Intro.\n\n[source,console]\n----\nGET /\n----\n", encoding="utf-8")

    document = load_document(path)

    listing = document.blocks[1]
    assert isinstance(listing, Listing)
    assert listing.language == "console"
    assert listing.source == "GET /"
    assert str(listing.location) == "doc.adoc: line 4"


def test_listing_without_language_and_default_source_language() -> None:
    document = parse_document(
        "= Doc\n:source-language: ruby\n\n----\nplain\n----\n\n[source]\n----\nputs 1\n----\n"
    )
    plain, sourced = document.blocks
    assert plain.language is None
    assert sourced.language == "ruby"


def test_block_attributes_roles_id_and_title() -> None:
    document = parse_document(
        "[[search]]\n.Search request\n[source,console,role=snippet]\n----\nGET /\n----\n"
    )
    (listing,) = document.blocks
    assert listing.id == "search"
    assert listing.title == "Search request"
    assert listing.roles == ["snippet"]


def test_role_shorthand() -> None:
    document = parse_document("[source.lead,js]\n----\nx\n----\n")
    (listing,) = document.blocks
    assert listing.language == "js"
    assert listing.roles == ["lead"]


def test_callouts_get_document_wide_owners() -> None:
    document = parse_document(
        "[source,console]\n----\nGET / <1>\nPUT / <2>\n----\n<1> Read.\n<2> Write.\n\n"
        "[source,console]\n----\nGET /a\n----\n\n"
        "[source,console]\n----\nDELETE / <1>\n----\n<1> Remove.\n"
    )
    first, colist, plain, last, last_colist = document.blocks
    assert [c.anchor_id for c in first.callouts] == ["CO1-1", "CO1-2"]
    assert plain.callouts == []
    assert [c.anchor_id for c in last.callouts] == ["CO2-1"]
    assert isinstance(colist, CalloutList)
    assert colist.listing is first
    assert [colist.arearefs(item) for item in colist.items] == [["CO1-1"], ["CO1-2"]]
    assert last_colist.listing is last
    assert document.callout_lists == 2


def test_callout_list_items_span_lines() -> None:
    document = parse_document(
        "[source,js]\n----\na <1>\nb <2>\n----\n<1> First line\ncontinued.\n\n<2> Second.\n"
    )
    colist = document.blocks[1]
    assert [item.text for item in colist.items] == ["First line\ncontinued.", "Second."]


def test_callout_list_problems_are_warnings(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="altlang"):
        document = parse_document("[source,js]\n----\na <1>\n----\n<2> Nothing here.\n")

    assert [d.message for d in document.diagnostics] == [
        "callout list item index: expected 1, got 2",
        "no callout found for <2>",
    ]
    assert "<stdin>: line 5: no callout found for <2>" in caplog.text
    assert not document.errors


def test_sections_nest_and_get_unique_ids() -> None:
    document = parse_document(
        "== Setup\n\nText.\n\n=== Install\n\n----\nx\n----\n\n== Setup\n\nMore.\n"
    )
    first, second = document.blocks
    assert isinstance(first, Section)
    assert first.id == "_setup"
    assert second.id == "_setup_2"
    nested = first.blocks[1]
    assert isinstance(nested, Section)
    assert nested.level == 2
    assert isinstance(nested.blocks[0], Listing)
    assert [type(b).__name__ for _, b in document.iter_blocks()] == [
        "Section",
        "Paragraph",
        "Section",
        "Listing",
        "Section",
        "Paragraph",
    ]


def test_find_listings_returns_owning_block_lists() -> None:
    document = parse_document("----\na\n----\n\n== S\n\n----\nb\n----\n")
    (top_siblings, top), (nested_siblings, nested) = document.find_listings()
    assert top_siblings is document.blocks
    assert nested_siblings is document.blocks[1].blocks
    assert (top.source, nested.source) == ("a", "b")


def test_comments_are_skipped() -> None:
    document = parse_document("// note\n////\nhidden\n////\nVisible.\n")
    (paragraph,) = document.blocks
    assert paragraph.text == "Visible."


def test_unterminated_listing_is_a_warning() -> None:
    document = parse_document("[source,js]\n----\nnever closed\n")
    (listing,) = document.blocks
    assert listing.source == "never closed"
    assert [d.message for d in document.diagnostics] == ["unterminated listing block"]


def test_includes_are_expanded_with_their_own_locations(tmp_path: Path) -> None:
    (tmp_path / "snippets").mkdir()
    (tmp_path / "snippets" / "search.adoc").write_text(
        "[source,console]\n----\ninclude::body.txt[]\n----\n", encoding="utf-8"
    )
    (tmp_path / "snippets" / "body.txt").write_text("GET /_search\n", encoding="utf-8")
    main = tmp_path / "index.adoc"
    main.write_text("= Doc\n\ninclude::snippets/search.adoc[]\n", encoding="utf-8")

    document = load_document(main)

    (listing,) = document.blocks
    assert listing.source == "GET /_search"
    assert str(listing.location) == "snippets/search.adoc: line 2"


def test_missing_include_is_an_error(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    main = tmp_path / "index.adoc"
    main.write_text("Before.\n\ninclude::missing.adoc[leveloffset=+1]\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="altlang"):
        document = load_document(main)

    target = (tmp_path / "missing.adoc").resolve()
    assert [str(error) for error in document.errors] == [
        f"index.adoc: line 3: include file not found: {target}"
    ]
    assert f"index.adoc: line 3: include file not found: {target}" in caplog.text
    assert document.blocks[1].text == (
        "Unresolved directive in index.adoc - include::missing.adoc[leveloffset=+1]"
    )


def test_recursive_include_stops_at_max_depth(tmp_path: Path) -> None:
    loop = tmp_path / "loop.adoc"
    loop.write_text("include::loop.adoc[]\n", encoding="utf-8")

    document = load_document(loop)

    assert len(document.errors) == 1
    assert f"maximum include depth of {MAX_INCLUDE_DEPTH} exceeded" in str(document.errors[0])


def test_block_attribute_line_ends_a_paragraph() -> None:
    document = parse_document(
        "When you execute this:\n[source,console]\n----\nGET /_search\n----\n"
        "The result is this:\n[[result]]\n[source,console-result]\n----\n{}\n----\n"
    )

    intro, request, outro, result = document.blocks
    assert isinstance(intro, Paragraph)
    assert intro.text == "When you execute this:"
    assert isinstance(request, Listing)
    assert request.language == "console"
    assert outro.text == "The result is this:"
    assert result.language == "console-result"
    assert result.id == "result"


def test_block_attribute_line_ends_a_callout_item() -> None:
    document = parse_document(
        "[source,js]\n----\na <1>\n----\n<1> Explained.\n[source,js]\n----\nb\n----\n"
    )
    _, colist, following = document.blocks
    assert [item.text for item in colist.items] == ["Explained."]
    assert isinstance(following, Listing)
    assert following.language == "js"


def test_include_with_invalid_encoding_is_an_error(tmp_path: Path) -> None:
    (tmp_path / "binary.adoc").write_bytes(b"\xff\xfe bad")
    main = tmp_path / "index.adoc"
    main.write_text("include::binary.adoc[]\n", encoding="utf-8")

    document = load_document(main)

    (error,) = document.errors
    assert "include file not readable" in error.message
    assert document.blocks[0].text == "Unresolved directive in index.adoc - include::binary.adoc[]"
