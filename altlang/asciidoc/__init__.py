"""Minimal AsciiDoc reader, parser and DocBook renderer."""

from .docbook import DocBookRenderer, render_docbook
from .nodes import (
    Block,
    Callout,
    CalloutItem,
    CalloutList,
    Diagnostic,
    Document,
    Listing,
    Paragraph,
    Section,
    SourceLocation,
)
from .parser import load_document, parse_document, split_callouts

__all__ = [
    "Block",
    "Callout",
    "CalloutItem",
    "CalloutList",
    "Diagnostic",
    "DocBookRenderer",
    "Document",
    "Listing",
    "Paragraph",
    "Section",
    "SourceLocation",
    "load_document",
    "parse_document",
    "render_docbook",
    "split_callouts",
]
