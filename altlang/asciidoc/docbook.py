"""DocBook 5 rendering of parsed documents."""

from __future__ import annotations

from typing import List, Optional
from xml.sax.saxutils import escape, quoteattr

from .nodes import Block, CalloutList, Document, Listing, Paragraph, Section
from .parser import split_callouts


class DocBookRenderer:
    """Serialises a document tree to DocBook markup, one element per block."""

    def render(self, document: Document) -> str:
        parts: List[str] = []
        if document.title:
            parts.append(f"<info>\n<title>{escape(document.title)}</title>\n</info>")
        parts.extend(self.render_block(block) for block in document.blocks)
        return "\n".join(parts)

    def render_block(self, block: Block) -> str:
        if isinstance(block, Listing):
            return self._listing(block)
        if isinstance(block, CalloutList):
            return self._callout_list(block)
        if isinstance(block, Section):
            return self._section(block)
        if isinstance(block, Paragraph):
            return self._titled(block, f"<simpara>{escape(block.text)}</simpara>")
        raise TypeError(f"Cannot render block of type {type(block).__name__}")

    def _listing(self, listing: Listing) -> str:
        body = self._listing_body(listing)
        if listing.language is None:
            element = f"<screen{_attrs(('xml:id', listing.id), ('role', listing.role))}>{body}</screen>"
        else:
            attrs = _attrs(
                ("xml:id", listing.id),
                ("role", listing.role),
                ("language", listing.language),
                ("linenumbering", "unnumbered"),
            )
            element = f"<programlisting{attrs}>{body}</programlisting>"
        return self._titled(listing, element)

    def _listing_body(self, listing: Listing) -> str:
        callouts = iter(listing.callouts)
        rendered: List[str] = []
        for line in listing.lines:
            pieces: List[str] = []
            for segment in split_callouts(line):
                if isinstance(segment, int):
                    callout = next(callouts)
                    pieces.append(f'<co id="{callout.anchor_id}"/>')
                else:
                    pieces.append(escape(segment))
            rendered.append("".join(pieces))
        return "\n".join(rendered)

    def _callout_list(self, colist: CalloutList) -> str:
        lines = [f"<calloutlist{_attrs(('xml:id', colist.id), ('role', colist.role))}>"]
        if colist.title:
            lines.append(f"<title>{escape(colist.title)}</title>")
        for item in colist.items:
            arearefs = " ".join(colist.arearefs(item))
            lines.append(f"<callout arearefs={quoteattr(arearefs)}>")
            lines.append(f"<para>{escape(item.text)}</para>")
            lines.append("</callout>")
        lines.append("</calloutlist>")
        return "\n".join(lines)

    def _section(self, section: Section) -> str:
        lines = [
            f"<section{_attrs(('xml:id', section.id), ('role', section.role))}>",
            f"<title>{escape(section.title or '')}</title>",
        ]
        lines.extend(self.render_block(block) for block in section.blocks)
        lines.append("</section>")
        return "\n".join(lines)

    @staticmethod
    def _titled(block: Block, element: str) -> str:
        if not block.title:
            return element
        return (
            f"<formalpara>\n<title>{escape(block.title)}</title>\n"
            f"<para>\n{element}\n</para>\n</formalpara>"
        )


def _attrs(*pairs: tuple[str, Optional[str]]) -> str:
    return "".join(f" {name}={quoteattr(value)}" for name, value in pairs if value)


def render_docbook(document: Document) -> str:
    return DocBookRenderer().render(document)


__all__ = ["DocBookRenderer", "render_docbook"]
