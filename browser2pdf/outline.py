"""Outline document fed to the table-of-contents stylesheet.

The vocabulary matches the one wkhtmltopdf hands to ``--xsl-style-sheet``
so existing TOC stylesheets keep working::

    <outline xmlns="http://wkhtmltopdf.org/outline">
      <item title="" page="0" link="" backLink="">
        <item title="..." page="3" link="..." backLink=""/>
        ...
      </item>
    </outline>
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

OUTLINE_NAMESPACE = "http://wkhtmltopdf.org/outline"

_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


@dataclass(frozen=True)
class OutlineItem:
    """A single TOC entry; ``page`` is 1-based in the merged document."""

    title: str
    link: str
    page: int


def xml_escape(text: str) -> str:
    """Escape the five XML reserved characters."""
    return "".join(_XML_ESCAPES.get(char, char) for char in text)


def _item(title: str, page: int, link: str, children: str = "") -> str:
    attributes = (
        f'title="{xml_escape(title)}" page="{page}" '
        f'link="{xml_escape(link)}" backLink=""'
    )
    if children:
        return f"<item {attributes}>{children}</item>"
    return f"<item {attributes}/>"


def build_outline(items: Iterable[OutlineItem]) -> str:
    """Serialise outline items into the flat outline XML document."""
    children = "\n".join(_item(item.title, item.page, item.link) for item in items)
    root_item = _item("", 0, "", "\n" + children + "\n" if children else "")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<outline xmlns="{OUTLINE_NAMESPACE}">\n{root_item}\n</outline>\n'
    )
