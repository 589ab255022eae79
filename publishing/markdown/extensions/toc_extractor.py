from __future__ import annotations

from typing import Any, Iterable, Mapping, TypedDict

from bs4 import BeautifulSoup

from publishing.markdown.postprocessors.heading_anchors import HEADING_TAGS, heading_text
from publishing.slugs import HeadingSlugger


class TocEntry(TypedDict):
    id: str
    text: str
    level: int


class HeadingNode(TypedDict):
    level: int
    id: str
    text: str
    children: list["HeadingNode"]


def extract_toc(markdown: str, characters: Mapping[str, str] | None = None) -> list[TocEntry]:
    """
    Return the flat, document-order table of contents for ``markdown``.

    The entries come from the same render that produces the article HTML, so
    every ``id`` here is exactly the ``id`` of the matching heading element.
    """
    from publishing.markdown.renderer import render_markdown_with_toc

    return render_markdown_with_toc(markdown, characters=characters).toc


def extract_toc_from_html(html: str) -> list[TocEntry]:
    """
    Given rendered HTML, return the flat list of headings for a TOC.

    Used for HTML rendered earlier and stored. Headings that already carry an
    id keep it; headings without one get the id the renderer would assign.
    """
    soup = BeautifulSoup(html, "html.parser")
    slugger = HeadingSlugger()
    toc: list[TocEntry] = []

    for heading in soup.find_all(HEADING_TAGS):
        text = heading_text(heading)
        generated = slugger.slug(text)
        toc.append(
            {
                "id": heading.get("id") or generated,
                "text": text,
                "level": int(heading.name[1]),
            }
        )

    return toc


def _coerce_entry(raw: Mapping[str, Any]) -> TocEntry | None:
    """Coerce arbitrary mapping data into a TocEntry."""
    try:
        level = int(raw.get("level"))
    except (TypeError, ValueError):
        level = 1
    level = max(1, min(level, 6))

    identifier = str(raw.get("id") or "").strip()
    # Older cached TOCs used "title" for the heading text
    text = str(raw.get("text") or raw.get("title") or "").strip()
    if not identifier or not text:
        return None

    return {"id": identifier, "text": text, "level": level}


def build_toc_tree(items: Iterable[Mapping[str, Any]]) -> list[HeadingNode]:
    """
    Rebuild heading nesting from a flat TOC.

    Each heading becomes a child of the closest preceding heading with a
    lower level. Skipped levels (h1 followed by h3) simply nest one deep.
    """
    tree: list[HeadingNode] = []
    stack: list[HeadingNode] = []

    for item in items:
        if not isinstance(item, Mapping):
            continue
        entry = _coerce_entry(item)
        if entry is None:
            continue

        node: HeadingNode = {**entry, "children": []}

        while stack and stack[-1]["level"] >= node["level"]:
            stack.pop()

        if stack:
            stack[-1]["children"].append(node)
        else:
            tree.append(node)

        stack.append(node)

    return tree
