# publishing/markdown/postprocessors/heading_anchors.py
"""
Postprocessor that assigns anchor ids to every heading and records the TOC.

Runs after sanitization on the final document, so every heading that reaches
the reader (including headings inside dialogue asides or raw HTML) gets an id
from ``HeadingSlugger`` and an entry in ``context["toc"]``. Ids authors set
themselves are replaced; the TOC and the HTML must never disagree.
"""

from publishing.slugs import HeadingSlugger

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def heading_text(heading) -> str:
    return " ".join(heading.get_text().split())


def add_heading_anchors(soup, context: dict) -> None:
    """
    Set ``id`` on h1-h6 in document order and store TOC entries.

    Args:
        soup: Tree parsed from the sanitized HTML, edited in place
        context: Render context; receives ``toc`` as a list of
            ``{"id", "text", "level"}`` dicts
    """
    slugger = HeadingSlugger()
    toc = []

    for heading in soup.find_all(HEADING_TAGS):
        text = heading_text(heading)
        identifier = slugger.slug(text)
        heading["id"] = identifier
        toc.append({"id": identifier, "text": text, "level": int(heading.name[1])})

    context["toc"] = toc
