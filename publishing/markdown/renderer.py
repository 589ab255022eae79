# publishing/markdown/renderer.py

import json
import logging
from dataclasses import dataclass, field

import pypandoc
from django.conf import settings

from .config import RENDERER_ID, get_pandoc_config
from .filters import apply_filters
from .postprocessors import apply_postprocessors
from .preprocessors import apply_preprocessors

logger = logging.getLogger(__name__)


@dataclass
class RenderedContent:
    html: str
    toc: list = field(default_factory=list)
    renderer: str = RENDERER_ID


def parse_markdown(text: str) -> dict:
    """Parse markdown into Pandoc's JSON document tree."""
    pandoc_config = get_pandoc_config()
    output = pypandoc.convert_text(
        text,
        to="json",
        format=pandoc_config["reader"],
        extra_args=pandoc_config["extra_args"],
    )
    return json.loads(output)


def serialize_html(document: dict) -> str:
    """Write a Pandoc JSON document tree out as an HTML5 fragment."""
    pandoc_config = get_pandoc_config()
    return pypandoc.convert_text(
        json.dumps(document),
        to=pandoc_config["writer"],
        format="json",
        extra_args=pandoc_config["extra_args"],
    )


def render_markdown(text, context=None):
    """
    Render author markdown to a sanitized HTML fragment.

    1. directive fences are normalized for pandoc
    2. pandoc parses the text into its JSON AST
    3. AST filters turn character directives into dialogue asides
    4. pandoc writes the AST out as HTML5
    5. the HTML is sanitized, then figures and heading ids are added

    Args:
        text: Raw markdown text
        context: Optional dict for processors that need additional data.
            ``characters`` maps directive names to avatar URLs and defaults
            to ``settings.BLOG_CHARACTERS``. After rendering, ``toc`` holds
            the table of contents of the returned HTML.
    """
    context = context if context is not None else {}
    context.setdefault("characters", getattr(settings, "BLOG_CHARACTERS", {}))

    # 1. :::name{attrs} -> ::: {.name attrs}
    text = apply_preprocessors(text or "", context)

    # 2-4. pandoc JSON AST, filtered, back out as HTML5
    document = parse_markdown(text)
    document = apply_filters(document, context)
    html = serialize_html(document)

    # 5. bleach, then figures and heading anchors on one tree
    html = apply_postprocessors(html, context)

    logger.debug(
        f"Rendered {len(text)} chars of markdown into {len(html)} chars of HTML "
        f"({len(context.get('toc', []))} headings)"
    )
    return html


def render_markdown_with_toc(text, characters=None) -> RenderedContent:
    """Render markdown and return the HTML together with its table of contents."""
    context = {}
    if characters is not None:
        context["characters"] = characters

    html = render_markdown(text, context)
    return RenderedContent(html=html, toc=context.get("toc", []))
