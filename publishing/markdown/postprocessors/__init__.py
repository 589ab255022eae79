# publishing/markdown/postprocessors/__init__.py
"""
HTML postprocessors, run on pandoc's HTML5 output.

Two stages:

- ``HTML_POSTPROCESSORS`` take and return an HTML string. The sanitizer is
  the only one and always runs first.
- ``TREE_POSTPROCESSORS`` receive one BeautifulSoup tree parsed from the
  sanitized HTML and edit it in place. The tree is serialized once at the end.
"""

from bs4 import BeautifulSoup

from .heading_anchors import add_heading_anchors
from .sanitizer import sanitize_html
from .title_figure import wrap_titled_images

HTML_POSTPROCESSORS = [
    sanitize_html,
]

TREE_POSTPROCESSORS = [
    wrap_titled_images,  # <img title> -> <figure> with <figcaption>
    add_heading_anchors,  # Heading ids + context["toc"], must stay last
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Sanitize, then run the tree postprocessors over a single parsed tree"""
    for processor in HTML_POSTPROCESSORS:
        html = processor(html, context)

    soup = BeautifulSoup(html, "html.parser")
    for processor in TREE_POSTPROCESSORS:
        processor(soup, context)
    return str(soup)
