# publishing/markdown/postprocessors/sanitizer.py

import logging
from functools import lru_cache

import bleach

logger = logging.getLogger(__name__)

GLOBAL_ATTRIBUTES = {"class", "id", "title", "role", "lang", "dir"}
GLOBAL_ATTRIBUTE_PREFIXES = ("data-", "aria-")


@lru_cache(maxsize=1)
def _get_bleach_config():
    """Cache bleach configuration for better performance."""
    allowed_tags = set(bleach.sanitizer.ALLOWED_TAGS).union(
        {
            # text
            "p",
            "br",
            "wbr",
            "div",
            "span",
            "section",
            "aside",
            "cite",
            "mark",
            "ins",
            "del",
            "s",
            "sup",  # superscript (for footnotes)
            "sub",
            "small",
            "q",
            # headings
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            # lists
            "ul",
            "ol",
            "li",
            "hr",
            "blockquote",
            "dl",
            "dt",
            "dd",
            # code
            "pre",
            "code",
            "kbd",
            "samp",
            "var",
            # tables
            "table",
            "thead",
            "tbody",
            "tfoot",
            "tr",
            "th",
            "td",
            "caption",
            "colgroup",
            "col",
            # media
            "img",
            "figure",
            "figcaption",
            "picture",
            "source",
            # links
            "a",
            # forms (for task lists)
            "input",
            "label",
            # semantic
            "time",
            "abbr",
            "details",
            "summary",
        }
    )

    allowed_attrs = {
        "a": ["href", "rel", "target"],
        "img": ["src", "alt", "width", "height", "loading", "decoding"],
        "source": ["srcset", "type", "media"],
        "th": ["colspan", "rowspan", "scope", "align"],
        "td": ["colspan", "rowspan", "align"],
        "col": ["span"],
        "input": ["type", "checked", "disabled"],
        "time": ["datetime"],
        "blockquote": ["cite"],
        "ol": ["start", "type", "reversed"],
        "li": ["value"],
        "details": ["open"],
    }

    allowed_protocols = ["http", "https", "mailto", "tel"]

    return allowed_tags, allowed_attrs, allowed_protocols


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    """Attribute filter: global attributes, data/aria attributes, per-tag allowlist."""
    if name in GLOBAL_ATTRIBUTES:
        return True
    if name.startswith(GLOBAL_ATTRIBUTE_PREFIXES):
        return True
    _, allowed_attrs, _ = _get_bleach_config()
    return name in allowed_attrs.get(tag, ())


def sanitize_html(html, context):
    """
    Sanitize HTML output using bleach.
    This is the FIRST post-processor and should run before any other HTML modifications.

    Author content is untrusted: script/style elements, event handler
    attributes and non-allowlisted URL schemes (``javascript:``, ``data:``)
    are removed. Sanitization only ever removes content, so there is no
    failure path that could hand back unsanitized HTML.
    """
    allowed_tags, _, allowed_protocols = _get_bleach_config()

    # bleach.Cleaner is not thread-safe, so a fresh one per call via bleach.clean
    sanitized = bleach.clean(
        html,
        tags=allowed_tags,
        attributes=_allow_attribute,
        protocols=allowed_protocols,
        strip=True,  # Drop disallowed tags instead of escaping them
        strip_comments=True,
    )
    logger.debug(f"Sanitized HTML: {len(html)} -> {len(sanitized)} chars")
    return sanitized
