# publishing/templatetags/markdown_tags.py

from django import template
from django.utils.safestring import mark_safe

from publishing.markdown.extensions.toc_extractor import build_toc_tree
from publishing.markdown.renderer import render_markdown

register = template.Library()


@register.filter(name="markdown")
def markdown_filter(value):
    return mark_safe(render_markdown(value or ""))


@register.filter(name="toc_tree")
def toc_tree_filter(value):
    """Nest a flat table of contents (list of {id, text, level}) for templates."""
    return build_toc_tree(value or [])

