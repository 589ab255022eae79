# publishing/markdown/filters/__init__.py
"""
Python filters over Pandoc's JSON AST.

Each filter takes the parsed document and the render context and returns a
(possibly new) document. They run between parsing and HTML serialization.
"""

from .character_dialogue import CharacterDialogueFilter, transform


def character_dialogue(document: dict, context: dict) -> dict:
    return transform(document, context.get("characters") or {})


FILTERS = [
    character_dialogue,
]


def apply_filters(document, context):
    """Apply all AST filters in order"""
    for ast_filter in FILTERS:
        document = ast_filter(document, context)
    return document


__all__ = ["CharacterDialogueFilter", "FILTERS", "apply_filters", "transform"]
