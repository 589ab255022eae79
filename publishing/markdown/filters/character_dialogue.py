# publishing/markdown/filters/character_dialogue.py
"""
Pandoc AST filter that turns character directives into dialogue asides.

Input markdown (after the directive fence preprocessor):

    ::: {.owl align="right"}
    Did you know headings get anchors?
    :::

Pandoc parses this into a ``Div`` whose first class is the character name.
When the name is one of the configured characters the ``Div`` is replaced by:

    <aside data-character="owl" class="character-dialogue align-right"
           aria-label="Character dialogue: owl">
      <img class="character-dialogue-image" src="..." alt="owl"
           loading="lazy" width="100">
      <div class="character-dialogue-content">
        <p>Did you know headings get anchors?</p>
      </div>
    </aside>

Divs for unknown names are kept as they are, but their children are still
visited because they may contain a known character.

The character map is operator configuration. Its URLs are trusted by
precondition; they are attribute-escaped here and the rendered HTML still
goes through the sanitizer.
"""

from __future__ import annotations

import logging
from html import escape
from typing import Any, Mapping

logger = logging.getLogger(__name__)

ALIGN_VALUES = {"left", "right"}
AVATAR_WIDTH = 100


def _raw_html(markup: str) -> dict:
    return {"t": "RawBlock", "c": ["html", markup]}


def _opening_markup(name: str, url: str, align: str | None) -> str:
    classes = "character-dialogue"
    if align in ALIGN_VALUES:
        classes += f" align-{align}"

    return (
        f'<aside data-character="{escape(name)}" class="{classes}" '
        f'aria-label="Character dialogue: {escape(name)}">'
        f'<img class="character-dialogue-image" src="{escape(url)}" '
        f'alt="{escape(name)}" loading="lazy" width="{AVATAR_WIDTH}">'
        '<div class="character-dialogue-content">'
    )


class CharacterDialogueFilter:
    """
    Visitor over Pandoc JSON block lists.

    ``visit_block`` returns the list of blocks that should stand in place of
    the given block, so replacements are spliced by the caller instead of
    mutating parent lists during traversal.
    """

    def __init__(self, characters: Mapping[str, str]):
        self.characters = {
            name: url for name, url in (characters or {}).items() if url
        }
        self.replaced = 0

    def apply(self, document: dict) -> dict:
        if not self.characters:
            return document

        transformed = dict(document)
        transformed["blocks"] = self.visit_blocks(document.get("blocks", []))
        if self.replaced:
            logger.debug(f"Rendered {self.replaced} character dialogue block(s)")
        return transformed

    def visit_blocks(self, blocks: list) -> list:
        result = []
        for block in blocks:
            result.extend(self.visit_block(block))
        return result

    def visit_block(self, block: Any) -> list:
        if isinstance(block, dict) and block.get("t") == "Div":
            (identifier, classes, attributes), children = block["c"]
            name = classes[0] if classes else None
            children = self.visit_blocks(children)

            if name in self.characters:
                self.replaced += 1
                align = dict(attributes).get("align")
                return [
                    _raw_html(_opening_markup(name, self.characters[name], align)),
                    *children,
                    _raw_html("</div></aside>"),
                ]

            return [{"t": "Div", "c": [[identifier, classes, attributes], children]}]

        return [self._visit_value(block)]

    def _visit_value(self, value: Any) -> Any:
        # Divs can sit in any nested block list (list items, quotes, notes).
        if isinstance(value, dict):
            if "c" not in value:
                return value
            return {**value, "c": self._visit_value(value["c"])}

        if isinstance(value, list):
            if value and all(_is_block(item) for item in value):
                return self.visit_blocks(value)
            return [self._visit_value(item) for item in value]

        return value


def _is_block(value: Any) -> bool:
    return isinstance(value, dict) and value.get("t") in _BLOCK_TYPES


_BLOCK_TYPES = {
    "Plain",
    "Para",
    "LineBlock",
    "CodeBlock",
    "RawBlock",
    "BlockQuote",
    "OrderedList",
    "BulletList",
    "DefinitionList",
    "Header",
    "HorizontalRule",
    "Table",
    "Figure",
    "Div",
}


def transform(document: dict, characters: Mapping[str, str]) -> dict:
    """Return a copy of ``document`` with character directives rendered."""
    return CharacterDialogueFilter(characters).apply(document)
