"""
Social card (Open Graph preview image) rendering.

- theme: site colors resolved once from settings
- fonts: explicitly shipped font data
- layout: markup tree and flex-style layout
- scene: vector primitives, SVG serialization and Pillow rasterization
- renderer: SocialCardRenderer and the process-wide instance
"""

from .exceptions import SocialCardError
from .fonts import FontSource
from .renderer import (
    CARD_HEIGHT,
    CARD_WIDTH,
    SocialCardRenderer,
    SocialCardSpec,
    get_social_card_renderer,
    render_social_card,
)
from .theme import SocialCardTheme

__all__ = [
    "CARD_HEIGHT",
    "CARD_WIDTH",
    "FontSource",
    "SocialCardError",
    "SocialCardRenderer",
    "SocialCardSpec",
    "SocialCardTheme",
    "get_social_card_renderer",
    "render_social_card",
]
