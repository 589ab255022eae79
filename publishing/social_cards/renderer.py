"""
Social card renderer: title/author/date to a 1200x630 PNG.

    renderer = get_social_card_renderer()
    png = renderer.render(SocialCardSpec(title="My Post", author="karen", pub_date="2026-01-15"))

Theme colors, font data and avatar bytes are resolved once into an immutable
``SocialCardRenderer``; each ``render`` call builds its own markup tree,
layout and canvas, so concurrent renders share nothing mutable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO
from pathlib import Path

from django.conf import settings
from PIL import Image, ImageOps, UnidentifiedImageError

from .exceptions import SocialCardError
from .fonts import FontSource
from .layout import Box, LayoutEngine, Picture, Text
from .scene import Scene, rasterize
from .theme import SocialCardTheme

logger = logging.getLogger(__name__)

CARD_WIDTH = 1200
CARD_HEIGHT = 630


@dataclass(frozen=True)
class SocialCardSpec:
    title: str
    author: str
    pub_date: str | None = None


class SocialCardRenderer:
    def __init__(
        self,
        theme: SocialCardTheme,
        fonts: FontSource | None = None,
        avatar: bytes | None = None,
    ):
        self.theme = theme
        self.fonts = fonts or FontSource()
        self.avatar = avatar

    def _decode_avatar(self) -> Image.Image | None:
        if not self.avatar:
            return None
        try:
            with Image.open(BytesIO(self.avatar)) as img:
                img.load()
                square = ImageOps.fit(img.convert("RGB"), (400, 400), Image.Resampling.LANCZOS)
        except (UnidentifiedImageError, OSError) as exc:
            raise SocialCardError("Avatar image could not be decoded") from exc
        return square

    def markup(self, spec: SocialCardSpec, avatar: Image.Image | None = None) -> Box:
        """
        Build the card tree for ``spec``.

        The date line needs a ``pub_date``. The author line is left out when
        ``author`` is empty or equals the title (the site card).
        """
        theme = self.theme
        muted_accent = theme.mix(theme.accent, 0.3)

        text_children = []
        if spec.pub_date:
            text_children.append(Text(spec.pub_date, size=30, color=theme.accent, role="date"))
        text_children.append(
            Text(
                spec.title,
                size=60,
                color=theme.foreground,
                role="title",
                margin_y=40,
                line_height=1.375,
                max_lines=3,
            )
        )
        if spec.author and spec.author != spec.title:
            text_children.append(Text(spec.author, size=36, color=theme.accent, role="author"))

        frame_children = []
        if avatar is not None:
            frame_children.append(
                Box(
                    basis=1 / 3,
                    children=[Picture(avatar, ring=muted_accent, ring_width=4)],
                )
            )
        frame_children.append(Box(children=text_children))

        frame = Box(
            direction="row",
            padding=32,
            border_color=muted_accent,
            border_width=12,
            radius=80,
            children=frame_children,
        )
        return Box(padding=48, background=theme.background, children=[frame])

    def layout(self, spec: SocialCardSpec) -> Scene:
        engine = LayoutEngine(self.fonts.load)
        root = self.markup(spec, self._decode_avatar())
        return engine.layout(root, CARD_WIDTH, CARD_HEIGHT, self.theme.background)

    def render_svg(self, spec: SocialCardSpec) -> str:
        return self.layout(spec).to_svg()

    def render(self, spec: SocialCardSpec) -> bytes:
        scene = self.layout(spec)
        png = rasterize(scene, self.fonts.load)
        logger.debug(f"Rendered social card for '{spec.title}' ({len(png)} bytes)")
        return png


def _read_avatar(path) -> bytes | None:
    if not path:
        return None
    avatar_path = Path(path)
    if not avatar_path.is_file():
        logger.warning(f"Social card avatar not found at {avatar_path}, rendering without it")
        return None
    return avatar_path.read_bytes()


@lru_cache(maxsize=1)
def get_social_card_renderer() -> SocialCardRenderer:
    """
    Process-wide renderer built from settings on first use.

    Called from ``PublishingConfig.ready`` so configuration errors (missing
    theme colors, unreadable font file) stop the process at startup.
    """
    theme = SocialCardTheme.from_settings()
    fonts = FontSource.from_settings()
    avatar = _read_avatar(getattr(settings, "SOCIAL_CARD_AVATAR_PATH", None))
    logger.info(
        f"Social cards use theme '{theme.name}', font '{fonts.label}', "
        f"avatar {'on' if avatar else 'off'}"
    )
    return SocialCardRenderer(theme, fonts, avatar)


def render_social_card(spec: SocialCardSpec) -> bytes:
    return get_social_card_renderer().render(spec)
