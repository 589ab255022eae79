"""
Font data for social cards.

Cards never look fonts up on the host system. Either a TTF/OTF file is
configured and read once, or Pillow's bundled scalable default font is used.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from django.conf import settings
from PIL import ImageFont

from .exceptions import SocialCardError


@dataclass(frozen=True)
class FontSource:
    data: bytes | None = None
    label: str = "pillow-default"

    @classmethod
    def from_path(cls, path) -> "FontSource":
        font_path = Path(path)
        try:
            data = font_path.read_bytes()
        except OSError as exc:
            raise SocialCardError(f"Font file not readable: {font_path}") from exc
        if not data:
            raise SocialCardError(f"Font file is empty: {font_path}")
        return cls(data=data, label=font_path.name)

    @classmethod
    def from_settings(cls) -> "FontSource":
        path = getattr(settings, "SOCIAL_CARD_FONT_PATH", None)
        return cls.from_path(path) if path else cls()

    def load(self, size: int) -> ImageFont.FreeTypeFont:
        if self.data is not None:
            try:
                return ImageFont.truetype(BytesIO(self.data), size)
            except OSError as exc:
                raise SocialCardError(f"Font '{self.label}' could not be loaded") from exc

        font = ImageFont.load_default(size=size)
        if not isinstance(font, ImageFont.FreeTypeFont):
            # Bitmap fallback ignores size; Pillow was built without FreeType
            raise SocialCardError("Scalable default font unavailable (Pillow lacks FreeType)")
        return font
