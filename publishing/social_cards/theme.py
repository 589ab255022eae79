"""
Colors for social cards, resolved once from the site theme configuration.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from PIL import ImageColor

REQUIRED_COLORS = ("background", "foreground", "accent")

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class SocialCardTheme:
    name: str
    background: RGB
    foreground: RGB
    accent: RGB

    @classmethod
    def from_colors(cls, name: str, colors: dict) -> "SocialCardTheme":
        missing = [key for key in REQUIRED_COLORS if not (colors or {}).get(key)]
        if missing:
            raise ImproperlyConfigured(
                f"Theme '{name}' does not have required colors: {', '.join(missing)}"
            )

        resolved = {}
        for key in REQUIRED_COLORS:
            try:
                resolved[key] = ImageColor.getrgb(colors[key])[:3]
            except ValueError as exc:
                raise ImproperlyConfigured(
                    f"Theme '{name}' has an invalid {key} color: {colors[key]!r}"
                ) from exc

        return cls(name=name, **resolved)

    @classmethod
    def from_settings(cls) -> "SocialCardTheme":
        """
        Resolve ``settings.SITE_THEME`` against ``settings.SITE_THEMES``.

        ``"auto"`` (the default) picks the first configured theme, mirroring
        how the site falls back when the reader has no preference.
        """
        themes = getattr(settings, "SITE_THEMES", None) or {}
        name = getattr(settings, "SITE_THEME", "auto")

        if not themes:
            raise ImproperlyConfigured("SITE_THEMES must define at least one theme")
        if name == "auto":
            name = next(iter(themes))
        if name not in themes:
            raise ImproperlyConfigured(f"SITE_THEME '{name}' is not in SITE_THEMES")

        return cls.from_colors(name, themes[name])

    def mix(self, color: RGB, strength: float) -> RGB:
        """Blend ``color`` over the background at ``strength`` (0..1)."""
        return tuple(
            round(base + (value - base) * strength)
            for base, value in zip(self.background, color)
        )
