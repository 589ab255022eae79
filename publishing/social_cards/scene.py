"""
Vector scene produced by the card layout, with SVG and PNG output.

The layout pass never draws. It emits positioned primitives into a
``Scene``; ``to_svg`` serializes them as vector markup and ``rasterize``
paints the same primitives with Pillow.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from io import BytesIO
from typing import Callable
from xml.sax.saxutils import escape, quoteattr

from PIL import Image, ImageDraw, ImageFont

from .exceptions import SocialCardError

RGB = tuple[int, int, int]


def _hex(color: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


@dataclass(frozen=True)
class RectOp:
    x: int
    y: int
    width: int
    height: int
    radius: int = 0
    fill: RGB | None = None
    outline: RGB | None = None
    outline_width: int = 0


@dataclass(frozen=True)
class TextOp:
    x: int
    y: int
    text: str
    size: int
    color: RGB
    ascent: int
    role: str = ""


@dataclass(frozen=True)
class ImageOp:
    x: int
    y: int
    size: int
    image: Image.Image = field(compare=False, repr=False)
    ring: RGB | None = None
    ring_width: int = 0


@dataclass
class Scene:
    width: int
    height: int
    background: RGB
    ops: list = field(default_factory=list)

    def add(self, op) -> None:
        self.ops.append(op)

    def text_ops(self, role: str | None = None) -> list[TextOp]:
        return [
            op
            for op in self.ops
            if isinstance(op, TextOp) and (role is None or op.role == role)
        ]

    def image_ops(self) -> list[ImageOp]:
        return [op for op in self.ops if isinstance(op, ImageOp)]

    def to_svg(self, font_family: str = "sans-serif") -> str:
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width}" '
            f'height="{self.height}" viewBox="0 0 {self.width} {self.height}">',
            f'<rect width="{self.width}" height="{self.height}" fill="{_hex(self.background)}"/>',
        ]

        for op in self.ops:
            if isinstance(op, RectOp):
                fill = _hex(op.fill) if op.fill else "none"
                stroke = (
                    f' stroke="{_hex(op.outline)}" stroke-width="{op.outline_width}"'
                    if op.outline
                    else ""
                )
                # SVG strokes are centered on the path, Pillow draws them inside
                inset = op.outline_width / 2 if op.outline else 0
                parts.append(
                    f'<rect x="{op.x + inset}" y="{op.y + inset}" '
                    f'width="{op.width - 2 * inset}" height="{op.height - 2 * inset}" '
                    f'rx="{op.radius}" fill="{fill}"{stroke}/>'
                )
            elif isinstance(op, TextOp):
                parts.append(
                    f'<text x="{op.x}" y="{op.y + op.ascent}" font-size="{op.size}" '
                    f"font-family={quoteattr(font_family)} "
                    f'fill="{_hex(op.color)}">{escape(op.text)}</text>'
                )
            elif isinstance(op, ImageOp):
                buffer = BytesIO()
                op.image.save(buffer, format="PNG")
                encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
                radius = op.size / 2
                clip_id = f"clip-{op.x}-{op.y}"
                parts.append(
                    f'<clipPath id="{clip_id}"><circle cx="{op.x + radius}" '
                    f'cy="{op.y + radius}" r="{radius}"/></clipPath>'
                    f'<image x="{op.x}" y="{op.y}" width="{op.size}" height="{op.size}" '
                    f'clip-path="url(#{clip_id})" href="data:image/png;base64,{encoded}"/>'
                )
                if op.ring:
                    parts.append(
                        f'<circle cx="{op.x + radius}" cy="{op.y + radius}" '
                        f'r="{radius - op.ring_width / 2}" fill="none" '
                        f'stroke="{_hex(op.ring)}" stroke-width="{op.ring_width}"/>'
                    )

        parts.append("</svg>")
        return "".join(parts)


def rasterize(scene: Scene, load_font: Callable[[int], ImageFont.FreeTypeFont]) -> bytes:
    """Paint ``scene`` and return PNG bytes."""
    canvas = Image.new("RGB", (scene.width, scene.height), scene.background)
    draw = ImageDraw.Draw(canvas)
    fonts: dict[int, ImageFont.FreeTypeFont] = {}

    for op in scene.ops:
        if isinstance(op, RectOp):
            draw.rounded_rectangle(
                (op.x, op.y, op.x + op.width - 1, op.y + op.height - 1),
                radius=op.radius,
                fill=op.fill,
                outline=op.outline,
                width=op.outline_width,
            )
        elif isinstance(op, TextOp):
            if op.size not in fonts:
                fonts[op.size] = load_font(op.size)
            draw.text((op.x, op.y), op.text, font=fonts[op.size], fill=op.color)
        elif isinstance(op, ImageOp):
            mask = Image.new("L", (op.size, op.size), 0)
            ImageDraw.Draw(mask).ellipse((0, 0, op.size - 1, op.size - 1), fill=255)
            canvas.paste(op.image, (op.x, op.y), mask)
            if op.ring:
                draw.ellipse(
                    (op.x, op.y, op.x + op.size - 1, op.y + op.size - 1),
                    outline=op.ring,
                    width=op.ring_width,
                )

    output = BytesIO()
    try:
        canvas.save(output, format="PNG")
    except (OSError, ValueError) as exc:
        raise SocialCardError("PNG encoding failed") from exc
    return output.getvalue()
