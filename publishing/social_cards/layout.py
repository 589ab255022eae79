"""
Markup tree and flex-style layout for social cards.

The tree is small on purpose: boxes stack their children in a row or a
column, text wraps to the width it is given, pictures are circular avatars.
Main-axis content is centered; children are centered on the cross axis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from PIL import Image, ImageFont

from .scene import RGB, ImageOp, RectOp, Scene, TextOp

FontLoader = Callable[[int], ImageFont.FreeTypeFont]

ELLIPSIS = "..."


@dataclass
class Text:
    content: str
    size: int
    color: RGB
    role: str = ""
    margin_y: int = 0
    line_height: float = 1.25
    max_lines: int = 4


@dataclass
class Picture:
    image: Image.Image
    ring: RGB | None = None
    ring_width: int = 0
    max_size: int = 400


@dataclass
class Box:
    children: list = field(default_factory=list)
    direction: str = "column"
    padding: int = 0
    gap: int = 0
    background: RGB | None = None
    border_color: RGB | None = None
    border_width: int = 0
    radius: int = 0
    basis: float | None = None  # fraction of the parent's main axis
    fill_height: bool = False


def wrap_text(text: str, font: ImageFont.FreeTypeFont, max_width: float) -> list[str]:
    """Greedy word wrap; words wider than the line (or unspaced CJK) break per character."""
    lines: list[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if font.getlength(candidate) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        if font.getlength(word) <= max_width:
            current = word
            continue

        for char in word:
            if current and font.getlength(current + char) > max_width:
                lines.append(current)
                current = char
            else:
                current += char

    if current:
        lines.append(current)
    return lines


def _clamp_lines(lines: list[str], max_lines: int, font, max_width: float) -> list[str]:
    if len(lines) <= max_lines:
        return lines
    kept = lines[:max_lines]
    last = kept[-1]
    while last and font.getlength(last + ELLIPSIS) > max_width:
        last = last[:-1]
    kept[-1] = last.rstrip() + ELLIPSIS
    return kept


class LayoutEngine:
    def __init__(self, load_font: FontLoader):
        self.load_font = load_font
        self._fonts: dict[int, ImageFont.FreeTypeFont] = {}

    def font(self, size: int) -> ImageFont.FreeTypeFont:
        if size not in self._fonts:
            self._fonts[size] = self.load_font(size)
        return self._fonts[size]

    # --- measuring ---

    def text_lines(self, node: Text, width: float) -> list[str]:
        font = self.font(node.size)
        return _clamp_lines(wrap_text(node.content, font, width), node.max_lines, font, width)

    def measure(self, node, width: float) -> float:
        """Height ``node`` needs when laid out at ``width``."""
        if isinstance(node, Text):
            lines = self.text_lines(node, width)
            return len(lines) * round(node.size * node.line_height) + 2 * node.margin_y

        if isinstance(node, Picture):
            return min(width, node.max_size)

        inset = node.padding + node.border_width
        inner = width - 2 * inset
        if node.direction == "row":
            widths = self._row_widths(node, inner)
            content = max(
                (self.measure(child, w) for child, w in zip(node.children, widths)),
                default=0,
            )
        else:
            heights = [self.measure(child, inner) for child in node.children]
            content = sum(heights) + node.gap * max(len(heights) - 1, 0)
        return content + 2 * inset

    def _row_widths(self, node: Box, inner: float) -> list[float]:
        fixed = [
            inner * child.basis if isinstance(child, Box) and child.basis else None
            for child in node.children
        ]
        gaps = node.gap * max(len(node.children) - 1, 0)
        flexible = [w for w in fixed if w is None]
        remaining = inner - gaps - sum(w for w in fixed if w is not None)
        share = remaining / len(flexible) if flexible else 0
        return [w if w is not None else share for w in fixed]

    # --- placing ---

    def layout(self, root: Box, width: int, height: int, background: RGB) -> Scene:
        scene = Scene(width=width, height=height, background=background)
        self.place(root, 0, 0, width, height, scene)
        return scene

    def place(self, node, x: float, y: float, width: float, height: float, scene: Scene):
        if isinstance(node, Text):
            self._place_text(node, x, y, width, height, scene)
        elif isinstance(node, Picture):
            size = int(min(width, height, node.max_size))
            scene.add(
                ImageOp(
                    x=round(x + (width - size) / 2),
                    y=round(y + (height - size) / 2),
                    size=size,
                    image=node.image.resize((size, size), Image.Resampling.LANCZOS),
                    ring=node.ring,
                    ring_width=node.ring_width,
                )
            )
        else:
            self._place_box(node, x, y, width, height, scene)

    def _place_box(self, node: Box, x, y, width, height, scene: Scene):
        if node.background or node.border_color:
            scene.add(
                RectOp(
                    x=round(x),
                    y=round(y),
                    width=round(width),
                    height=round(height),
                    radius=node.radius,
                    fill=node.background,
                    outline=node.border_color,
                    outline_width=node.border_width,
                )
            )

        inset = node.padding + node.border_width
        inner_x, inner_y = x + inset, y + inset
        inner_w, inner_h = width - 2 * inset, height - 2 * inset

        if node.direction == "row":
            cursor = inner_x
            for child, child_width in zip(node.children, self._row_widths(node, inner_w)):
                self.place(child, cursor, inner_y, child_width, inner_h, scene)
                cursor += child_width + node.gap
            return

        heights = [
            inner_h if isinstance(child, Box) and child.fill_height else self.measure(child, inner_w)
            for child in node.children
        ]
        total = sum(heights) + node.gap * max(len(heights) - 1, 0)
        cursor = inner_y + max(inner_h - total, 0) / 2
        for child, child_height in zip(node.children, heights):
            self.place(child, inner_x, cursor, inner_w, child_height, scene)
            cursor += child_height + node.gap

    def _place_text(self, node: Text, x, y, width, height, scene: Scene):
        font = self.font(node.size)
        ascent, _ = font.getmetrics()
        line_step = round(node.size * node.line_height)
        lines = self.text_lines(node, width)

        block = len(lines) * line_step
        cursor = y + node.margin_y + max(height - 2 * node.margin_y - block, 0) / 2
        for line in lines:
            line_x = x + (width - font.getlength(line)) / 2
            # Center the glyph box inside the line box
            line_y = cursor + (line_step - node.size) / 2
            scene.add(
                TextOp(
                    x=round(line_x),
                    y=round(line_y),
                    text=line,
                    size=node.size,
                    color=node.color,
                    ascent=ascent,
                    role=node.role,
                )
            )
            cursor += line_step
