"""
Preprocessor that normalizes container directive fences for Pandoc.

Authors write character dialogue with the remark-directive form:

    :::owl{align="left"}
    Hoot! Remember to sanitize.
    :::

Pandoc's fenced divs only understand a bare class word or a brace attribute
block, so the opening fence above is rewritten to:

    ::: {.owl align="left"}

Bare names (``:::owl``) get the same treatment. Fences already in brace
form (``::: {.owl}``) and closing fences are left alone. Lines inside fenced
code blocks are never touched.

A directive may open right below a paragraph line. Pandoc only starts a div
at a block boundary, so a blank line is put in front of such a fence.
"""

import re

_CODE_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_DIRECTIVE_OPEN_RE = re.compile(
    r"^(?P<indent>\s{0,3})(?P<colons>:{3,})\s*"
    r"(?P<name>[A-Za-z][\w-]*)"
    r"(?:\[(?P<label>[^\]]*)\])?"
    r"(?:\{(?P<attrs>[^}]*)\})?\s*$"
)


def _normalize_fence(match: re.Match) -> str:
    parts = [f".{match.group('name')}"]
    label = match.group("label")
    if label:
        escaped = label.replace("\\", "\\\\").replace('"', '\\"')
        parts.append(f'label="{escaped}"')
    attrs = (match.group("attrs") or "").strip()
    if attrs:
        parts.append(attrs)
    return f"{match.group('indent')}{match.group('colons')} {{{' '.join(parts)}}}"


def normalize_directive_fences(text: str, context: dict) -> str:
    """
    Rewrite ``:::name{attrs}`` opening fences into Pandoc attribute syntax.

    Args:
        text: Raw markdown
        context: Render context (unused)

    Returns:
        Markdown with normalized directive fences
    """
    output = []
    fence = None

    for line in text.split("\n"):
        code_match = _CODE_FENCE_RE.match(line)
        if code_match:
            marker = code_match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            output.append(line)
            continue

        directive_match = None if fence is not None else _DIRECTIVE_OPEN_RE.match(line)
        if directive_match is None:
            output.append(line)
            continue

        if output and output[-1].strip():
            output.append("")
        output.append(_normalize_fence(directive_match))

    return "\n".join(output)
