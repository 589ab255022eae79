# publishing/markdown/preprocessors/__init__.py

from .directive_fences import normalize_directive_fences

PREPROCESSORS = [
    normalize_directive_fences,  # :::name{attrs} -> ::: {.name attrs}
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text
