class SocialCardError(RuntimeError):
    """A social card could not be rendered (font, avatar or encoding failure)."""
