"""
Models for the publishing app.

- base: Base models and mixins (TimeStampedModel, UniqueSlugMixin)
- taxonomy: Per-author categories
- article: Articles and their cached rendered content
"""

from .base import TimeStampedModel, UniqueSlugMixin
from .taxonomy import Category
from .article import Article, ArticleQuerySet

__all__ = [
    "TimeStampedModel",
    "UniqueSlugMixin",
    "Category",
    "Article",
    "ArticleQuerySet",
]
