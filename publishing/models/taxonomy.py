"""
Taxonomy models for organizing content.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from publishing.slugs import is_valid_slug

from .base import TimeStampedModel, UniqueSlugMixin


class Category(TimeStampedModel, UniqueSlugMixin):
    """An author's category. Names and slugs are unique per owner."""

    slug_source_field = "name"
    slug_fallback = "category"
    slug_scope_fields = ("owner_id",)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="categories"
    )
    name = models.CharField(max_length=64)
    slug = models.SlugField(
        max_length=80,
        blank=True,
        help_text="Auto-generated from name if blank.",
    )
    description = models.TextField(blank=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "name"], name="unique_category_name_per_owner"
            ),
            models.UniqueConstraint(
                fields=["owner", "slug"], name="unique_category_slug_per_owner"
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def clean(self):
        if self.slug and not is_valid_slug(self.slug):
            raise ValidationError({"slug": "Use lowercase letters, digits and single hyphens."})

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.sync_slug()
        super().save(*args, **kwargs)
