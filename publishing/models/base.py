"""
Base models and mixins for the publishing app.
"""

from django.db import models

from publishing.slugs import create_slug, unique_slug


class TimeStampedModel(models.Model):
    """Abstract base model that adds created_at and updated_at timestamps."""

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True


class UniqueSlugMixin:
    """
    Mixin that derives a unique slug for a model.

    Expects the model to have a 'slug' field. Subclasses name the field the
    slug is derived from, the fallback used when that field slugifies to
    nothing, and the fields that scope uniqueness (e.g. per author).
    """

    slug_source_field = "title"
    slug_fallback = "item"
    slug_scope_fields: tuple = ()

    def _slug_scope(self) -> dict:
        return {field: getattr(self, field) for field in self.slug_scope_fields}

    def _unique_slug(self, base: str, **scope) -> str:
        """
        Return ``base`` or, if another record in scope holds it, ``base``
        with a time-derived suffix, cut to fit the slug column. The record
        itself never counts as a collision, so re-saving keeps its slug.
        """
        manager = self.__class__._default_manager
        scope = scope or self._slug_scope()

        def exists(candidate: str) -> bool:
            return manager.filter(slug=candidate, **scope).exclude(pk=self.pk).exists()

        max_length = self._meta.get_field("slug").max_length
        return unique_slug(base, exists, max_length=max_length)

    def _stored_values(self, *fields) -> dict | None:
        if self.pk is None:
            return None
        return self.__class__._default_manager.filter(pk=self.pk).values(*fields).first()

    def sync_slug(self, stored: dict | None = None) -> None:
        """
        Assign a slug when there is none, or re-derive it when the source
        field was edited and the slug was not changed by hand.
        """
        source = getattr(self, self.slug_source_field)
        if stored is None:
            stored = self._stored_values(self.slug_source_field, "slug")

        source_edited = (
            stored is not None
            and stored[self.slug_source_field] != source
            and stored["slug"] == self.slug
        )
        if self.slug and not source_edited:
            return

        self.slug = self._unique_slug(create_slug(source) or self.slug_fallback)
