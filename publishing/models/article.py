from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Q
from django.urls import NoReverseMatch, reverse
from django.utils import timezone

from publishing.markdown.config import RENDERER_ID
from publishing.markdown.extensions.toc_extractor import build_toc_tree
from publishing.slugs import is_valid_slug
from publishing.social_cards import SocialCardSpec
from publishing.tasks import render_article_content

from .base import TimeStampedModel, UniqueSlugMixin


class ArticleQuerySet(models.QuerySet):
    def published(self):
        now = timezone.now()
        return self.filter(
            status=Article.Status.PUBLISHED,
            published_at__isnull=False,
            published_at__lte=now,
        )

    def drafts(self):
        return self.filter(status=Article.Status.DRAFT)

    def by_author(self, username: str):
        return self.filter(author__username=username)

    def stale_renders(self):
        """Articles whose cached HTML came from another renderer version."""
        return self.exclude(renderer=RENDERER_ID)


class Article(TimeStampedModel, UniqueSlugMixin):
    slug_source_field = "title"
    slug_fallback = "article"
    slug_scope_fields = ("author_id",)

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="articles"
    )
    category = models.ForeignKey(
        "publishing.Category",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="articles",
    )

    title = models.CharField(max_length=200)
    slug = models.SlugField(
        max_length=220,
        blank=True,
        help_text="Auto-generated from the title; regenerated when the title changes.",
    )
    summary = models.TextField(blank=True)

    content_markdown = models.TextField(blank=True)
    content_html_cached = models.TextField(blank=True, default="")
    table_of_contents = models.JSONField(default=list, blank=True)
    renderer = models.CharField(
        max_length=64,
        blank=True,
        help_text="Renderer version that produced the cached HTML.",
    )

    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.DRAFT, db_index=True
    )
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = ArticleQuerySet.as_manager()

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["status", "published_at"], name="article_status_published_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["author", "slug"], name="unique_article_slug_per_author"
            ),
            models.CheckConstraint(
                name="published_requires_published_at",
                condition=Q(status__in=["draft", "archived"]) | Q(published_at__isnull=False),
            ),
        ]

    def __str__(self) -> str:
        return self.title

    # ---------------------------
    # Lifecycle
    # ---------------------------

    def save(self, *args, **kwargs):
        stored = self._stored_values("title", "slug", "content_markdown")
        self.sync_slug(stored)

        if self.status == self.Status.PUBLISHED and self.published_at is None:
            self.published_at = timezone.now()

        # New articles and edited content are re-rendered after commit
        content_changed = stored is None or stored["content_markdown"] != self.content_markdown
        if content_changed and stored is not None:
            self.content_html_cached = ""
            self.table_of_contents = []
            self.renderer = ""

        super().save(*args, **kwargs)

        if content_changed:
            transaction.on_commit(lambda: render_article_content.delay(self.pk))

    def clean(self):
        if self.slug and not is_valid_slug(self.slug):
            raise ValidationError({"slug": "Use lowercase letters, digits and single hyphens."})

    def refresh_rendered_content(self, save: bool = True) -> None:
        """Render the markdown body and store the HTML, TOC and renderer id."""
        from publishing.markdown.renderer import render_markdown_with_toc

        rendered = render_markdown_with_toc(self.content_markdown or "")
        self.content_html_cached = rendered.html
        self.table_of_contents = rendered.toc
        self.renderer = rendered.renderer
        if save:
            # update() skips save(), so this does not schedule another render
            Article.objects.filter(pk=self.pk).update(
                content_html_cached=self.content_html_cached,
                table_of_contents=self.table_of_contents,
                renderer=self.renderer,
                updated_at=timezone.now(),
            )

    # ---------------------------
    # Helpers
    # ---------------------------

    @property
    def is_published(self) -> bool:
        return (
            self.status == self.Status.PUBLISHED
            and self.published_at is not None
            and self.published_at <= timezone.now()
        )

    @property
    def needs_render(self) -> bool:
        return self.renderer != RENDERER_ID

    @property
    def toc_tree(self):
        return build_toc_tree(self.table_of_contents or [])

    @property
    def author_name(self) -> str:
        return self.author.get_username() if self.author_id else settings.SITE_AUTHOR

    def social_card_spec(self) -> SocialCardSpec:
        pub_date = self.published_at.date().isoformat() if self.published_at else None
        return SocialCardSpec(title=self.title, author=self.author_name, pub_date=pub_date)

    def get_absolute_url(self) -> str:
        try:
            return reverse(
                "article-detail", kwargs={"author": self.author_name, "slug": self.slug}
            )
        except NoReverseMatch:
            return f"/{self.author_name}/{self.slug}/"

    def get_social_card_url(self) -> str:
        return reverse("social-card", kwargs={"author": self.author_name, "slug": self.slug})
