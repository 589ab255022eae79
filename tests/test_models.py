"""
Persistence seam tests

Slug derivation and uniqueness on save, render scheduling, stored TOC.
"""

import re
from unittest import mock

import pytest

from publishing.markdown.config import RENDERER_ID
from publishing.models import Article, Category
from publishing.slugs import is_valid_slug

pytestmark = pytest.mark.django_db


class TestArticleSlugs:
    def test_slug_from_title(self, author):
        article = Article.objects.create(author=author, title="Hello World")
        assert article.slug == "hello-world"

    def test_duplicate_title_gets_suffix(self, author):
        first = Article.objects.create(author=author, title="Test")
        second = Article.objects.create(author=author, title="Test")
        assert first.slug == "test"
        assert re.match(r"^test-[0-9a-z]+$", second.slug)
        assert second.slug != first.slug

    def test_same_slug_for_different_authors(self, author, other_author):
        first = Article.objects.create(author=author, title="Test")
        second = Article.objects.create(author=other_author, title="Test")
        assert first.slug == second.slug == "test"

    def test_resave_keeps_slug(self, author):
        article = Article.objects.create(author=author, title="Test")
        article.summary = "changed"
        article.save()
        article.refresh_from_db()
        assert article.slug == "test"

    def test_title_edit_regenerates_slug(self, author):
        article = Article.objects.create(author=author, title="Old Title")
        article.title = "New Title"
        article.save()
        assert article.slug == "new-title"

    def test_manual_slug_kept_on_title_edit(self, author):
        article = Article.objects.create(author=author, title="Title")
        article.title = "Another Title"
        article.slug = "hand-picked"
        article.save()
        assert article.slug == "hand-picked"

    def test_pinyin_title(self, author):
        article = Article.objects.create(author=author, title="测试文章")
        assert article.slug == "ceshiwenzhang"

    def test_unsluggable_title_falls_back(self, author):
        article = Article.objects.create(author=author, title="标题")
        assert article.slug == "article"

    def test_long_pinyin_title_fits_column(self, author):
        article = Article.objects.create(author=author, title="章" * 45)
        max_length = Article._meta.get_field("slug").max_length
        assert len(article.slug) <= max_length
        assert is_valid_slug(article.slug)
        assert article.slug.startswith("zhangzhang")

    def test_long_colliding_pinyin_title_fits_column(self, author):
        title = "文章" * 30
        first = Article.objects.create(author=author, title=title)
        second = Article.objects.create(author=author, title=title)
        max_length = Article._meta.get_field("slug").max_length
        assert len(first.slug) <= max_length
        assert len(second.slug) <= max_length
        assert first.slug != second.slug
        assert is_valid_slug(second.slug)


class TestCategorySlugs:
    def test_category_slug(self, author):
        category = Category.objects.create(owner=author, name="  Python Tips ")
        assert category.name == "Python Tips"
        assert category.slug == "python-tips"

    def test_long_pinyin_name_fits_column(self, author):
        first = Category.objects.create(owner=author, name="测试" * 20)
        second = Category.objects.create(owner=author, name="测试" * 20 + "!")
        assert len(first.slug) <= 80
        assert len(second.slug) <= 80
        assert first.slug != second.slug

    def test_unique_per_owner(self, author, other_author):
        Category.objects.create(owner=author, name="Misc")
        mine = Category.objects.create(owner=author, name="misc!")
        theirs = Category.objects.create(owner=other_author, name="Misc")
        assert mine.slug.startswith("misc-")
        assert theirs.slug == "misc"


class TestRendering:
    def test_render_scheduled_on_commit(self, author, django_capture_on_commit_callbacks):
        with mock.patch("publishing.models.article.render_article_content") as task:
            with django_capture_on_commit_callbacks(execute=True):
                article = Article.objects.create(author=author, title="T", content_markdown="# Hi")
        task.delay.assert_called_once_with(article.pk)

    def test_unchanged_content_not_rescheduled(self, author, django_capture_on_commit_callbacks):
        article = Article.objects.create(author=author, title="T", content_markdown="# Hi")
        with mock.patch("publishing.models.article.render_article_content") as task:
            with django_capture_on_commit_callbacks(execute=True):
                article.summary = "new summary"
                article.save()
        task.delay.assert_not_called()

    def test_refresh_rendered_content(self, author, settings):
        settings.BLOG_CHARACTERS = {"owl": "/owl.webp"}
        article = Article.objects.create(
            author=author, title="T", content_markdown="# Intro\n\n:::owl\nHoot\n:::"
        )
        article.refresh_rendered_content()
        article.refresh_from_db()

        assert article.renderer == RENDERER_ID
        assert not article.needs_render
        assert '<h1 id="intro">Intro</h1>' in article.content_html_cached
        assert 'data-character="owl"' in article.content_html_cached
        assert article.table_of_contents == [{"id": "intro", "text": "Intro", "level": 1}]
        assert article.toc_tree[0]["children"] == []

    def test_content_edit_clears_cache(self, author):
        article = Article.objects.create(author=author, title="T", content_markdown="# A")
        article.refresh_rendered_content()
        article.refresh_from_db()
        article.content_markdown = "# B"
        article.save()
        article.refresh_from_db()
        assert article.content_html_cached == ""
        assert article.table_of_contents == []
        assert article.needs_render

    def test_task_missing_article(self):
        from publishing.tasks import render_article_content

        result = render_article_content.run(987654)
        assert result == {"success": False, "error": "Article 987654 not found."}

    def test_task_renders(self, author):
        from publishing.tasks import render_article_content

        article = Article.objects.create(author=author, title="T", content_markdown="## Two")
        result = render_article_content.run(article.pk)
        article.refresh_from_db()
        assert result["success"] is True
        assert article.table_of_contents == [{"id": "two", "text": "Two", "level": 2}]


class TestPublishedQuerySet:
    def test_published(self, author):
        draft = Article.objects.create(author=author, title="Draft")
        live = Article.objects.create(author=author, title="Live", status=Article.Status.PUBLISHED)
        assert live.published_at is not None
        assert list(Article.objects.published()) == [live]
        assert draft not in Article.objects.published()
