"""
Social card endpoint tests
"""

from io import BytesIO

import pytest
from django.urls import reverse
from PIL import Image

from publishing.models import Article
from publishing.social_cards import SocialCardError

pytestmark = pytest.mark.django_db


@pytest.fixture
def published(author):
    return Article.objects.create(
        author=author,
        title="My Post",
        content_markdown="# Hello",
        status=Article.Status.PUBLISHED,
    )


class TestSocialCardView:
    def test_png_response(self, client, published):
        response = client.get(f"/social-cards/karen/{published.slug}.png")
        assert response.status_code == 200
        assert response["Content-Type"] == "image/png"
        cache_control = response["Cache-Control"]
        assert "public" in cache_control
        assert "max-age=3600" in cache_control
        assert "stale-while-revalidate=86400" in cache_control
        with Image.open(BytesIO(response.content)) as image:
            assert image.size == (1200, 630)

    def test_reverse(self, published):
        assert published.get_social_card_url() == "/social-cards/karen/my-post.png"

    def test_missing_article(self, client, author):
        response = client.get("/social-cards/karen/nope.png")
        assert response.status_code == 404
        assert response.get("Content-Type") != "image/png"

    def test_draft_is_not_served(self, client, author):
        Article.objects.create(author=author, title="Draft")
        assert client.get("/social-cards/karen/draft.png").status_code == 404

    def test_wrong_author(self, client, published, other_author):
        assert client.get(f"/social-cards/lucas/{published.slug}.png").status_code == 404

    def test_render_failure(self, client, published, monkeypatch):
        def fail(spec):
            raise SocialCardError("boom")

        monkeypatch.setattr("publishing.views.render_social_card", fail)
        response = client.get(f"/social-cards/karen/{published.slug}.png")
        assert response.status_code == 500
        assert response["Content-Type"].startswith("text/plain")


class TestDefaultSocialCard:
    def test_default_card(self, client):
        response = client.get(reverse("social-card-default"))
        assert response.status_code == 200
        assert response["Content-Type"] == "image/png"


class TestArticleDetail:
    def test_renders_article(self, client, published):
        response = client.get(published.get_absolute_url())
        assert response.status_code == 200
        body = response.content.decode()
        assert '<h1 id="hello">Hello</h1>' in body
        assert "/social-cards/karen/my-post.png" in body
        assert '<a href="#hello">Hello</a>' in body

    def test_draft_hidden_from_visitors(self, client, author):
        draft = Article.objects.create(author=author, title="Draft", content_markdown="x")
        assert client.get(draft.get_absolute_url()).status_code == 404
