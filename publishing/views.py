import logging

from django.conf import settings
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.utils.cache import patch_cache_control
from django.views import View
from django.views.generic import DetailView

from .models import Article
from .social_cards import SocialCardError, SocialCardSpec, render_social_card

logger = logging.getLogger(__name__)

SOCIAL_CARD_MAX_AGE = 60 * 60
SOCIAL_CARD_STALE_WHILE_REVALIDATE = 60 * 60 * 24


def png_response(png: bytes) -> HttpResponse:
    response = HttpResponse(png, content_type="image/png")
    patch_cache_control(
        response,
        public=True,
        max_age=SOCIAL_CARD_MAX_AGE,
        stale_while_revalidate=SOCIAL_CARD_STALE_WHILE_REVALIDATE,
    )
    return response


class SocialCardView(View):
    """
    Open Graph image for a published article:
    ``/social-cards/<author>/<slug>.png``.
    """

    def get(self, request, author: str, slug: str):
        article = get_object_or_404(
            Article.objects.published().select_related("author"),
            author__username=author,
            slug=slug,
        )
        spec = article.social_card_spec()
        try:
            png = render_social_card(spec)
        except SocialCardError:
            logger.exception(f"Social card render failed for {author}/{slug}")
            return HttpResponse(
                "Failed to render social card", status=500, content_type="text/plain"
            )
        return png_response(png)


class DefaultSocialCardView(View):
    """Site-wide card used by pages that are not articles."""

    def get(self, request):
        spec = SocialCardSpec(title=settings.SITE_TITLE, author=settings.SITE_AUTHOR)
        try:
            png = render_social_card(spec)
        except SocialCardError:
            logger.exception("Default social card render failed")
            return HttpResponse(
                "Failed to render social card", status=500, content_type="text/plain"
            )
        return png_response(png)


class ArticleDetailView(DetailView):
    """
    Shows a single published article. Authors also see their own drafts.
    """

    model = Article
    template_name = "publishing/article_detail.html"
    context_object_name = "article"

    def get_queryset(self):
        qs = Article.objects.select_related("author", "category").filter(
            author__username=self.kwargs["author"]
        )
        user = self.request.user
        if user.is_authenticated and user.get_username() == self.kwargs["author"]:
            return qs
        return qs.published()

    def get_object(self, queryset=None):
        article = super().get_object(queryset=queryset)
        if article.needs_render:
            # Cached HTML is missing or from an older renderer
            article.refresh_rendered_content()
        return article

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["social_card_url"] = self.request.build_absolute_uri(
            self.object.get_social_card_url()
        )
        return context
