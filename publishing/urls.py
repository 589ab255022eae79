from django.urls import path

from .views import ArticleDetailView, DefaultSocialCardView, SocialCardView

urlpatterns = [
    path(
        "social-cards/__default.png",
        DefaultSocialCardView.as_view(),
        name="social-card-default",
    ),
    path(
        "social-cards/<str:author>/<slug:slug>.png",
        SocialCardView.as_view(),
        name="social-card",
    ),
    path("<str:author>/<slug:slug>/", ArticleDetailView.as_view(), name="article-detail"),
]
