"""
Celery tasks for the publishing app.

Run a worker with:
    celery -A inkwell worker -l info
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=5,
    retry_kwargs={"max_retries": 3},
)
def render_article_content(self, article_id: int):
    """
    Render an Article's markdown and store the HTML and TOC.

    Scheduled after an Article is saved with new content. Rendering errors
    are retried and then surface as a failed task.
    """
    from .models import Article

    try:
        article = Article.objects.get(pk=article_id)
    except Article.DoesNotExist:
        return {"success": False, "error": f"Article {article_id} not found."}

    article.refresh_rendered_content()
    logger.info(
        f"Rendered article {article_id} ({len(article.table_of_contents)} headings, "
        f"renderer {article.renderer})"
    )
    return {
        "success": True,
        "article_id": article_id,
        "renderer": article.renderer,
    }


@shared_task
def rerender_stale_articles() -> int:
    """
    Queue a render for every article whose cached HTML came from an older
    renderer version.

        python manage.py shell -c "from publishing.tasks import rerender_stale_articles; rerender_stale_articles.delay()"
    """
    from .models import Article

    article_ids = list(Article.objects.stale_renders().values_list("pk", flat=True))
    for article_id in article_ids:
        render_article_content.delay(article_id)
    logger.info(f"Queued {len(article_ids)} stale articles for rendering")
    return len(article_ids)
