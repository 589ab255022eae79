import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", models.CharField(max_length=64)),
                ("slug", models.SlugField(blank=True, help_text="Auto-generated from name if blank.", max_length=80)),
                ("description", models.TextField(blank=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="categories",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "categories",
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(fields=("owner", "name"), name="unique_category_name_per_owner"),
                    models.UniqueConstraint(fields=("owner", "slug"), name="unique_category_slug_per_owner"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Article",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("title", models.CharField(max_length=200)),
                (
                    "slug",
                    models.SlugField(
                        blank=True,
                        help_text="Auto-generated from the title; regenerated when the title changes.",
                        max_length=220,
                    ),
                ),
                ("summary", models.TextField(blank=True)),
                ("content_markdown", models.TextField(blank=True)),
                ("content_html_cached", models.TextField(blank=True, default="")),
                ("table_of_contents", models.JSONField(blank=True, default=list)),
                (
                    "renderer",
                    models.CharField(
                        blank=True,
                        help_text="Renderer version that produced the cached HTML.",
                        max_length=64,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("published", "Published"), ("archived", "Archived")],
                        db_index=True,
                        default="draft",
                        max_length=16,
                    ),
                ),
                ("published_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                (
                    "author",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="articles",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="articles",
                        to="publishing.category",
                    ),
                ),
            ],
            options={
                "ordering": ["-published_at", "-created_at"],
                "indexes": [
                    models.Index(fields=["status", "published_at"], name="article_status_published_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("author", "slug"), name="unique_article_slug_per_author"),
                    models.CheckConstraint(
                        condition=models.Q(("status__in", ["draft", "archived"]), ("published_at__isnull", False), _connector="OR"),
                        name="published_requires_published_at",
                    ),
                ],
            },
        ),
    ]
