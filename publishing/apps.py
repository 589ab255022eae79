from django.apps import AppConfig


class PublishingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'publishing'

    def ready(self):
        """Build the social card renderer so bad theme or font settings fail at startup."""
        from publishing.social_cards import get_social_card_renderer

        get_social_card_renderer()
