from django.apps import AppConfig


class SluggedConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "slugged"
    verbose_name = "Slugs"
