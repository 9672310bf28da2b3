"""Django app configuration for products."""

from django.apps import AppConfig


class ProductsConfig(AppConfig):
    """Configure default auto field and app name."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "products"
