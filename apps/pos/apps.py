"""
POS app configuration.
"""

from django.apps import AppConfig


class PosConfig(AppConfig):
    """Configuration for the POS checkout app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.pos"
    verbose_name = "POS Checkout"
