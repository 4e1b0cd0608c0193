"""AI app configuration."""
from django.apps import AppConfig


class AiConfig(AppConfig):
    """Heuristic players, polling bots and offline matches."""

    name = 'apps.ai'
    verbose_name = 'AI opponents'
