"""Game app configuration."""
from django.apps import AppConfig


class GameConfig(AppConfig):
    """Rules engine, game state store and turn driver."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.game'
    verbose_name = 'Backgammon games'
