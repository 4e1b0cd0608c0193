"""Access to the ``BACKGAMMON`` settings dictionary with defaults."""
from typing import Any

from django.conf import settings

DEFAULTS = {
    'GAME_KEY_PREFIX': 'bg-game:',
    'CAS_MAX_ATTEMPTS': 5,
    'CAS_RETRY_DELAY': 0.05,
    'BOT_POLL_INTERVAL': 1.2,
    'BOT_TURN_DELAY': 0.09,
    'DEFAULT_SKILL': 0.8,
    'DEFAULT_PERSONALITY': 'balanced',
}


def get_setting(name: str) -> Any:
    """
    Return a game engine setting.

    Looks the name up in ``settings.BACKGAMMON`` first and falls back to
    the module defaults.

    Raises:
        KeyError: If the name is not a known setting.
    """
    overrides = getattr(settings, 'BACKGAMMON', {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
