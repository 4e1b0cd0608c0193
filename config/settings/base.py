"""
Base settings for the Backgammon engine project.

Only the pieces the engine needs are configured: the ORM-backed game state
store, Django REST framework serializers and logging.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'insecure-development-key')

DEBUG = False

ALLOWED_HOSTS = []

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'apps.game',
    'apps.ai',
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'UTC'

# Game engine configuration
BACKGAMMON = {
    'GAME_KEY_PREFIX': 'bg-game:',
    'CAS_MAX_ATTEMPTS': 5,
    'CAS_RETRY_DELAY': 0.05,     # seconds between conflicting writes
    'BOT_POLL_INTERVAL': 1.2,    # seconds between bot polling passes
    'BOT_TURN_DELAY': 0.09,      # seconds between bot checker moves
    'DEFAULT_SKILL': 0.8,
    'DEFAULT_PERSONALITY': 'balanced',
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': os.environ.get('BACKGAMMON_LOG_LEVEL', 'INFO'),
        },
    },
}
