"""
Development settings for Backgammon project.
"""
from .base import *

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# Database - SQLite for easy development, PostgreSQL for more realistic testing
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

# Uncomment to use PostgreSQL in development
# DATABASES = {
#     'default': {
#         'ENGINE': 'django.db.backends.postgresql',
#         'NAME': os.environ.get('DB_NAME', 'backgammon'),
#         'USER': os.environ.get('DB_USER', 'backgammon'),
#         'PASSWORD': os.environ.get('DB_PASSWORD', 'devpassword'),
#         'HOST': os.environ.get('DB_HOST', 'localhost'),
#         'PORT': os.environ.get('DB_PORT', '5432'),
#     }
# }

# Faster bots when playing locally
BACKGAMMON['BOT_POLL_INTERVAL'] = 0.5

LOGGING['loggers']['apps']['level'] = 'DEBUG'
