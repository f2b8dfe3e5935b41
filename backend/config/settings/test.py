"""
Test settings for PRM project.

SQLite in-memory database, fast password hashing, no throttling.
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'prm-test-cache',
    }
}

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {}

LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['prm']['handlers'] = ['console']
LOGGING['loggers']['presentation']['handlers'] = ['console']
LOGGING['loggers']['infrastructure']['handlers'] = ['console']
