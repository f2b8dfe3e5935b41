"""
Development settings for PRM project.
"""

from .base import *

# =============================================================================
# DEBUG
# =============================================================================
DEBUG = True

# =============================================================================
# ALLOWED HOSTS
# =============================================================================
ALLOWED_HOSTS = ['*']

# =============================================================================
# INSTALLED APPS - Development
# =============================================================================
INSTALLED_APPS = INSTALLED_APPS + [
    'debug_toolbar',
    'django_extensions',
]

# =============================================================================
# MIDDLEWARE - Development
# =============================================================================
MIDDLEWARE = ['debug_toolbar.middleware.DebugToolbarMiddleware'] + MIDDLEWARE

# =============================================================================
# DEBUG TOOLBAR
# =============================================================================
INTERNAL_IPS = ['127.0.0.1', 'localhost']

DEBUG_TOOLBAR_CONFIG = {
    'SHOW_TOOLBAR_CALLBACK': lambda request: DEBUG and not request.path.startswith('/api/'),
}

# =============================================================================
# CORS - Development (Allow all)
# =============================================================================
CORS_ALLOW_ALL_ORIGINS = True

# =============================================================================
# DATABASE - Development Override
# =============================================================================
DATABASES = {
    'default': {
        'ENGINE': config('DB_ENGINE', default='django.db.backends.postgresql'),
        'NAME': config('DB_NAME', default='prm'),
        'USER': config('DB_USER', default='postgres'),
        'PASSWORD': config('DB_PASSWORD', default='postgres'),
        'HOST': config('DB_HOST', default='127.0.0.1'),
        'PORT': config('DB_PORT', default='5432'),
    }
}

# =============================================================================
# LOGGING - Development
# =============================================================================
LOGGING['root']['level'] = 'DEBUG'
LOGGING['loggers']['prm']['level'] = 'DEBUG'

# =============================================================================
# CACHE - Development (no Redis required)
# =============================================================================
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'prm-dev-cache',
    }
}

# =============================================================================
# REST FRAMEWORK - Development Override (Disable Throttling)
# =============================================================================
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {}
