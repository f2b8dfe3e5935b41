"""
URL configuration for PRM project.
"""

from django.urls import path, include
from django.conf import settings
from django.views.generic.base import RedirectView
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from presentation.api.v1.views.health import health

urlpatterns = [
    # Redirect root to docs
    path('', RedirectView.as_view(url='/api/docs/', permanent=False), name='index'),

    path('health/', health, name='health'),

    # API v1
    path('api/v1/', include('presentation.api.v1.urls')),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]

# Debug toolbar (development only)
if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [
        path('__debug__/', include(debug_toolbar.urls)),
    ] + urlpatterns
