"""
Giller progression service - Main URL Configuration
"""

from django.contrib import admin
from django.urls import path, include
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


# ===========================================
# ADMIN SITE CUSTOMIZATION
# ===========================================
admin.site.site_header = "Giller Progression Console"
admin.site.site_title = "Giller Admin"
admin.site.index_title = "배지 및 등급 관리"


@api_view(['GET'])
def api_root(request):
    """API Root endpoint with available routes."""
    return Response({
        'name': 'Giller Progression API',
        'version': '1.0.0',
        'endpoints': {
            'auth': {
                'token': '/api/auth/token/',
                'refresh': '/api/auth/token/refresh/',
            },
            'progression': {
                'me': '/api/progression/me/',
                'my_badges': '/api/progression/me/badges/',
                'catalog': '/api/progression/badges/',
            },
        }
    })


urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # Health probes
    path('health/', include('core.urls')),

    # API Root
    path('api/', api_root, name='api-root'),

    # JWT Authentication
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Progression engine
    path('api/progression/', include('progression.urls')),
]
