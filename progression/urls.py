"""
PROGRESSION App URLs
"""

from django.urls import path

from .views import BadgeCatalogView, MyBadgesView, MyProgressionView

app_name = 'progression'

urlpatterns = [
    path('me/', MyProgressionView.as_view(), name='me'),
    path('me/badges/', MyBadgesView.as_view(), name='my-badges'),
    path('badges/', BadgeCatalogView.as_view(), name='badge-catalog'),
]
