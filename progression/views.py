"""
PROGRESSION App Views - Read API

GET /api/progression/me/          grade, level benefits and badge tier
GET /api/progression/me/badges/   catalog grouped by category with ownership
GET /api/progression/badges/      catalog, filterable by ?category= and ?tier=
"""

from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .catalog import CATALOG
from .serializers import BadgeCatalogFilterSerializer
from .services import ProgressionFacade


class IsGiller(permissions.BasePermission):
    """Allow only authenticated gillers."""

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.is_giller
        )


class MyProgressionView(APIView):
    """
    Progression snapshot of the current giller.

    GET /api/progression/me/
    """
    permission_classes = [IsGiller]

    def get(self, request):
        snapshot = ProgressionFacade.benefits_for(request.user.pk)
        return Response(snapshot.as_dict())


class MyBadgesView(APIView):
    """
    Badge board of the current giller.

    GET /api/progression/me/badges/
    """
    permission_classes = [IsGiller]

    def get(self, request):
        return Response(ProgressionFacade.badge_board(request.user.pk))


class BadgeCatalogView(APIView):
    """
    Badge catalog.

    GET /api/progression/badges/?category=quality&tier=gold
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        filters = BadgeCatalogFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        badges = CATALOG.all()
        category = filters.validated_data.get('category')
        tier = filters.validated_data.get('tier')
        if category:
            badges = [badge for badge in badges if badge.category == category]
        if tier:
            badges = [badge for badge in badges if badge.tier == tier]

        return Response({
            'count': len(badges),
            'results': [badge.as_dict() for badge in badges],
        })
