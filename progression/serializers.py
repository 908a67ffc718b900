"""
PROGRESSION App Serializers
"""

from rest_framework import serializers

from .catalog import BadgeCategory
from .levels import BadgeTier


class BadgeCatalogFilterSerializer(serializers.Serializer):
    """Query parameters of the catalog endpoint."""

    category = serializers.ChoiceField(choices=BadgeCategory.choices, required=False)
    tier = serializers.ChoiceField(
        choices=[choice for choice in BadgeTier.choices if choice[0] != BadgeTier.NONE],
        required=False
    )
