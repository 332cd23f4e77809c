"""
DRF Serializers for the Location model.
"""
from rest_framework import serializers
from .models import Location


class LocationSerializer(serializers.ModelSerializer):
    """Serializer for Location model; the keyword cache is derived and read-only"""

    class Meta:
        model = Location
        fields = [
            'id',
            'name',
            'place',
            'description',
            'keywords',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'keywords', 'created_at', 'updated_at']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Location name must not be blank")
        return value.strip()


class LocationListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views"""

    class Meta:
        model = Location
        fields = [
            'id',
            'name',
            'place',
        ]
