"""
Serializers for the recommendations module.
"""
from rest_framework import serializers
from recommendations.models import LocationSentiment


class RecommendationSerializer(serializers.Serializer):
    """Serializer for the Recommendation DTO"""
    location_id = serializers.CharField(allow_null=True)
    location_name = serializers.CharField()
    location_place = serializers.CharField(allow_blank=True)
    match_score = serializers.IntegerField(min_value=1)
    sentiment = serializers.CharField()
    positive_percentage = serializers.FloatField()


class LocationSentimentRollupSerializer(serializers.Serializer):
    """Serializer for the LocationSentimentRollup DTO"""
    location_key = serializers.CharField()
    location_id = serializers.CharField(allow_null=True)
    location_name = serializers.CharField()
    entries_count = serializers.IntegerField()
    overall_positive_percentage = serializers.FloatField()
    overall_negative_percentage = serializers.FloatField()
    overall_neutral_percentage = serializers.FloatField()


class LocationSentimentSerializer(serializers.ModelSerializer):
    class Meta:
        model = LocationSentiment
        fields = [
            'id', 'location_key', 'location', 'location_name', 'entries_count',
            'overall_positive_percentage', 'overall_negative_percentage',
            'overall_neutral_percentage', 'computed_at',
        ]
        read_only_fields = fields
