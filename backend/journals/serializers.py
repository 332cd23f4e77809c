"""
Serializers for the journals app.
"""
from rest_framework import serializers
from locations.models import Location
from .models import Journal, Entry
from .services import parse_image_list


class JournalSerializer(serializers.ModelSerializer):
    entries_count = serializers.SerializerMethodField()

    class Meta:
        model = Journal
        fields = ['id', 'user', 'title', 'journal_date', 'entries_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'user', 'created_at', 'updated_at']

    def get_entries_count(self, obj):
        return obj.entries.count()

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Journal title is required")
        return value


class ImageListField(serializers.Field):
    """
    Image URL list that accepts either a list or its JSON encoding, the way
    multipart clients send it. Malformed payloads become an empty list.
    """
    default_error_messages = {
        'invalid': 'Expected a list of image URLs or a JSON encoded list.'
    }

    def to_internal_value(self, data):
        if not isinstance(data, (list, str)):
            self.fail('invalid')
        return data

    def to_representation(self, value):
        return parse_image_list(value)


class EntrySerializer(serializers.ModelSerializer):
    """
    Serializer for Entry.
    Sentiment fields are computed by EntryService and are read-only here.
    """
    location = serializers.PrimaryKeyRelatedField(
        queryset=Location.objects.all(),
        required=False,
        allow_null=True
    )
    images = serializers.ListField(
        child=serializers.CharField(max_length=500),
        required=False,
        allow_empty=True
    )
    existing_images = ImageListField(
        write_only=True,
        required=False,
        help_text="Image URLs to keep on update, as a list or a JSON encoded list"
    )

    class Meta:
        model = Entry
        fields = [
            'id', 'journal', 'description', 'entry_datetime',
            'location', 'location_name', 'is_displayed', 'images', 'existing_images',
            'sentiment', 'positive_percentage', 'negative_percentage', 'neutral_percentage',
            'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'sentiment', 'positive_percentage', 'negative_percentage',
            'neutral_percentage', 'created_at', 'updated_at',
        ]

    def validate_description(self, value):
        if not value.strip():
            raise serializers.ValidationError("Entry description is required")
        return value

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # Older rows may hold the image list JSON encoded
        data['images'] = parse_image_list(instance.images)
        return data


class AnalyzeTextSerializer(serializers.Serializer):
    """Input for scoring arbitrary text"""
    text = serializers.CharField(allow_blank=False, trim_whitespace=False)


class SentenceScoreSerializer(serializers.Serializer):
    sentence = serializers.CharField(trim_whitespace=False)
    score = serializers.FloatField()
    label = serializers.CharField()
    positive_percentage = serializers.FloatField()
    negative_percentage = serializers.FloatField()
    neutral_percentage = serializers.FloatField()


class SentimentResultSerializer(serializers.Serializer):
    """Serializer for the SentimentResult dataclass"""
    sentiment = serializers.CharField()
    positive_percentage = serializers.FloatField()
    negative_percentage = serializers.FloatField()
    neutral_percentage = serializers.FloatField()
    sentences = SentenceScoreSerializer(many=True, required=False)
