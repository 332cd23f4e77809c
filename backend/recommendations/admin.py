"""
Django admin configuration for recommendations models.
"""
from django.contrib import admin
from recommendations.models import LocationSentiment


@admin.register(LocationSentiment)
class LocationSentimentAdmin(admin.ModelAdmin):
    list_display = [
        'location_name', 'entries_count', 'overall_positive_percentage',
        'overall_negative_percentage', 'overall_neutral_percentage', 'computed_at',
    ]
    search_fields = ['location_name', 'location_key']
    readonly_fields = [
        'id', 'location_key', 'location', 'location_name', 'entries_count',
        'overall_positive_percentage', 'overall_negative_percentage',
        'overall_neutral_percentage', 'computed_at',
    ]
