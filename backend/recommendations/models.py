import uuid
from django.db import models
from locations.models import Location


class LocationSentiment(models.Model):
    """
    Persisted sentiment rollup for one location.
    Written by LocationSentimentService.recompute_and_persist(), which replaces
    the whole table on every run; rows are never updated individually.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    location_key = models.CharField(
        max_length=300,
        unique=True,
        help_text="Location id, or 'name:<lower-cased name>' for free text locations"
    )
    location = models.ForeignKey(
        Location,
        on_delete=models.CASCADE,
        related_name='sentiment_rollups',
        null=True,
        blank=True
    )
    location_name = models.CharField(max_length=255)
    entries_count = models.PositiveIntegerField(default=0)
    overall_positive_percentage = models.FloatField(default=0.0)
    overall_negative_percentage = models.FloatField(default=0.0)
    overall_neutral_percentage = models.FloatField(default=0.0)
    computed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'recommendations_location_sentiment'
        ordering = ['-entries_count', 'location_name']

    def __str__(self):
        return f"Sentiment for {self.location_name} ({self.entries_count} entries)"
