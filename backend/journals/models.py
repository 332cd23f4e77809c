import uuid

from django.conf import settings
from django.db import models

from analysis.sentiment import SentimentLabel, SentimentResult
from locations.models import Location


class Journal(models.Model):
    """
    A user's journal: a titled, dated container of entries.
    """

    # Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Foreign Keys
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='journals',
        null=True,
        blank=True,
        help_text="Owner of the journal; anonymous journals have no owner"
    )

    # Basic Information
    title = models.CharField(max_length=255, help_text="User defined journal title")
    journal_date = models.DateField(help_text="The date the journal is about")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'journals_journal'
        ordering = ['-journal_date', '-created_at']

    def __str__(self):
        return f"{self.title} ({self.journal_date})"


class Entry(models.Model):
    """
    A single journal entry. Sentiment fields are derived from the description
    when the entry is written; a NULL sentiment means the entry has not been
    scored yet and is filled in lazily by the sentiment rollup.
    """

    class Sentiment(models.TextChoices):
        """Enumeration for sentiment classifications"""
        POSITIVE = SentimentLabel.POSITIVE.value, 'Positive'
        NEGATIVE = SentimentLabel.NEGATIVE.value, 'Negative'
        NEUTRAL = SentimentLabel.NEUTRAL.value, 'Neutral'

    # Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Foreign Keys
    journal = models.ForeignKey(Journal, on_delete=models.CASCADE, related_name='entries')
    location = models.ForeignKey(
        Location,
        on_delete=models.SET_NULL,
        related_name='entries',
        null=True,
        blank=True,
        help_text="Catalog location the entry was written about"
    )

    # Content
    description = models.TextField(help_text="Free text body of the entry")
    entry_datetime = models.DateTimeField(help_text="When the entry happened")
    location_name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Free text location name when no catalog location is linked"
    )
    is_displayed = models.BooleanField(default=True, help_text="Whether the entry is shown on the journal map")
    images = models.JSONField(default=list, blank=True, help_text="List of image URLs")

    # Derived sentiment
    sentiment = models.CharField(
        max_length=10,
        choices=Sentiment.choices,
        null=True,
        blank=True,
        help_text="Overall sentiment of the description: positive, negative, neutral"
    )
    positive_percentage = models.FloatField(null=True, blank=True)
    negative_percentage = models.FloatField(null=True, blank=True)
    neutral_percentage = models.FloatField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'journals_entry'
        ordering = ['-entry_datetime']
        verbose_name_plural = 'entries'

    def __str__(self):
        return f"Entry {self.entry_datetime:%Y-%m-%d %H:%M} in {self.journal.title}"

    def get_sentiment(self):
        """
        Stored sentiment as a SentimentResult.

        Returns:
            SentimentResult or None if the entry has not been scored
        """
        return SentimentResult.from_stored(
            self.sentiment,
            self.positive_percentage,
            self.negative_percentage,
            self.neutral_percentage,
        )

    def apply_sentiment(self, result: SentimentResult) -> None:
        """Copy a scoring result onto the sentiment fields (does not save)."""
        self.sentiment = result.label.value
        self.positive_percentage = result.positive_percentage
        self.negative_percentage = result.negative_percentage
        self.neutral_percentage = result.neutral_percentage
