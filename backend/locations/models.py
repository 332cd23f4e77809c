import uuid
from django.db import models

from analysis.keywords import extract_keywords


class Location(models.Model):
    """
    Location - catalog entry that journal entries can be tagged with and that
    the recommendation engine ranks against entry text.
    """

    # Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Basic Information
    name = models.CharField(max_length=255, help_text="The name of the place")
    place = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Human readable area the location belongs to (city, region)"
    )
    description = models.TextField(
        blank=True,
        default="",
        help_text="Free text description matched against journal entry keywords"
    )

    # Derived keyword cache
    keywords = models.JSONField(
        default=list,
        blank=True,
        help_text="Keywords extracted from the description, refreshed on save"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'locations_location'
        ordering = ['name', 'place']

    def __str__(self):
        if self.place:
            return f"{self.name} ({self.place})"
        return self.name

    def save(self, *args, **kwargs):
        """
        Overridden save method that refreshes the keyword cache from the
        description so the matcher does not re-tokenize it on every request.
        """
        self.keywords = extract_keywords(self.description)

        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'description' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'keywords'}

        super().save(*args, **kwargs)
