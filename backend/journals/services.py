"""
Domain services for the journals app: writing entries together with their
derived sentiment, and normalizing the image list payloads clients send.
"""
import json
import logging
from typing import Dict, List, Optional

from django.db import transaction

from analysis.sentiment import SentimentScorer, SentimentResult
from .models import Entry, Journal

logger = logging.getLogger(__name__)


def parse_image_list(raw) -> List[str]:
    """
    Normalize an image list payload to a list of URL strings.

    Clients send either a list or a JSON encoded list. Malformed payloads are
    logged and treated as an empty list instead of failing the write.

    Args:
        raw: list, JSON string or None

    Returns:
        List[str]: Image URLs, empty when the payload is missing or malformed
    """
    if raw in (None, ''):
        return []

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Error parsing image list {raw!r}: {str(e)}")
            return []

    if not isinstance(raw, list):
        logger.error(f"Image list is not a list: {raw!r}")
        return []

    return [str(url) for url in raw if url]


class EntryService:
    """
    Domain service that keeps an entry's sentiment fields in step with its
    description. Every create and every update re-scores the text.
    """

    def __init__(self, scorer: Optional[SentimentScorer] = None):
        self.scorer = scorer or SentimentScorer()

    def analyze(self, text: str) -> SentimentResult:
        """
        Score text without persisting anything.

        Raises:
            EmptyTextError: If the text has no sentences
        """
        return self.scorer.score_text(text)

    def create_entry(self, journal: Journal, data: Dict, images: Optional[List[str]] = None) -> Entry:
        """
        Create an entry and store the sentiment of its description.

        Args:
            journal: Journal the entry belongs to
            data: Validated entry fields (description, entry_datetime, location, ...)
            images: Image URLs to attach

        Returns:
            Entry: The saved entry

        Raises:
            EmptyTextError: If the description has no sentences
        """
        result = self.scorer.score_text(data['description'])

        entry = Entry(journal=journal, **data)
        entry.images = images or []
        entry.apply_sentiment(result)

        with transaction.atomic():
            entry.save()

        logger.info(
            f"Created entry {entry.id} in journal {journal.id} "
            f"with {result.label.value} sentiment"
        )
        return entry

    def update_entry(self, entry: Entry, data: Dict, existing_images=None,
                     new_images: Optional[List[str]] = None) -> Entry:
        """
        Update an entry, re-scoring its description.

        The stored image list becomes the parsed `existing_images` payload
        followed by `new_images`. When neither is supplied the current images
        are kept, normalized to a plain list.

        Raises:
            EmptyTextError: If the new description has no sentences
        """
        description = data.get('description', entry.description)
        result = self.scorer.score_text(description)

        for field, value in data.items():
            setattr(entry, field, value)

        if existing_images is not None or new_images:
            entry.images = parse_image_list(existing_images) + list(new_images or [])
        else:
            # Rows written by older clients may hold the list JSON encoded
            entry.images = parse_image_list(entry.images)

        entry.apply_sentiment(result)

        with transaction.atomic():
            entry.save()

        logger.info(f"Updated entry {entry.id} with {result.label.value} sentiment")
        return entry
