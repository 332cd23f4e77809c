"""
Domain services for the locations app: reading the location catalog in the
shape the recommendation engine consumes.
"""
import json
import logging
from typing import List, Optional

from analysis.keywords import extract_keywords
from .models import Location

logger = logging.getLogger(__name__)


class LocationService:
    """
    Domain Service that turns Location rows into keyword lists for matching.
    Tolerates keyword caches written by older clients in other shapes.
    """

    @staticmethod
    def parse_keywords(raw) -> Optional[List[str]]:
        """
        Normalize a stored keyword cache.

        Accepts a list of strings or a JSON encoded list. Anything else is
        treated as unusable.

        Args:
            raw: Value of Location.keywords as loaded from the database

        Returns:
            Optional[List[str]]: Lower-cased keywords, or None when the cache is unusable
        """
        if raw is None:
            return None

        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except (TypeError, ValueError) as e:
                logger.warning(f"Unparseable keyword cache {raw!r}: {str(e)}")
                return None

        if not isinstance(raw, list) or not all(isinstance(word, str) for word in raw):
            logger.warning(f"Keyword cache has unexpected shape: {raw!r}")
            return None

        return [word.lower() for word in raw]

    @classmethod
    def get_keywords(cls, location: Location) -> List[str]:
        """
        Keywords of a location, from its cache when usable, otherwise
        recomputed from the description.
        """
        keywords = cls.parse_keywords(location.keywords)
        if keywords is None or (not keywords and location.description):
            keywords = extract_keywords(location.description)
        return keywords

    @classmethod
    def refresh_keywords(cls) -> int:
        """
        Rebuild the keyword cache of every location.

        Returns:
            int: Number of locations whose cache changed
        """
        updated = 0
        for location in Location.objects.all():
            keywords = extract_keywords(location.description)
            if location.keywords != keywords:
                Location.objects.filter(pk=location.pk).update(keywords=keywords)
                updated += 1

        logger.info(f"Refreshed keyword cache for {updated} locations")
        return updated
