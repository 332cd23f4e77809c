"""
Storage side of the recommendation engine: loads entries and locations from
the database as snapshots, runs the matcher and aggregator over them and
persists what they produce.
"""
import logging
import threading
from typing import Dict, List, Optional

from django.db import connection, transaction

from analysis.sentiment import SentimentScorer, SentimentResult
from journals.models import Entry
from locations.models import Location
from locations.services import LocationService
from recommendations.aggregator import SentimentAggregator
from recommendations.dtos import EntrySnapshot, LocationSnapshot, LocationSentimentRollup, Recommendation
from recommendations.matcher import RecommendationMatcher
from recommendations.models import LocationSentiment

logger = logging.getLogger(__name__)


def entry_to_snapshot(entry: Entry) -> EntrySnapshot:
    return EntrySnapshot(
        text=entry.description,
        entry_id=str(entry.id),
        location_id=str(entry.location_id) if entry.location_id else None,
        location_name=entry.location_name or None,
        sentiment=entry.get_sentiment(),
    )


def location_to_snapshot(location: Location) -> LocationSnapshot:
    return LocationSnapshot(
        id=str(location.id),
        name=location.name,
        place=location.place,
        description=location.description,
        keywords=tuple(LocationService.get_keywords(location)),
    )


class RecommendationService:
    """
    Builds recommendation lists from the stored journal entries.

    The public variant recommends from every entry and deduplicates by
    location name and place; the personalized variant only reads the given
    user's entries and deduplicates by location id.
    """

    def __init__(self, scorer: Optional[SentimentScorer] = None):
        self.scorer = scorer or SentimentScorer()

    def fetch_entry_texts(self) -> List[EntrySnapshot]:
        """All entries, text only. Sentiment is always re-scored from the text."""
        texts = Entry.objects.order_by('created_at').values_list('id', 'description')
        return [EntrySnapshot(text=text, entry_id=str(entry_id)) for entry_id, text in texts]

    def fetch_entries_for_user(self, user) -> List[EntrySnapshot]:
        """Entries from the user's journals, with their stored sentiment."""
        entries = Entry.objects.filter(journal__user=user).order_by('created_at')
        return [entry_to_snapshot(entry) for entry in entries]

    def fetch_locations(self) -> List[LocationSnapshot]:
        return [location_to_snapshot(location) for location in Location.objects.all()]

    def recommend(self, user=None) -> List[Recommendation]:
        """
        Ranked recommendations, personalized when an authenticated user is given.

        Args:
            user: Authenticated user or None for the public list

        Returns:
            List[Recommendation]: Sorted by match score, then location name
        """
        if user is not None and user.is_authenticated:
            entries = self.fetch_entries_for_user(user)
            matcher = RecommendationMatcher(scorer=self.scorer, dedupe_by_id=True)
        else:
            entries = self.fetch_entry_texts()
            matcher = RecommendationMatcher(scorer=self.scorer)

        return matcher.recommend(entries, self.fetch_locations())


class LocationSentimentService:
    """
    Computes and stores the per-location sentiment rollup.
    Runs on demand and from the daily scheduled task.
    """

    # Serializes recompute runs between threads of one process
    _write_lock = threading.Lock()

    # Key of the PostgreSQL advisory lock shared by the web and worker processes
    ROLLUP_LOCK_KEY = 4187203

    def __init__(self, scorer: Optional[SentimentScorer] = None):
        self.aggregator = SentimentAggregator(scorer=scorer)

    @classmethod
    def lock_rollup_table(cls) -> None:
        """
        Take the cross-process rollup lock for the current transaction.

        On PostgreSQL this is a transaction-scoped advisory lock, released on
        commit or rollback. SQLite already allows a single writer per database,
        so no extra lock is needed there.
        """
        if connection.vendor != 'postgresql':
            return
        with connection.cursor() as cursor:
            cursor.execute("SELECT pg_advisory_xact_lock(%s)", [cls.ROLLUP_LOCK_KEY])

    def fetch_entries_with_location(self) -> List[EntrySnapshot]:
        entries = Entry.objects.exclude(location__isnull=True, location_name='').order_by('created_at')
        return [entry_to_snapshot(entry) for entry in entries]

    def fetch_locations(self) -> List[LocationSnapshot]:
        return [
            LocationSnapshot(id=str(location_id), name=name)
            for location_id, name in Location.objects.values_list('id', 'name')
        ]

    @staticmethod
    def persist_entry_sentiment(entry: EntrySnapshot, result: SentimentResult) -> None:
        """Write a lazily computed sentiment back to its entry."""
        if entry.entry_id is None:
            return
        Entry.objects.filter(pk=entry.entry_id).update(
            sentiment=result.label.value,
            positive_percentage=result.positive_percentage,
            negative_percentage=result.negative_percentage,
            neutral_percentage=result.neutral_percentage,
        )
        logger.info(f"Stored missing sentiment for entry {entry.entry_id}")

    def aggregate_sentiments(self) -> List[LocationSentimentRollup]:
        """Compute the rollup of every location from all entries."""
        return self.aggregator.aggregate(
            self.fetch_entries_with_location(),
            self.fetch_locations(),
            persist=self.persist_entry_sentiment,
        )

    def recompute_and_persist(self) -> Dict[str, int]:
        """
        Recompute the rollup and replace the stored table with it.

        The replace runs in a single transaction: either every rollup row is
        written or the previous table is left untouched. Runs from the web and
        worker processes are serialized by `lock_rollup_table`, taken before
        the delete.

        Returns:
            Dict[str, int]: {'locations_updated': number of rollup rows written}
        """
        with self._write_lock:
            rollups = self.aggregate_sentiments()

            with transaction.atomic():
                self.lock_rollup_table()
                LocationSentiment.objects.all().delete()
                LocationSentiment.objects.bulk_create([
                    LocationSentiment(
                        location_key=rollup.location_key,
                        location_id=rollup.location_id,
                        location_name=rollup.location_name[:255],
                        entries_count=rollup.entries_count,
                        overall_positive_percentage=rollup.overall_positive_percentage,
                        overall_negative_percentage=rollup.overall_negative_percentage,
                        overall_neutral_percentage=rollup.overall_neutral_percentage,
                    )
                    for rollup in rollups
                ])

        logger.info(f"Location sentiment table replaced with {len(rollups)} rows")
        return {'locations_updated': len(rollups)}
