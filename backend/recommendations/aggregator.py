"""
SentimentAggregator: rolls per-entry sentiment up into per-location statistics.
"""
import logging
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from analysis.exceptions import EmptyTextError
from analysis.sentiment import SentimentScorer, SentimentResult, round_percentage
from recommendations.dtos import EntrySnapshot, LocationSnapshot, LocationSentimentRollup

logger = logging.getLogger(__name__)

PersistCallback = Callable[[EntrySnapshot, SentimentResult], None]


class SentimentAggregator:
    """
    Analytical engine that computes the mean sentiment of every location from
    the entries written about it. Every call starts from scratch; nothing is
    carried over between runs.
    """

    def __init__(self, scorer: Optional[SentimentScorer] = None):
        self.scorer = scorer or SentimentScorer()

    def get_or_compute(self, entry: EntrySnapshot,
                       persist: Optional[PersistCallback] = None) -> SentimentResult:
        """
        Stored sentiment of an entry, scoring it first when it has none.

        A freshly computed result is handed to `persist` so the caller can
        write it back; the scorer itself stays free of side effects.

        Raises:
            EmptyTextError: If the entry is unscored and its text is empty
        """
        if entry.sentiment is not None:
            return entry.sentiment

        result = self.scorer.score_text(entry.text)
        if persist is not None:
            persist(entry, result)
        return result

    @staticmethod
    def group_key(entry: EntrySnapshot) -> Optional[str]:
        """
        Location id when linked to the catalog, otherwise a key built from the
        lower-cased free text name. None when the entry has no location at all.
        """
        if entry.location_id:
            return str(entry.location_id)
        if entry.location_name and entry.location_name.strip():
            return f"name:{entry.location_name.strip().lower()}"
        return None

    def aggregate(self, entries: Iterable[EntrySnapshot],
                  locations: Iterable[LocationSnapshot] = (),
                  persist: Optional[PersistCallback] = None) -> List[LocationSentimentRollup]:
        """
        Batch Job: compute the sentiment rollup of every location.

        This method:
        1. Groups entries by location
        2. Collects each entry's stored percentages (read-repairing unscored entries)
        3. Averages each percentage list
        4. Orders groups by number of contributing entries

        Args:
            entries: All entries to consider
            locations: Catalog used to name groups keyed by location id
            persist: Called with (entry, result) for every entry scored during the run

        Returns:
            List[LocationSentimentRollup]: One rollup per location, most entries first
        """
        names_by_id = {str(location.id): location.name for location in locations if location.id is not None}

        positives: Dict[str, List[float]] = defaultdict(list)
        negatives: Dict[str, List[float]] = defaultdict(list)
        neutrals: Dict[str, List[float]] = defaultdict(list)
        group_names: Dict[str, str] = {}
        group_ids: Dict[str, Optional[str]] = {}

        for entry in entries:
            key = self.group_key(entry)
            if key is None:
                continue

            try:
                sentiment = self.get_or_compute(entry, persist)
            except EmptyTextError:
                logger.warning(f"Entry {entry.entry_id or ''} has no text to score, left out of rollup")
                continue

            positives[key].append(sentiment.positive_percentage)
            negatives[key].append(sentiment.negative_percentage)
            neutrals[key].append(sentiment.neutral_percentage)

            if key not in group_names:
                location_id = str(entry.location_id) if entry.location_id else None
                group_ids[key] = location_id
                group_names[key] = (
                    names_by_id.get(location_id)
                    or (entry.location_name or '').strip()
                    or key
                )

        rollups = [
            LocationSentimentRollup(
                location_key=key,
                location_id=group_ids[key],
                location_name=group_names[key],
                entries_count=len(positives[key]),
                overall_positive_percentage=self._mean(positives[key]),
                overall_negative_percentage=self._mean(negatives[key]),
                overall_neutral_percentage=self._mean(neutrals[key]),
            )
            for key in positives
        ]
        rollups.sort(key=lambda r: (-r.entries_count, r.location_name.lower(), r.location_key))

        logger.info(f"Aggregated sentiment for {len(rollups)} locations")
        return rollups

    @staticmethod
    def _mean(values: List[float]) -> float:
        if not values:
            return 0.0
        return round_percentage(sum(values) / len(values))
