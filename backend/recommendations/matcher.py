"""
RecommendationMatcher: the core matching engine for the recommendation system.
Ranks catalog locations by keyword overlap with positively scored journal entries.
"""
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional

from analysis.exceptions import EmptyTextError
from analysis.keywords import keyword_set
from analysis.sentiment import SentimentScorer, SentimentResult
from recommendations.dtos import EntrySnapshot, LocationSnapshot, Recommendation

logger = logging.getLogger(__name__)


class RecommendationMatcher:
    """
    Algorithm Service: recommends locations for journal entries.

    1. Sentiment gate - only entries whose overall label is positive contribute
    2. Keyword overlap - match score is the number of shared keywords
    3. Deduplication - one recommendation per location, keeping the best score
    """

    def __init__(self, scorer: Optional[SentimentScorer] = None, dedupe_by_id: bool = False):
        """
        Args:
            scorer: Sentiment scorer for entries that carry no stored sentiment
            dedupe_by_id: Key recommendations by location id instead of
                          the lower-cased name and place
        """
        self.scorer = scorer or SentimentScorer()
        self.dedupe_by_id = dedupe_by_id

    def recommend(self, entries: Iterable[EntrySnapshot],
                  locations: Iterable[LocationSnapshot]) -> List[Recommendation]:
        """
        Orchestrator method that builds the ranked recommendation list.

        Steps:
        1. Resolve each entry's sentiment and skip non-positive entries
        2. Extract entry keywords and score every location by overlap
        3. Keep the best scoring match per unique location
        4. Sort by match score (highest first), then location name

        Args:
            entries: Entry snapshots to recommend from
            locations: Candidate catalog locations

        Returns:
            List[Recommendation]: Ranked recommendations, never with a zero score
        """
        # Location keywords do not depend on the entry, extract them once
        candidates = [(location, self.location_keywords(location)) for location in locations]

        best: Dict[str, Recommendation] = {}

        for entry in entries:
            sentiment = self._resolve_sentiment(entry)
            if sentiment is None:
                continue

            if not sentiment.is_positive:
                logger.info(f"Skipping entry {entry.entry_id or ''} with {sentiment.label.value} sentiment")
                continue

            entry_keywords = keyword_set(entry.text)
            if not entry_keywords:
                continue

            for location, location_keywords in candidates:
                score = self.match_score(entry_keywords, location_keywords)
                if score == 0:
                    continue

                logger.debug(f"Match found: {location.name} scored {score}")

                key = self.unique_key(location)
                current = best.get(key)
                if current is None or score > current.match_score:
                    best[key] = Recommendation(
                        location_id=location.id,
                        location_name=location.name,
                        location_place=location.place,
                        match_score=score,
                        sentiment=sentiment.label.value,
                        positive_percentage=sentiment.positive_percentage,
                    )

        recommendations = sorted(
            best.values(),
            key=lambda r: (-r.match_score, r.location_name, r.location_place)
        )
        logger.info(f"Built {len(recommendations)} recommendations")
        return recommendations

    @staticmethod
    def match_score(entry_keywords: FrozenSet[str], location_keywords: FrozenSet[str]) -> int:
        """
        Number of keywords shared by an entry and a location.
        A plain intersection count, not normalized by either set's size.
        """
        return len(entry_keywords & location_keywords)

    @staticmethod
    def location_keywords(location: LocationSnapshot) -> FrozenSet[str]:
        if location.keywords:
            return frozenset(location.keywords)
        return keyword_set(location.description)

    def unique_key(self, location: LocationSnapshot) -> str:
        if self.dedupe_by_id and location.id is not None:
            return str(location.id)
        return f"{location.name.lower()}|{location.place.lower()}"

    # Helper methods
    def _resolve_sentiment(self, entry: EntrySnapshot) -> Optional[SentimentResult]:
        """Stored sentiment if present, otherwise score the text now."""
        if entry.sentiment is not None:
            return entry.sentiment
        try:
            return self.scorer.score_text(entry.text)
        except EmptyTextError:
            logger.warning(f"Skipping entry {entry.entry_id or ''} with empty text")
            return None
