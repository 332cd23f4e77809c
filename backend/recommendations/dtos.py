"""
Data Transfer Objects (DTOs) passed into and returned from the recommendation engine.
The engine only sees these snapshots, never ORM rows.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple

from analysis.sentiment import SentimentResult


@dataclass(frozen=True)
class EntrySnapshot:
    """
    An entry as the engine sees it.
    `sentiment` is the stored result, None when the entry was never scored.
    """
    text: str
    entry_id: Optional[str] = None
    location_id: Optional[str] = None
    location_name: Optional[str] = None
    sentiment: Optional[SentimentResult] = None


@dataclass(frozen=True)
class LocationSnapshot:
    """
    A catalog location as the engine sees it.
    `keywords` is the caller's cached keyword list, if it has one.
    """
    name: str
    place: str = ""
    description: str = ""
    id: Optional[str] = None
    keywords: Optional[Tuple[str, ...]] = None


@dataclass
class Recommendation:
    """
    A location recommended from a positive entry.
    Returned by RecommendationMatcher.recommend().
    """
    location_id: Optional[str]
    location_name: str
    location_place: str
    match_score: int
    sentiment: str
    positive_percentage: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class LocationSentimentRollup:
    """
    Mean sentiment of all entries written about one location.
    Returned by SentimentAggregator.aggregate().
    """
    location_key: str
    location_name: str
    entries_count: int
    overall_positive_percentage: float
    overall_negative_percentage: float
    overall_neutral_percentage: float
    location_id: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)
