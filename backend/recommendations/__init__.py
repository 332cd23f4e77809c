"""
Recommendations Module Summary
==============================

This module turns journal entries into travel recommendations and keeps a
per-location sentiment rollup.

Key Features Implemented:
1. RecommendationMatcher - keyword overlap ranking gated on positive sentiment
2. SentimentAggregator - per-location mean sentiment with read-repair of unscored entries
3. LocationSentiment table, fully replaced on every rollup run
4. REST API endpoints (public and personalized recommendations, rollups)
5. Daily scheduled rollup via Celery beat
"""
