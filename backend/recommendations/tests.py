"""
Tests for the recommendations module.
"""
from datetime import date
from unittest.mock import patch

from django.db import connection
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone
from django.contrib.auth.models import User
from rest_framework import status
from rest_framework.test import APITestCase

from analysis.lexicon import PolarityLexicon
from analysis.sentiment import SentimentScorer, SentimentResult, SentimentLabel
from journals.models import Journal, Entry
from locations.models import Location
from recommendations.aggregator import SentimentAggregator
from recommendations.dtos import EntrySnapshot, LocationSnapshot, Recommendation
from recommendations.matcher import RecommendationMatcher
from recommendations.models import LocationSentiment
from recommendations.services import RecommendationService, LocationSentimentService
from recommendations.tasks import recompute_location_sentiments


VOCABULARY = {'love': 3, 'great': 3, 'amazing': 4, 'bad': -3, 'awful': -3}


def make_scorer():
    return SentimentScorer(lexicon=PolarityLexicon(vocabulary=VOCABULARY))


def stored(label, positive, negative, neutral):
    return SentimentResult(
        label=SentimentLabel(label),
        positive_percentage=positive,
        negative_percentage=negative,
        neutral_percentage=neutral,
    )


class RecommendationMatcherTestCase(SimpleTestCase):
    """Test cases for RecommendationMatcher"""

    def setUp(self):
        self.matcher = RecommendationMatcher(scorer=make_scorer())
        self.beach = LocationSnapshot(
            id='1', name='White Beach', place='Boracay',
            description='Powdery sand beach with clear water and sunset sailing'
        )
        self.falls = LocationSnapshot(
            id='2', name='Kawasan Falls', place='Cebu',
            description='Turquoise waterfall pools for canyoneering and swimming'
        )
        self.museum = LocationSnapshot(
            id='3', name='National Museum', place='Manila',
            description='Paintings and history galleries'
        )

    def test_match_score_is_intersection_count(self):
        score = RecommendationMatcher.match_score(frozenset({'sand', 'water', 'hike'}), frozenset({'sand', 'water'}))
        self.assertEqual(score, 2)

    def test_recommend_from_positive_entry(self):
        entries = [EntrySnapshot(text='I love the sand and clear water. Great sunset!')]

        recommendations = self.matcher.recommend(entries, [self.beach, self.falls, self.museum])

        self.assertEqual(len(recommendations), 1)
        recommendation = recommendations[0]
        self.assertIsInstance(recommendation, Recommendation)
        self.assertEqual(recommendation.location_name, 'White Beach')
        # sand, clear, water, sunset
        self.assertEqual(recommendation.match_score, 4)
        self.assertEqual(recommendation.sentiment, 'positive')
        self.assertEqual(recommendation.positive_percentage, 100.0)

    def test_non_positive_entries_never_recommend(self):
        entries = [
            EntrySnapshot(text='Awful sand and bad water.'),
            EntrySnapshot(text='The sand. The water. Great.  Bad.'),
            EntrySnapshot(text='Sand and water everywhere.'),
        ]
        self.assertEqual(self.matcher.recommend(entries, [self.beach]), [])

    def test_zero_score_locations_dropped(self):
        entries = [EntrySnapshot(text='Amazing waterfall pools.')]
        recommendations = self.matcher.recommend(entries, [self.beach, self.falls, self.museum])

        self.assertEqual([r.location_name for r in recommendations], ['Kawasan Falls'])
        self.assertTrue(all(r.match_score > 0 for r in recommendations))

    def test_duplicate_location_keeps_highest_score(self):
        entries = [
            EntrySnapshot(text='Great sand and water.'),
            EntrySnapshot(text='Amazing powdery sand, clear water, sunset.'),
            EntrySnapshot(text='Great water.'),
        ]

        recommendations = self.matcher.recommend(entries, [self.beach])

        self.assertEqual(len(recommendations), 1)
        self.assertEqual(recommendations[0].match_score, 5)

    def test_dedupe_by_name_and_place_is_case_insensitive(self):
        duplicate = LocationSnapshot(id='9', name='white beach', place='BORACAY', description='sand water')
        entries = [EntrySnapshot(text='Great sand and water.')]

        recommendations = self.matcher.recommend(entries, [self.beach, duplicate])
        self.assertEqual(len(recommendations), 1)

        by_id = RecommendationMatcher(scorer=make_scorer(), dedupe_by_id=True)
        self.assertEqual(len(by_id.recommend(entries, [self.beach, duplicate])), 2)

    def test_ordering_by_score_then_name(self):
        locations = [
            LocationSnapshot(id='a', name='Zambales Cove', place='', description='sand water'),
            LocationSnapshot(id='b', name='Anilao Reef', place='', description='sand water'),
            LocationSnapshot(id='c', name='Mactan Shore', place='', description='sand water sunset'),
        ]
        entries = [EntrySnapshot(text='Great sand, water and sunset.')]

        recommendations = self.matcher.recommend(entries, locations)

        self.assertEqual(
            [(r.location_name, r.match_score) for r in recommendations],
            [('Mactan Shore', 3), ('Anilao Reef', 2), ('Zambales Cove', 2)]
        )

    def test_stored_sentiment_is_used(self):
        entries = [EntrySnapshot(text='Sand and water.', sentiment=stored('positive', 75.0, 0.0, 25.0))]

        recommendations = self.matcher.recommend(entries, [self.beach])

        self.assertEqual(len(recommendations), 1)
        self.assertEqual(recommendations[0].positive_percentage, 75.0)

    def test_cached_location_keywords_are_used(self):
        location = LocationSnapshot(id='5', name='Cached', place='', description='', keywords=('sand',))
        recommendations = self.matcher.recommend([EntrySnapshot(text='Great sand.')], [location])
        self.assertEqual(recommendations[0].match_score, 1)

    def test_empty_entry_is_skipped(self):
        entries = [EntrySnapshot(text='...'), EntrySnapshot(text='Great sand.')]
        recommendations = self.matcher.recommend(entries, [self.beach])
        self.assertEqual(len(recommendations), 1)

    def test_deterministic(self):
        entries = [EntrySnapshot(text='Great sand and water. Love the waterfall pools.')]
        locations = [self.beach, self.falls, self.museum]
        self.assertEqual(self.matcher.recommend(entries, locations), self.matcher.recommend(entries, locations))


class SentimentAggregatorTestCase(SimpleTestCase):
    """Test cases for SentimentAggregator"""

    def setUp(self):
        self.aggregator = SentimentAggregator(scorer=make_scorer())
        self.locations = [LocationSnapshot(id='loc-1', name='Boracay'), LocationSnapshot(id='loc-2', name='Sagada')]

    def test_mean_of_stored_percentages(self):
        entries = [
            EntrySnapshot(text='x', location_id='loc-1', sentiment=stored('positive', 80.0, 20.0, 0.0)),
            EntrySnapshot(text='x', location_id='loc-1', sentiment=stored('positive', 60.0, 0.0, 40.0)),
            EntrySnapshot(text='x', location_id='loc-1', sentiment=stored('positive', 100.0, 0.0, 0.0)),
        ]

        rollups = self.aggregator.aggregate(entries, self.locations)

        self.assertEqual(len(rollups), 1)
        rollup = rollups[0]
        self.assertEqual(rollup.location_id, 'loc-1')
        self.assertEqual(rollup.location_name, 'Boracay')
        self.assertEqual(rollup.entries_count, 3)
        self.assertEqual(rollup.overall_positive_percentage, 80.0)
        self.assertEqual(rollup.overall_negative_percentage, 6.67)
        self.assertEqual(rollup.overall_neutral_percentage, 13.33)

    def test_grouping_by_free_text_name(self):
        entries = [
            EntrySnapshot(text='x', location_name='Vigan ', sentiment=stored('neutral', 50.0, 50.0, 0.0)),
            EntrySnapshot(text='x', location_name='vigan', sentiment=stored('positive', 100.0, 0.0, 0.0)),
            EntrySnapshot(text='x', sentiment=stored('positive', 100.0, 0.0, 0.0)),
        ]

        rollups = self.aggregator.aggregate(entries)

        self.assertEqual(len(rollups), 1)
        self.assertEqual(rollups[0].location_key, 'name:vigan')
        self.assertIsNone(rollups[0].location_id)
        self.assertEqual(rollups[0].entries_count, 2)
        self.assertEqual(rollups[0].overall_positive_percentage, 75.0)

    def test_ordered_by_entries_count(self):
        entries = [
            EntrySnapshot(text='x', location_id='loc-1', sentiment=stored('positive', 100.0, 0.0, 0.0)),
            EntrySnapshot(text='x', location_id='loc-2', sentiment=stored('positive', 100.0, 0.0, 0.0)),
            EntrySnapshot(text='x', location_id='loc-2', sentiment=stored('negative', 0.0, 100.0, 0.0)),
        ]

        rollups = self.aggregator.aggregate(entries, self.locations)

        self.assertEqual([r.location_name for r in rollups], ['Sagada', 'Boracay'])
        self.assertEqual([r.entries_count for r in rollups], [2, 1])

    def test_read_repair_scores_and_persists_once(self):
        persisted = []
        entries = [
            EntrySnapshot(text='Great view. Bad road.', entry_id='e1', location_id='loc-1'),
            EntrySnapshot(text='x', entry_id='e2', location_id='loc-1', sentiment=stored('positive', 100.0, 0.0, 0.0)),
        ]

        rollups = self.aggregator.aggregate(entries, self.locations, persist=lambda e, r: persisted.append((e.entry_id, r)))

        self.assertEqual(len(persisted), 1)
        self.assertEqual(persisted[0][0], 'e1')
        self.assertEqual(persisted[0][1].label, SentimentLabel.NEUTRAL)
        self.assertEqual(rollups[0].overall_positive_percentage, 75.0)

    def test_unscorable_entry_left_out(self):
        entries = [EntrySnapshot(text='...', location_id='loc-1')]
        self.assertEqual(self.aggregator.aggregate(entries, self.locations), [])


class ServiceTestMixin:
    """Shared fixtures for the ORM-backed service tests"""

    def create_fixtures(self):
        self.user = User.objects.create_user(username='traveller', password='testpass123')
        self.other_user = User.objects.create_user(username='other', password='testpass123')

        self.beach = Location.objects.create(
            name='White Beach', place='Boracay',
            description='Powdery sand beach with clear water and sunset sailing'
        )
        self.falls = Location.objects.create(
            name='Kawasan Falls', place='Cebu',
            description='Turquoise waterfall pools for canyoneering and swimming'
        )

        self.journal = Journal.objects.create(title='Summer', journal_date=date(2024, 4, 1), user=self.user)
        self.other_journal = Journal.objects.create(title='Other', journal_date=date(2024, 4, 1), user=self.other_user)

    def add_entry(self, journal, text, location=None, location_name='', sentiment=None):
        entry = Entry(
            journal=journal,
            description=text,
            entry_datetime=timezone.now(),
            location=location,
            location_name=location_name,
        )
        if sentiment is not None:
            entry.apply_sentiment(sentiment)
        entry.save()
        return entry


class RecommendationServiceTestCase(ServiceTestMixin, TestCase):
    """Test cases for RecommendationService"""

    def setUp(self):
        self.create_fixtures()
        self.service = RecommendationService(scorer=make_scorer())

    def test_recommend_all_entries(self):
        self.add_entry(self.journal, 'Great sand and clear water.')
        self.add_entry(self.other_journal, 'Amazing waterfall pools.')
        self.add_entry(self.other_journal, 'Awful swimming pools.')

        recommendations = self.service.recommend()

        self.assertEqual(
            [(r.location_name, r.match_score) for r in recommendations],
            [('White Beach', 3), ('Kawasan Falls', 2)]
        )

    def test_recommend_for_user_uses_only_their_entries(self):
        self.add_entry(self.journal, 'Great sand and clear water.')
        self.add_entry(self.other_journal, 'Amazing waterfall pools.')

        recommendations = self.service.recommend(user=self.user)

        self.assertEqual([r.location_id for r in recommendations], [str(self.beach.id)])

    def test_recommend_for_user_trusts_stored_sentiment(self):
        # Stored as negative even though the text scores positive
        self.add_entry(self.journal, 'Great sand.', sentiment=stored('negative', 0.0, 100.0, 0.0))

        self.assertEqual(self.service.recommend(user=self.user), [])
        self.assertEqual(len(self.service.recommend()), 1)


class LocationSentimentServiceTestCase(ServiceTestMixin, TestCase):
    """Test cases for LocationSentimentService"""

    def setUp(self):
        self.create_fixtures()
        self.service = LocationSentimentService(scorer=make_scorer())

    def test_aggregate_sentiments(self):
        for positive in (80.0, 60.0, 100.0):
            self.add_entry(
                self.journal, 'x', location=self.beach,
                sentiment=stored('positive', positive, 100.0 - positive, 0.0)
            )
        self.add_entry(self.journal, 'Nowhere in particular.')

        rollups = self.service.aggregate_sentiments()

        self.assertEqual(len(rollups), 1)
        self.assertEqual(rollups[0].location_name, 'White Beach')
        self.assertEqual(rollups[0].entries_count, 3)
        self.assertEqual(rollups[0].overall_positive_percentage, 80.0)

    def test_read_repair_persists_missing_sentiment(self):
        entry = self.add_entry(self.journal, 'Great falls. Awful crowd. Great pools.', location=self.falls)
        self.assertIsNone(entry.sentiment)

        self.service.aggregate_sentiments()

        entry.refresh_from_db()
        self.assertEqual(entry.sentiment, 'positive')
        self.assertEqual(entry.positive_percentage, 66.67)

    def test_recompute_and_persist_replaces_table(self):
        LocationSentiment.objects.create(location_key='stale', location_name='Stale', entries_count=9)
        self.add_entry(self.journal, 'x', location=self.beach, sentiment=stored('positive', 100.0, 0.0, 0.0))
        self.add_entry(self.journal, 'x', location_name='Vigan', sentiment=stored('negative', 0.0, 100.0, 0.0))

        summary = self.service.recompute_and_persist()

        self.assertEqual(summary, {'locations_updated': 2})
        self.assertFalse(LocationSentiment.objects.filter(location_key='stale').exists())
        beach_row = LocationSentiment.objects.get(location=self.beach)
        self.assertEqual(beach_row.overall_positive_percentage, 100.0)
        vigan_row = LocationSentiment.objects.get(location_key='name:vigan')
        self.assertIsNone(vigan_row.location)

    def test_recompute_is_idempotent(self):
        self.add_entry(self.journal, 'x', location=self.beach, sentiment=stored('positive', 100.0, 0.0, 0.0))

        self.service.recompute_and_persist()
        self.service.recompute_and_persist()

        self.assertEqual(LocationSentiment.objects.count(), 1)

    def test_failed_write_keeps_previous_rows(self):
        LocationSentiment.objects.create(location_key='previous', location_name='Previous', entries_count=1)
        self.add_entry(self.journal, 'x', location=self.beach, sentiment=stored('positive', 100.0, 0.0, 0.0))

        with patch.object(LocationSentiment.objects, 'bulk_create', side_effect=RuntimeError('disk full')):
            with self.assertRaises(RuntimeError):
                self.service.recompute_and_persist()

        self.assertTrue(LocationSentiment.objects.filter(location_key='previous').exists())

    def test_rollup_lock_taken_before_delete(self):
        LocationSentiment.objects.create(location_key='previous', location_name='Previous', entries_count=1)
        self.add_entry(self.journal, 'x', location=self.beach, sentiment=stored('positive', 100.0, 0.0, 0.0))
        seen = []

        def record_lock():
            seen.append((
                connection.in_atomic_block,
                LocationSentiment.objects.filter(location_key='previous').exists(),
            ))

        with patch.object(LocationSentimentService, 'lock_rollup_table', side_effect=record_lock):
            self.service.recompute_and_persist()

        # Taken once, inside the transaction, while the old rows still exist
        self.assertEqual(seen, [(True, True)])
        self.assertFalse(LocationSentiment.objects.filter(location_key='previous').exists())

    def test_rollup_lock_uses_postgres_advisory_lock(self):
        with patch('recommendations.services.connection') as mock_connection:
            mock_connection.vendor = 'postgresql'
            LocationSentimentService.lock_rollup_table()

        cursor = mock_connection.cursor.return_value.__enter__.return_value
        cursor.execute.assert_called_once_with(
            "SELECT pg_advisory_xact_lock(%s)", [LocationSentimentService.ROLLUP_LOCK_KEY]
        )

    def test_rollup_lock_skipped_on_sqlite(self):
        with patch('recommendations.services.connection') as mock_connection:
            mock_connection.vendor = 'sqlite'
            LocationSentimentService.lock_rollup_table()

        mock_connection.cursor.assert_not_called()

    def test_scheduled_task(self):
        self.add_entry(self.journal, 'x', location=self.beach, sentiment=stored('positive', 100.0, 0.0, 0.0))

        summary = recompute_location_sentiments()

        self.assertEqual(summary, {'locations_updated': 1})
        self.assertEqual(LocationSentiment.objects.count(), 1)


class RecommendationAPITestCase(ServiceTestMixin, APITestCase):
    """Test cases for the recommendation endpoints"""

    def setUp(self):
        self.create_fixtures()
        self.staff = User.objects.create_user(username='staff', password='testpass123', is_staff=True)
        self.add_entry(self.journal, 'I love the sand and clear water.', location=self.beach)

    def test_public_recommendations(self):
        response = self.client.get(reverse('recommendations:recommendations'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['location_name'], 'White Beach')
        self.assertEqual(response.data[0]['location_place'], 'Boracay')
        self.assertEqual(response.data[0]['sentiment'], 'positive')

    def test_my_recommendations_requires_login(self):
        response = self.client.get(reverse('recommendations:my-recommendations'))
        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

        self.client.force_authenticate(user=self.other_user)
        response = self.client.get(reverse('recommendations:my-recommendations'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 0)

    def test_recommendations_error_is_reported(self):
        with patch.object(RecommendationService, 'recommend', side_effect=RuntimeError('db down')):
            response = self.client.get(reverse('recommendations:recommendations'))

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'db down')

    def test_location_sentiments_fresh_and_stored(self):
        response = self.client.get(reverse('recommendations:location-sentiments'), {'fresh': 'true'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['location_name'], 'White Beach')

        response = self.client.get(reverse('recommendations:location-sentiments'))
        self.assertEqual(response.data['count'], 0)

    def test_fresh_location_sentiments_error_is_reported(self):
        with patch.object(LocationSentimentService, 'aggregate_sentiments', side_effect=RuntimeError('db down')):
            response = self.client.get(reverse('recommendations:location-sentiments'), {'fresh': 'true'})

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'db down')

    def test_recompute_staff_only(self):
        url = reverse('recommendations:location-sentiments-recompute')

        self.client.force_authenticate(user=self.user)
        self.assertEqual(self.client.post(url).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.staff)
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['locations_updated'], 1)
        self.assertEqual(LocationSentiment.objects.count(), 1)
