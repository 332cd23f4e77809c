from datetime import date, timedelta

from django.test import TestCase
from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from analysis.exceptions import EmptyTextError
from analysis.lexicon import PolarityLexicon
from analysis.sentiment import SentimentScorer, SentimentLabel
from locations.models import Location
from .models import Journal, Entry
from .services import EntryService, parse_image_list

User = get_user_model()


def make_scorer():
    return SentimentScorer(lexicon=PolarityLexicon(vocabulary={'love': 3, 'great': 3, 'bad': -3}))


class ParseImageListTest(TestCase):
    """Test cases for image list payload parsing"""

    def test_list_passthrough(self):
        self.assertEqual(parse_image_list(['/uploads/a.png', '']), ['/uploads/a.png'])

    def test_json_string(self):
        self.assertEqual(parse_image_list('["/uploads/a.png", "/uploads/b.png"]'), ['/uploads/a.png', '/uploads/b.png'])

    def test_missing(self):
        self.assertEqual(parse_image_list(None), [])
        self.assertEqual(parse_image_list(''), [])

    def test_malformed_payload_falls_back_to_empty(self):
        with self.assertLogs('journals.services', level='ERROR'):
            self.assertEqual(parse_image_list('[broken'), [])
        with self.assertLogs('journals.services', level='ERROR'):
            self.assertEqual(parse_image_list('{"a": 1}'), [])


class EntryModelTest(TestCase):
    """Test cases for Entry model"""

    def setUp(self):
        self.journal = Journal.objects.create(title='Palawan', journal_date=date(2024, 5, 1))

    def test_unscored_entry_has_no_sentiment(self):
        entry = Entry.objects.create(
            journal=self.journal,
            description='Island hopping',
            entry_datetime=timezone.now(),
        )
        self.assertIsNone(entry.get_sentiment())

    def test_apply_sentiment(self):
        entry = Entry(journal=self.journal, description='Great lagoon.', entry_datetime=timezone.now())
        entry.apply_sentiment(make_scorer().score_text(entry.description))
        entry.save()

        entry.refresh_from_db()
        self.assertEqual(entry.sentiment, Entry.Sentiment.POSITIVE)
        self.assertEqual(entry.get_sentiment().label, SentimentLabel.POSITIVE)
        self.assertEqual(entry.positive_percentage, 100.0)


class EntryServiceTest(TestCase):
    """Test cases for EntryService"""

    def setUp(self):
        self.journal = Journal.objects.create(title='Ilocos', journal_date=date(2024, 6, 1))
        self.service = EntryService(scorer=make_scorer())

    def test_create_entry_scores_description(self):
        entry = self.service.create_entry(
            self.journal,
            {'description': 'Great food. Bad traffic. Great people.', 'entry_datetime': timezone.now()},
            images=['/uploads/a.png'],
        )

        self.assertEqual(entry.sentiment, 'positive')
        self.assertEqual(entry.positive_percentage, 66.67)
        self.assertEqual(entry.negative_percentage, 33.33)
        self.assertEqual(entry.neutral_percentage, 0.0)
        self.assertEqual(entry.images, ['/uploads/a.png'])

    def test_create_entry_empty_text(self):
        with self.assertRaises(EmptyTextError):
            self.service.create_entry(self.journal, {'description': '...', 'entry_datetime': timezone.now()})
        self.assertEqual(Entry.objects.count(), 0)

    def test_update_entry_rescores_and_merges_images(self):
        entry = self.service.create_entry(
            self.journal,
            {'description': 'Great food.', 'entry_datetime': timezone.now()},
            images=['/uploads/old.png', '/uploads/drop.png'],
        )

        entry = self.service.update_entry(
            entry,
            {'description': 'Bad food.'},
            existing_images='["/uploads/old.png"]',
            new_images=['/uploads/new.png'],
        )

        entry.refresh_from_db()
        self.assertEqual(entry.sentiment, 'negative')
        self.assertEqual(entry.images, ['/uploads/old.png', '/uploads/new.png'])

    def test_update_entry_keeps_images_when_not_given(self):
        entry = self.service.create_entry(
            self.journal,
            {'description': 'Great food.', 'entry_datetime': timezone.now()},
            images=['/uploads/old.png'],
        )
        entry = self.service.update_entry(entry, {'location_name': 'Vigan'})

        self.assertEqual(entry.images, ['/uploads/old.png'])
        self.assertEqual(entry.location_name, 'Vigan')
        self.assertEqual(entry.sentiment, 'positive')

    def test_update_entry_normalizes_encoded_images(self):
        entry = Entry.objects.create(
            journal=self.journal,
            description='Great food.',
            entry_datetime=timezone.now(),
            images='["/uploads/a.png"]',
        )

        entry = self.service.update_entry(entry, {'description': 'Bad food.'})

        entry.refresh_from_db()
        self.assertEqual(entry.images, ['/uploads/a.png'])


class JournalAPITest(APITestCase):
    """Test cases for the journal and entry endpoints"""

    def setUp(self):
        self.user = User.objects.create_user(username='writer', password='testpass')
        self.journal = Journal.objects.create(title='Cebu', journal_date=date(2024, 7, 1), user=self.user)
        self.location = Location.objects.create(name='Kawasan Falls', place='Cebu', description='Turquoise waterfall')
        self.entries_url = reverse('journals:entry-list')

    def test_create_journal_requires_title_and_date(self):
        response = self.client.post(reverse('journals:journal-list'), {'title': 'Bohol'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            reverse('journals:journal-list'),
            {'title': 'Bohol', 'journal_date': '2024-08-01'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['user'])

    def test_create_journal_sets_owner(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(
            reverse('journals:journal-list'),
            {'title': 'Siargao', 'journal_date': '2024-09-01'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user'], self.user.pk)

    def test_create_entry_returns_sentiment(self):
        data = {
            'journal': str(self.journal.id),
            'description': 'I love this waterfall.',
            'entry_datetime': timezone.now().isoformat(),
            'location': str(self.location.id),
            'images': ['/uploads/falls.jpg'],
        }
        response = self.client.post(self.entries_url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sentiment'], 'positive')
        self.assertEqual(response.data['positive_percentage'], 100.0)
        self.assertEqual(response.data['images'], ['/uploads/falls.jpg'])
        self.assertEqual(Entry.objects.get().location, self.location)

    def test_create_entry_without_sentences(self):
        data = {
            'journal': str(self.journal.id),
            'description': '?!',
            'entry_datetime': timezone.now().isoformat(),
        }
        response = self.client.post(self.entries_url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_update_entry(self):
        entry = EntryService().create_entry(
            self.journal,
            {'description': 'We walked around.', 'entry_datetime': timezone.now()},
        )
        url = reverse('journals:entry-detail', args=[entry.id])

        response = self.client.patch(
            url,
            {'description': 'This was a terrible, awful day.', 'existing_images': 'not json'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sentiment'], 'negative')
        self.assertEqual(response.data['images'], [])

    def test_journal_entries(self):
        EntryService().create_entry(
            self.journal,
            {'description': 'I love this place.', 'entry_datetime': timezone.now()},
        )
        EntryService().create_entry(
            self.journal,
            {'description': 'We walked around.', 'entry_datetime': timezone.now() - timedelta(hours=1)},
        )

        response = self.client.get(reverse('journals:journal-entries', args=[self.journal.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_analyze_text(self):
        response = self.client.post(
            reverse('journals:entry-analyze'),
            {'text': 'I love this beach. It was terrible.'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sentiment'], 'neutral')
        self.assertEqual(response.data['positive_percentage'], 50.0)
        self.assertEqual(response.data['negative_percentage'], 50.0)
        self.assertEqual(len(response.data['sentences']), 2)

    def test_entry_with_encoded_images_reads_as_list(self):
        entry = Entry.objects.create(
            journal=self.journal,
            description='Island hopping',
            entry_datetime=timezone.now(),
            images='["/uploads/a.png", "/uploads/b.png"]',
        )

        response = self.client.get(reverse('journals:entry-detail', args=[entry.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['images'], ['/uploads/a.png', '/uploads/b.png'])

    def test_update_entry_accepts_existing_images_list(self):
        entry = EntryService().create_entry(
            self.journal,
            {'description': 'I love this place.', 'entry_datetime': timezone.now()},
            images=['/uploads/keep.png', '/uploads/drop.png'],
        )

        response = self.client.patch(
            reverse('journals:entry-detail', args=[entry.id]),
            {'existing_images': ['/uploads/keep.png'], 'images': ['/uploads/new.png']},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['images'], ['/uploads/keep.png', '/uploads/new.png'])
        self.assertNotIn('existing_images', response.data)

    def test_existing_images_rejects_other_types(self):
        entry = EntryService().create_entry(
            self.journal,
            {'description': 'I love this place.', 'entry_datetime': timezone.now()},
        )

        response = self.client.patch(
            reverse('journals:entry-detail', args=[entry.id]),
            {'existing_images': {'a': 1}},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
