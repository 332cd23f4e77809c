from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from django.contrib.auth import get_user_model
from .models import Location
from .services import LocationService

User = get_user_model()


class LocationModelTests(TestCase):
    def setUp(self):
        self.location = Location.objects.create(
            name="Boracay",
            place="Aklan",
            description="White sand beach with calm water and sunset sailing."
        )

    def test_create_location(self):
        """Test that a Location can be created successfully."""
        self.assertEqual(Location.objects.count(), 1)
        self.assertEqual(str(self.location), "Boracay (Aklan)")

    def test_keywords_cached_on_save(self):
        """Saving a location extracts keywords from its description."""
        self.assertEqual(
            self.location.keywords,
            ['white', 'sand', 'beach', 'calm', 'water', 'sunset', 'sailing']
        )

    def test_keywords_refreshed_when_description_changes(self):
        self.location.description = "Mountain trails and waterfalls"
        self.location.save(update_fields=['description'])

        self.location.refresh_from_db()
        self.assertEqual(self.location.keywords, ['mountain', 'trails', 'waterfalls'])


class LocationServiceTests(TestCase):
    def setUp(self):
        self.location = Location.objects.create(
            name="Sagada",
            place="Mountain Province",
            description="Hanging coffins, caves and cool mountain air."
        )

    def test_parse_keywords_list(self):
        self.assertEqual(LocationService.parse_keywords(['Cave', 'air']), ['cave', 'air'])

    def test_parse_keywords_json_string(self):
        self.assertEqual(LocationService.parse_keywords('["cave", "air"]'), ['cave', 'air'])

    def test_parse_keywords_malformed(self):
        """Malformed caches are reported as unusable instead of raising."""
        with self.assertLogs('locations.services', level='WARNING'):
            self.assertIsNone(LocationService.parse_keywords('[not json'))
        with self.assertLogs('locations.services', level='WARNING'):
            self.assertIsNone(LocationService.parse_keywords({'cave': 1}))

    def test_get_keywords_falls_back_to_description(self):
        # Simulate a legacy row holding an unparseable cache
        Location.objects.filter(pk=self.location.pk).update(keywords='oops{')
        self.location.refresh_from_db()

        keywords = LocationService.get_keywords(self.location)
        self.assertEqual(keywords, ['hanging', 'coffins', 'caves', 'cool', 'mountain', 'air'])

    def test_refresh_keywords(self):
        Location.objects.filter(pk=self.location.pk).update(keywords=[])

        updated = LocationService.refresh_keywords()

        self.assertEqual(updated, 1)
        self.location.refresh_from_db()
        self.assertIn('caves', self.location.keywords)


class LocationAPITests(APITestCase):
    def setUp(self):
        self.staff = User.objects.create_user(username='staff', password='password', is_staff=True)
        self.user = User.objects.create_user(username='user', password='password')
        self.location = Location.objects.create(
            name="El Nido",
            place="Palawan",
            description="Lagoons, limestone cliffs and island hopping."
        )
        self.list_url = reverse('locations:location-list')

    def test_list_locations(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['name'], "El Nido")

    def test_filter_by_place(self):
        Location.objects.create(name="Vigan", place="Ilocos Sur", description="Heritage town")
        response = self.client.get(self.list_url, {'place': 'palawan'})
        self.assertEqual([item['name'] for item in response.data], ["El Nido"])

    def test_create_location_ignores_keywords_input(self):
        data = {
            'name': 'Batanes',
            'place': 'Batanes',
            'description': 'Rolling hills and stone houses',
            'keywords': ['ignored'],
        }
        response = self.client.post(self.list_url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['keywords'], ['rolling', 'hills', 'stone', 'houses'])

    def test_create_location_blank_name(self):
        response = self.client.post(self.list_url, {'name': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh_keywords_staff_only(self):
        url = reverse('locations:location-refresh-keywords')

        self.client.force_authenticate(user=self.user)
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.staff)
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'success')
