"""
URL routing for journals app.
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import JournalViewSet, EntryViewSet

router = SimpleRouter()
# Entries first so 'entries/' is not captured as a journal id
router.register(r'entries', EntryViewSet, basename='entry')
router.register(r'', JournalViewSet, basename='journal')

app_name = 'journals'

urlpatterns = [
    path('', include(router.urls)),
]
