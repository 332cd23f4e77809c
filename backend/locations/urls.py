"""
URL routing for locations app.
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import LocationViewSet

router = SimpleRouter()
# Registered at the empty prefix, so no DefaultRouter API root view here
router.register(r'', LocationViewSet, basename='location')

app_name = 'locations'

urlpatterns = [
    path('', include(router.urls)),
]
