"""
URL routing for recommendations app.
"""
from django.urls import path
from recommendations.views import (
    RecommendationsView,
    MyRecommendationsView,
    LocationSentimentView,
    RecomputeLocationSentimentView,
)

app_name = 'recommendations'

urlpatterns = [
    path('', RecommendationsView.as_view(), name='recommendations'),
    path('mine/', MyRecommendationsView.as_view(), name='my-recommendations'),
    path('location-sentiments/', LocationSentimentView.as_view(), name='location-sentiments'),
    path(
        'location-sentiments/recompute/',
        RecomputeLocationSentimentView.as_view(),
        name='location-sentiments-recompute'
    ),
]
