"""
API views for recommendations and location sentiment rollups.
"""
import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated

from recommendations.models import LocationSentiment
from recommendations.serializers import (
    RecommendationSerializer,
    LocationSentimentRollupSerializer,
    LocationSentimentSerializer,
)
from recommendations.services import RecommendationService, LocationSentimentService

logger = logging.getLogger(__name__)


class RecommendationsView(APIView):
    """
    GET /api/recommendations/
    Locations recommended from every positive journal entry.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        try:
            recommendations = RecommendationService().recommend()
        except Exception as e:
            logger.exception("Error fetching recommendations")
            return Response(
                {'message': 'Error fetching recommendations', 'error': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        serializer = RecommendationSerializer([r.to_dict() for r in recommendations], many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)


class MyRecommendationsView(APIView):
    """
    GET /api/recommendations/mine/
    Locations recommended from the authenticated user's own entries.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            recommendations = RecommendationService().recommend(user=request.user)
        except Exception as e:
            logger.exception(f"Error fetching recommendations for user {request.user.pk}")
            return Response(
                {'message': 'Error fetching recommendations', 'error': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        serializer = RecommendationSerializer([r.to_dict() for r in recommendations], many=True)
        return Response({
            'count': len(recommendations),
            'results': serializer.data,
        })


class LocationSentimentView(APIView):
    """
    GET /api/recommendations/location-sentiments/
    Stored per-location sentiment rollup from the last run.

    Query parameters:
    - fresh: 'true' to compute the rollup now instead of reading the stored one
    """
    permission_classes = [AllowAny]

    def get(self, request):
        if request.query_params.get('fresh') == 'true':
            try:
                rollups = LocationSentimentService().aggregate_sentiments()
            except Exception as e:
                logger.exception("Error computing location sentiments")
                return Response(
                    {'message': 'Error computing location sentiments', 'error': str(e)},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR
                )
            serializer = LocationSentimentRollupSerializer([r.to_dict() for r in rollups], many=True)
        else:
            serializer = LocationSentimentSerializer(LocationSentiment.objects.all(), many=True)

        return Response({
            'count': len(serializer.data),
            'results': serializer.data,
        })


class RecomputeLocationSentimentView(APIView):
    """
    POST /api/recommendations/location-sentiments/recompute/
    Recompute and store the rollup now. Admin/Staff only.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        if not request.user.is_staff:
            return Response(
                {'error': 'Permission denied'},
                status=status.HTTP_403_FORBIDDEN
            )

        try:
            summary = LocationSentimentService().recompute_and_persist()
        except Exception as e:
            logger.exception("Location sentiment recompute failed")
            return Response(
                {'error': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({
            'status': 'success',
            'locations_updated': summary['locations_updated'],
        })
