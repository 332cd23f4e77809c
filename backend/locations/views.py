"""
API views for locations app endpoints.
"""
import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from .models import Location
from .serializers import LocationSerializer, LocationListSerializer
from .services import LocationService

logger = logging.getLogger(__name__)


class LocationViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Location catalog CRUD operations.
    """
    queryset = Location.objects.all()
    serializer_class = LocationSerializer
    permission_classes = [AllowAny]

    def get_serializer_class(self):
        """Use lightweight serializer for list views"""
        if self.action == 'list':
            return LocationListSerializer
        return LocationSerializer

    def get_queryset(self):
        """
        Optional query parameters:
        - place: str (case-insensitive exact match)
        - search: str (substring of name)
        """
        queryset = super().get_queryset()
        place = self.request.query_params.get('place')
        if place:
            queryset = queryset.filter(place__iexact=place)
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset

    @action(detail=False, methods=['post'], permission_classes=[IsAuthenticated])
    def refresh_keywords(self, request):
        """
        Rebuild the keyword cache for the whole catalog.
        Admin/Staff only.
        """
        if not request.user.is_staff:
            return Response(
                {'error': 'Permission denied'},
                status=status.HTTP_403_FORBIDDEN
            )

        try:
            updated = LocationService.refresh_keywords()
        except Exception as e:
            logger.exception("Keyword refresh failed")
            return Response(
                {'error': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({
            'status': 'success',
            'locations_updated': updated,
        })
