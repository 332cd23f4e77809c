"""
API views for journals and journal entries.
"""
import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from analysis.exceptions import EmptyTextError
from .models import Journal, Entry
from .serializers import (
    JournalSerializer,
    EntrySerializer,
    AnalyzeTextSerializer,
    SentimentResultSerializer,
)
from .services import EntryService

logger = logging.getLogger(__name__)


class JournalViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Journal CRUD operations.
    """
    queryset = Journal.objects.all()
    serializer_class = JournalSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        """
        Query parameters:
        - mine: 'true' to list only the authenticated user's journals
        """
        queryset = super().get_queryset()
        if self.request.query_params.get('mine') == 'true':
            if not self.request.user.is_authenticated:
                return queryset.none()
            queryset = queryset.filter(user=self.request.user)
        return queryset

    def perform_create(self, serializer):
        user = self.request.user if self.request.user.is_authenticated else None
        journal = serializer.save(user=user)
        logger.info(f"Created journal {journal.id}")

    @action(detail=True, methods=['get'])
    def entries(self, request, pk=None):
        """List the entries of one journal."""
        journal = self.get_object()
        serializer = EntrySerializer(journal.entries.all(), many=True)
        return Response(serializer.data)


class EntryViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Entry CRUD operations.
    Writes go through EntryService so the sentiment fields always match the description.
    """
    queryset = Entry.objects.select_related('journal', 'location').all()
    serializer_class = EntrySerializer
    permission_classes = [AllowAny]
    entry_service = EntryService()

    def get_queryset(self):
        """
        Query parameters:
        - journal: UUID of a journal to filter by
        - sentiment: positive | negative | neutral
        """
        queryset = super().get_queryset()
        journal_id = self.request.query_params.get('journal')
        if journal_id:
            queryset = queryset.filter(journal_id=journal_id)
        sentiment = self.request.query_params.get('sentiment')
        if sentiment:
            queryset = queryset.filter(sentiment=sentiment)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        data.pop('existing_images', None)
        images = data.pop('images', [])
        journal = data.pop('journal')

        try:
            entry = self.entry_service.create_entry(journal, data, images=images)
        except EmptyTextError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(entry).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        entry = self.get_object()
        serializer = self.get_serializer(entry, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        existing_images = data.pop('existing_images', None)
        new_images = data.pop('images', None)

        try:
            entry = self.entry_service.update_entry(
                entry,
                data,
                existing_images=existing_images,
                new_images=new_images,
            )
        except EmptyTextError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(entry).data)

    @action(detail=False, methods=['post'])
    def analyze(self, request):
        """
        Score arbitrary text without saving it.

        Body parameters:
        - text: str (required)
        """
        input_serializer = AnalyzeTextSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            result = self.entry_service.analyze(input_serializer.validated_data['text'])
        except EmptyTextError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        serializer = SentimentResultSerializer(result.to_dict(include_sentences=True))
        return Response(serializer.data)
