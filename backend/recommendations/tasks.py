"""
Scheduled jobs for the recommendations app.
"""
import logging

from celery import shared_task

from recommendations.services import LocationSentimentService

logger = logging.getLogger(__name__)


@shared_task(name='recommendations.recompute_location_sentiments')
def recompute_location_sentiments():
    """
    Daily job: rebuild the per-location sentiment rollup from all entries.

    Returns:
        dict: {'locations_updated': int}
    """
    summary = LocationSentimentService().recompute_and_persist()
    logger.info(f"Scheduled location sentiment run updated {summary['locations_updated']} locations")
    return summary
