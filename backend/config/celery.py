"""
Celery application for scheduled jobs.

Run a worker and the beat scheduler with:
    celery -A config worker --loglevel=INFO
    celery -A config beat --loglevel=INFO
"""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('djournal')

# All CELERY_* Django settings configure the app
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
