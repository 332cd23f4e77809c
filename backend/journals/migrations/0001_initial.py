# Generated migration for journals app

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('locations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Journal',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(help_text='User defined journal title', max_length=255)),
                ('journal_date', models.DateField(help_text='The date the journal is about')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(blank=True, help_text='Owner of the journal; anonymous journals have no owner', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='journals', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'journals_journal',
                'ordering': ['-journal_date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Entry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.TextField(help_text='Free text body of the entry')),
                ('entry_datetime', models.DateTimeField(help_text='When the entry happened')),
                ('location_name', models.CharField(blank=True, default='', help_text='Free text location name when no catalog location is linked', max_length=255)),
                ('is_displayed', models.BooleanField(default=True, help_text='Whether the entry is shown on the journal map')),
                ('images', models.JSONField(blank=True, default=list, help_text='List of image URLs')),
                ('sentiment', models.CharField(blank=True, choices=[('positive', 'Positive'), ('negative', 'Negative'), ('neutral', 'Neutral')], help_text='Overall sentiment of the description: positive, negative, neutral', max_length=10, null=True)),
                ('positive_percentage', models.FloatField(blank=True, null=True)),
                ('negative_percentage', models.FloatField(blank=True, null=True)),
                ('neutral_percentage', models.FloatField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('journal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='entries', to='journals.journal')),
                ('location', models.ForeignKey(blank=True, help_text='Catalog location the entry was written about', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='entries', to='locations.location')),
            ],
            options={
                'db_table': 'journals_entry',
                'ordering': ['-entry_datetime'],
                'verbose_name_plural': 'entries',
            },
        ),
    ]
