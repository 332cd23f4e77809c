# Generated migration for recommendations app

from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='LocationSentiment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('location_key', models.CharField(help_text="Location id, or 'name:<lower-cased name>' for free text locations", max_length=300, unique=True)),
                ('location_name', models.CharField(max_length=255)),
                ('entries_count', models.PositiveIntegerField(default=0)),
                ('overall_positive_percentage', models.FloatField(default=0.0)),
                ('overall_negative_percentage', models.FloatField(default=0.0)),
                ('overall_neutral_percentage', models.FloatField(default=0.0)),
                ('computed_at', models.DateTimeField(auto_now_add=True)),
                ('location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='sentiment_rollups', to='locations.location')),
            ],
            options={
                'db_table': 'recommendations_location_sentiment',
                'ordering': ['-entries_count', 'location_name'],
            },
        ),
    ]
