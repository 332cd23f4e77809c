# Generated migration for locations app

from django.db import migrations, models
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='The name of the place', max_length=255)),
                ('place', models.CharField(blank=True, default='', help_text='Human readable area the location belongs to (city, region)', max_length=255)),
                ('description', models.TextField(blank=True, default='', help_text='Free text description matched against journal entry keywords')),
                ('keywords', models.JSONField(blank=True, default=list, help_text='Keywords extracted from the description, refreshed on save')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'locations_location',
                'ordering': ['name', 'place'],
            },
        ),
    ]
