"""
Django admin configuration for journals models.
"""
from django.contrib import admin
from .models import Journal, Entry


class EntryInline(admin.TabularInline):
    model = Entry
    extra = 0
    fields = ['entry_datetime', 'location', 'location_name', 'sentiment']
    readonly_fields = ['sentiment']


@admin.register(Journal)
class JournalAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'journal_date', 'user', 'created_at']
    list_filter = ['journal_date', 'created_at']
    search_fields = ['title', 'user__username']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [EntryInline]


@admin.register(Entry)
class EntryAdmin(admin.ModelAdmin):
    list_display = ['id', 'journal', 'entry_datetime', 'location', 'location_name', 'sentiment']
    list_filter = ['sentiment', 'is_displayed', 'entry_datetime']
    search_fields = ['description', 'location_name', 'location__name', 'journal__title']
    readonly_fields = [
        'id', 'sentiment', 'positive_percentage', 'negative_percentage',
        'neutral_percentage', 'created_at', 'updated_at',
    ]
