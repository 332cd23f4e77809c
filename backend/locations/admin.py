from django.contrib import admin
from .models import Location


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    """
    Admin interface for the location catalog.
    The keyword cache is derived from the description and shown read-only.
    """
    list_display = ['name', 'place', 'created_at']
    list_filter = ['place', 'created_at']
    search_fields = ['name', 'place', 'description']
    readonly_fields = ['id', 'keywords', 'created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'name', 'place')
        }),
        ('Description', {
            'fields': ('description', 'keywords')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
