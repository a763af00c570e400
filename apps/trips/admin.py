# ==========================================
# apps/trips/admin.py
# ==========================================

from django.contrib import admin
from apps.trips.models import Trip, TripParticipant


class TripParticipantInline(admin.TabularInline):
    """Inline admin for trip participants."""
    model = TripParticipant
    extra = 0
    fields = ['name', 'user', 'kind', 'role', 'joined_at']
    readonly_fields = ['joined_at']


@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    """Admin interface for Trips."""
    
    list_display = [
        'name',
        'destination',
        'start_date',
        'end_date',
        'default_currency',
        'participant_count',
        'created_by',
        'created_at'
    ]
    list_filter = ['default_currency', 'created_at']
    search_fields = ['name', 'destination', 'created_by__email']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [TripParticipantInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    
    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'destination', 'created_by')
        }),
        ('Dates & Currency', {
            'fields': ('start_date', 'end_date', 'default_currency')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
    
    def participant_count(self, obj):
        """Show number of participants."""
        return obj.participants.count()
    participant_count.short_description = 'Participants'
