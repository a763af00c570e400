# ==========================================
# apps/proposals/admin.py
# ==========================================

from django.contrib import admin
from apps.proposals.models import ProposedItem, Vote, ItemCheck


class VoteInline(admin.TabularInline):
    """Votes are read-only here."""
    model = Vote
    extra = 0
    fields = ['user', 'value', 'updated_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ProposedItem)
class ProposedItemAdmin(admin.ModelAdmin):
    """Admin interface for proposed items."""
    
    list_display = [
        'title',
        'trip',
        'category',
        'status',
        'created_by',
        'created_at',
    ]
    list_filter = ['status', 'category', 'created_at']
    search_fields = ['title', 'trip__name', 'created_by__email']
    readonly_fields = ['status', 'created_at', 'updated_at']
    inlines = [VoteInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    
    fieldsets = (
        ('Basic Information', {
            'fields': ('trip', 'title', 'category', 'status', 'created_by')
        }),
        ('Details', {
            'fields': ('description', 'location', 'external_url', 'image_url')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(ItemCheck)
class ItemCheckAdmin(admin.ModelAdmin):
    list_display = ['item', 'user', 'photo_url', 'created_at']
    search_fields = ['item__title', 'user__email']
    ordering = ['-created_at']
