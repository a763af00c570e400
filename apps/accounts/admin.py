# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, UserStatus
from .services import change_user_status, InvalidStatusChangeError


STATUS_COLORS = {
    UserStatus.ACTIVE: '#6B8E5E',
    UserStatus.DISABLED: '#E5C49A',
    UserStatus.DELETED: '#B85C5C',
}


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for User model.

    Status changes made through the bulk actions go through the account
    service so pending trip proposals are re-evaluated.
    """

    list_display = [
        'email',
        'display_name',
        'status_badge',
        'is_staff',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'status',
        'is_staff',
        'is_superuser',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Status', {
            'fields': ('status', 'deleted_at'),
        }),
        ('Permissions', {
            'fields': ('is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'status',
        'created_at',
        'last_login',
        'deleted_at',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def status_badge(self, obj):
        """Display account status as colored badge."""
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            STATUS_COLORS.get(obj.status, '#ccc'),
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    actions = [
        'disable_users',
        'delete_users',
    ]

    def _change_status(self, request, queryset, new_status):
        changed = 0
        recalculated = 0
        skipped = 0
        for user in queryset.filter(is_superuser=False):
            try:
                _, items = change_user_status(
                    target_user_id=user.id,
                    new_status=new_status,
                    changed_by=request.user,
                )
            except InvalidStatusChangeError:
                skipped += 1
                continue
            changed += 1
            recalculated += items

        msg = f'Updated {changed} user(s); {recalculated} proposal(s) changed status.'
        if skipped:
            msg += f' Skipped {skipped} user(s).'
        self.message_user(request, msg)

    @admin.action(description='Disable selected users')
    def disable_users(self, request, queryset):
        self._change_status(request, queryset, UserStatus.DISABLED)

    @admin.action(description='Delete and anonymize selected users (IRREVERSIBLE)')
    def delete_users(self, request, queryset):
        self._change_status(request, queryset, UserStatus.DELETED)
