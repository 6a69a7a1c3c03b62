"""
Admin interface for accounts, the audit trail and site settings.
"""

from django.contrib import admin

from .models import AccountProfile, ActivityLog, Setting


@admin.register(AccountProfile)
class AccountProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'role', 'created_at']
    list_filter = ['role']
    search_fields = ['user__username', 'user__email']
    raw_id_fields = ['user']


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    """
    Audit entries are append-only; the admin can only browse them.
    """

    list_display = ['created_at', 'user', 'action', 'target_type', 'target_id']
    list_filter = ['action', 'target_type', ('created_at', admin.DateFieldListFilter)]
    search_fields = ['description', 'user__username', 'target_id']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'value', 'updated_at']
    search_fields = ['key']

    def save_model(self, request, obj, form, change):
        # Goes through Setting.set so the cached value is invalidated
        Setting.set(obj.key, obj.value)
