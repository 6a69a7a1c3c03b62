"""
Admin interface for Article management.

Status is shown but not editable here; review happens through the API
moderation actions so every transition is audited.
"""

from django.contrib import admin
from django.utils.html import format_html
from .models import Article


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    """
    Admin interface for Article model.
    """

    STATUS_COLORS = {
        'draft': '#6c757d',
        'pending': '#ffc107',
        'approved': '#28a745',
        'rejected': '#dc3545',
    }

    list_display = [
        'title_short',
        'business',
        'status_badge',
        'approved_by',
        'published_at',
        'created_at',
    ]

    list_filter = [
        'status',
        ('published_at', admin.DateFieldListFilter),
    ]

    search_fields = [
        'title',
        'business__name',
        'content',
    ]

    readonly_fields = [
        'id',
        'status',
        'rejection_notes',
        'approved_by',
        'approved_at',
        'published_at',
        'created_at',
        'updated_at',
    ]

    raw_id_fields = ['business']

    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'business', 'title', 'slug', 'excerpt', 'content'),
        }),
        ('SEO', {
            'fields': ('seo_title', 'seo_description'),
            'classes': ('collapse',),
        }),
        ('Moderation', {
            'fields': ('status', 'rejection_notes', 'approved_by', 'approved_at', 'published_at'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def title_short(self, obj):
        """Display shortened title."""
        if len(obj.title) > 60:
            return obj.title[:60] + '...'
        return obj.title
    title_short.short_description = 'Title'

    def status_badge(self, obj):
        color = self.STATUS_COLORS.get(obj.status, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px;">{}</span>',
            color,
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'
