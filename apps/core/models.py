"""
Core models for the UMKM Directory project.
Base classes, account roles, the audit trail and the settings store.
"""

import json
import uuid
from enum import Enum

from django.conf import settings
from django.core.cache import cache
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone
from django.utils.text import slugify


class BaseModel(models.Model):
    """
    Abstract base model with common fields for all directory models.
    Provides UUID primary key and timestamp tracking.
    """
    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name='ID',
        help_text='Unique identifier (UUID)'
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        verbose_name='Created At',
        help_text='Timestamp when record was created'
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated At',
        help_text='Timestamp when record was last updated'
    )

    class Meta:
        abstract = True
        ordering = ['-created_at']

    def __str__(self):
        """
        Default string representation.
        Should be overridden in child classes.
        """
        return f"{self.__class__.__name__} ({self.id})"


class UserRole(str, Enum):
    """Account roles. Every user holds exactly one."""
    VILLAGE_ADMIN = 'village_admin'
    BUSINESS_OWNER = 'business_owner'

    @classmethod
    def from_string(cls, value: str) -> 'UserRole':
        """Convert string to UserRole."""
        for role in cls:
            if role.value == value:
                return role
        raise ValueError(f"Unknown role: {value}")

    @classmethod
    def choices(cls):
        return [
            (cls.VILLAGE_ADMIN.value, 'Village Admin'),
            (cls.BUSINESS_OWNER.value, 'Business Owner'),
        ]


class AccountProfile(BaseModel):
    """
    Role holder for a user account.
    Linked 1:1 with Django User model.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='account_profile',
        verbose_name='User',
        help_text='The associated Django user account'
    )

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices(),
        default=UserRole.BUSINESS_OWNER.value,
        db_index=True,
        verbose_name='Role',
        help_text='village_admin manages everything, business_owner manages one business'
    )

    class Meta:
        db_table = 'account_profiles'
        verbose_name = 'Account Profile'
        verbose_name_plural = 'Account Profiles'

    def __str__(self):
        return f"{self.user.username} ({self.role})"

    @property
    def is_village_admin(self):
        return self.role == UserRole.VILLAGE_ADMIN.value

    @property
    def is_business_owner(self):
        return self.role == UserRole.BUSINESS_OWNER.value


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_account_profile(sender, instance, created, **kwargs):
    """Auto-create AccountProfile when a new User is created."""
    if created:
        role = UserRole.VILLAGE_ADMIN if instance.is_superuser else UserRole.BUSINESS_OWNER
        AccountProfile.objects.create(user=instance, role=role.value)


# =============================================================================
# Audit Trail
# =============================================================================

class ImmutableRecordError(Exception):
    """Raised when code tries to change or remove an audit entry."""
    pass


class ActivityLogQuerySet(models.QuerySet):
    """Append-only queryset: bulk update and delete are refused."""

    def update(self, **kwargs):
        raise ImmutableRecordError("Activity log entries cannot be updated")

    def delete(self):
        raise ImmutableRecordError("Activity log entries cannot be deleted")


class ActivityLog(models.Model):
    """
    Append-only audit entry for a user action.

    Written by apps.core.audit.AuditTrail inside the same transaction as the
    change it records.
    """

    ACTION_LOGIN = 'login'
    ACTION_LOGOUT = 'logout'
    ACTION_CREATE = 'create'
    ACTION_UPDATE = 'update'
    ACTION_DELETE = 'delete'
    ACTION_SUBMIT = 'submit'
    ACTION_APPROVE = 'approve'
    ACTION_REJECT = 'reject'

    ACTION_CHOICES = [
        (ACTION_LOGIN, 'Login'),
        (ACTION_LOGOUT, 'Logout'),
        (ACTION_CREATE, 'Create'),
        (ACTION_UPDATE, 'Update'),
        (ACTION_DELETE, 'Delete'),
        (ACTION_SUBMIT, 'Submit for review'),
        (ACTION_APPROVE, 'Approve'),
        (ACTION_REJECT, 'Reject'),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name='ID'
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='activity_logs',
        verbose_name='User',
        help_text='Who performed the action'
    )

    action = models.CharField(
        max_length=20,
        choices=ACTION_CHOICES,
        db_index=True,
        verbose_name='Action'
    )

    target_type = models.CharField(
        max_length=50,
        db_index=True,
        verbose_name='Target Type',
        help_text='e.g. article, business, category, user'
    )

    target_id = models.CharField(
        max_length=64,
        verbose_name='Target ID'
    )

    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        db_index=True,
        verbose_name='Created At'
    )

    objects = ActivityLogQuerySet.as_manager()

    class Meta:
        db_table = 'activity_logs'
        verbose_name = 'Activity Log'
        verbose_name_plural = 'Activity Logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['target_type', 'target_id'], name='activity_log_target_idx'),
            models.Index(fields=['user', 'created_at'], name='activity_log_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} {self.action} {self.target_type}:{self.target_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Activity log entries cannot be updated")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Activity log entries cannot be deleted")


# =============================================================================
# Settings Store
# =============================================================================

class Setting(models.Model):
    """
    Key/value site settings (branding, map defaults).

    Reads are served from the cache; writes invalidate the cached key.
    """

    CACHE_PREFIX = 'setting:'

    key = models.CharField(
        max_length=100,
        primary_key=True,
        verbose_name='Key'
    )

    value = models.TextField(
        blank=True,
        verbose_name='Value'
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated At'
    )

    class Meta:
        db_table = 'settings'
        verbose_name = 'Setting'
        verbose_name_plural = 'Settings'
        ordering = ['key']

    def __str__(self):
        return self.key

    @classmethod
    def _cache_key(cls, key):
        return f"{cls.CACHE_PREFIX}{key}"

    @classmethod
    def get(cls, key, default=None):
        """Get a setting value, or default if it was never set."""
        cached = cache.get(cls._cache_key(key))
        if cached is not None:
            return cached

        setting = cls.objects.filter(key=key).first()
        if setting is None:
            return default

        cache.set(cls._cache_key(key), setting.value, settings.SETTINGS_CACHE_TTL)
        return setting.value

    @classmethod
    def set(cls, key, value):
        """Create or overwrite a setting."""
        setting, _ = cls.objects.update_or_create(
            key=key,
            defaults={'value': '' if value is None else str(value)},
        )
        cache.delete(cls._cache_key(key))
        return setting

    @classmethod
    def get_many(cls, keys):
        """Get several settings at once; missing keys map to None."""
        stored = dict(cls.objects.filter(key__in=keys).values_list('key', 'value'))
        return {key: stored.get(key) for key in keys}

    @classmethod
    def set_many(cls, values):
        for key, value in values.items():
            cls.set(key, value)

    @classmethod
    def get_json(cls, key, default=None):
        """Get a JSON-encoded setting, or default if missing or malformed."""
        value = cls.get(key)
        if value is None:
            return default
        try:
            return json.loads(value)
        except (TypeError, ValueError):
            return default

    @classmethod
    def set_json(cls, key, value):
        return cls.set(key, json.dumps(value))


def unique_slug(model, value, instance=None, max_length=255, queryset=None):
    """
    Slugify value and append -1, -2... until no other row uses it.

    Uniqueness is checked against queryset (default: every row of model),
    so per-parent slugs pass a filtered queryset.
    """
    base = slugify(value)[:max_length - 10] or 'item'
    slug = base
    counter = 1
    if queryset is None:
        queryset = model.objects.all()
    if instance is not None and instance.pk:
        queryset = queryset.exclude(pk=instance.pk)
    while queryset.filter(slug=slug).exists():
        slug = f"{base}-{counter}"
        counter += 1
    return slug
