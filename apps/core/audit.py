"""
Audit trail writer.

Services receive an AuditTrail instance instead of calling a global helper,
so tests can substitute a recording fake.

Usage:
    from apps.core.audit import AuditTrail

    audit = AuditTrail()
    with transaction.atomic():
        article.save()
        audit.log_update(user, article)
"""

import logging
from typing import Any, Optional

from .models import ActivityLog

logger = logging.getLogger(__name__)


class AuditTrail:
    """Append-only writer for ActivityLog entries."""

    def record(
        self,
        user,
        action: str,
        target_type: str,
        target_id: Any,
        description: Optional[str] = None,
    ) -> ActivityLog:
        """
        Persist one audit entry.

        Args:
            user: User who performed the action
            action: One of the ActivityLog.ACTION_* values
            target_type: Kind of object acted upon (article, business, user...)
            target_id: Primary key of the object acted upon
            description: Optional human-readable detail

        Returns:
            The created ActivityLog
        """
        entry = ActivityLog.objects.create(
            user=user,
            action=action,
            target_type=target_type,
            target_id=str(target_id),
            description=description or '',
        )
        logger.info(
            "Audit: user=%s action=%s target=%s:%s",
            user.pk, action, target_type, target_id,
        )
        return entry

    def log_login(self, user) -> ActivityLog:
        return self.record(
            user, ActivityLog.ACTION_LOGIN, 'user', user.pk,
            'User logged in successfully',
        )

    def log_logout(self, user) -> ActivityLog:
        return self.record(
            user, ActivityLog.ACTION_LOGOUT, 'user', user.pk,
            'User logged out',
        )

    def log_model_action(self, user, action: str, instance, description: Optional[str] = None) -> ActivityLog:
        """Record an action on a model instance, typed by its model name."""
        return self.record(user, action, instance._meta.model_name, instance.pk, description)

    def log_create(self, user, instance, description=None):
        return self.log_model_action(user, ActivityLog.ACTION_CREATE, instance, description)

    def log_update(self, user, instance, description=None):
        return self.log_model_action(user, ActivityLog.ACTION_UPDATE, instance, description)

    def log_delete(self, user, instance, description=None):
        # Call before instance.delete(); Django clears the pk afterwards.
        return self.log_model_action(user, ActivityLog.ACTION_DELETE, instance, description)

    def log_submit(self, user, instance, description=None):
        return self.log_model_action(user, ActivityLog.ACTION_SUBMIT, instance, description)

    def log_approve(self, user, instance, description=None):
        return self.log_model_action(user, ActivityLog.ACTION_APPROVE, instance, description)

    def log_reject(self, user, instance, description=None):
        return self.log_model_action(user, ActivityLog.ACTION_REJECT, instance, description)
