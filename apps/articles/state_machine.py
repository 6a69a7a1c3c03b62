"""
Article Moderation State Machine.

States:
    draft ──submit──> pending ──approve──> approved
      ^                 │  ^
      │                 │  └──submit── rejected
      └── (create)      └──reject───────┘

Owners write and submit; village admins approve or reject. `approved` has
no outgoing transition: the owner can no longer touch the article and only
an admin may still edit or delete it.

This module is pure: ArticlePolicy answers "may this scope do X to this
article now" and the ensure_* guards raise. Persistence lives in
apps.articles.services.
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional, Set

from apps.core.exceptions import ForbiddenError, InvalidStateTransitionError

logger = logging.getLogger(__name__)


class ArticleStatus(str, Enum):
    """Moderation status of an article. No other states exist."""
    DRAFT = 'draft'
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    @classmethod
    def from_string(cls, value: str) -> 'ArticleStatus':
        """Convert string to ArticleStatus."""
        for status in cls:
            if status.value == value:
                return status
        raise ValueError(f"Unknown article status: {value}")


# Status changes reachable through moderation actions
VALID_TRANSITIONS: Dict[ArticleStatus, Set[ArticleStatus]] = {
    ArticleStatus.DRAFT: {ArticleStatus.PENDING},
    ArticleStatus.PENDING: {ArticleStatus.APPROVED, ArticleStatus.REJECTED},
    ArticleStatus.REJECTED: {ArticleStatus.PENDING},
    ArticleStatus.APPROVED: set(),
}

OWNER_EDITABLE: FrozenSet[ArticleStatus] = frozenset({
    ArticleStatus.DRAFT, ArticleStatus.PENDING, ArticleStatus.REJECTED,
})
OWNER_DELETABLE: FrozenSet[ArticleStatus] = frozenset({ArticleStatus.DRAFT})
SUBMITTABLE: FrozenSet[ArticleStatus] = frozenset({ArticleStatus.DRAFT, ArticleStatus.REJECTED})
REVIEWABLE: FrozenSet[ArticleStatus] = frozenset({ArticleStatus.PENDING})

# Statuses accepted on create, per role
OWNER_CREATE_STATUSES: FrozenSet[ArticleStatus] = frozenset({
    ArticleStatus.DRAFT, ArticleStatus.PENDING,
})
ADMIN_CREATE_STATUSES: FrozenSet[ArticleStatus] = frozenset({
    ArticleStatus.DRAFT, ArticleStatus.PENDING, ArticleStatus.APPROVED,
})


def can_transition(current: ArticleStatus, target: ArticleStatus) -> bool:
    return target in VALID_TRANSITIONS.get(current, set())


class ArticlePolicy:
    """
    Authorization for article operations, for one TenancyScope.

    Role and ownership failures are ForbiddenError; the right actor asking
    at the wrong moment gets InvalidStateTransitionError.
    """

    def __init__(self, scope):
        self.scope = scope

    @staticmethod
    def _status(article) -> ArticleStatus:
        return ArticleStatus.from_string(article.status)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def can_view(self, article) -> bool:
        return self.scope.is_village_admin or self.scope.owns(article)

    def can_create(self, business=None) -> bool:
        if self.scope.is_village_admin:
            return True
        if not self.scope.is_business_owner or not self.scope.has_business:
            return False
        return business is None or self.scope.owns(business)

    def can_update(self, article) -> bool:
        if self.scope.is_village_admin:
            return True
        return self.scope.owns(article) and self._status(article) in OWNER_EDITABLE

    def can_delete(self, article) -> bool:
        if self.scope.is_village_admin:
            return True
        return self.scope.owns(article) and self._status(article) in OWNER_DELETABLE

    def can_submit(self, article) -> bool:
        return self.scope.owns(article) and self._status(article) in SUBMITTABLE

    def can_approve(self, article) -> bool:
        return self.scope.is_village_admin and self._status(article) in REVIEWABLE

    def can_reject(self, article) -> bool:
        return self.can_approve(article)

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def ensure_view(self, article):
        if not self.can_view(article):
            raise ForbiddenError("You do not have access to this article.")

    def ensure_create(self, business=None, status: Optional[ArticleStatus] = None):
        if not self.can_create(business):
            raise ForbiddenError("You cannot create articles for this business.")
        allowed = ADMIN_CREATE_STATUSES if self.scope.is_village_admin else OWNER_CREATE_STATUSES
        if status is not None and status not in allowed:
            raise InvalidStateTransitionError(
                f"Articles cannot be created with status '{status.value}'.",
                field='status',
            )

    def ensure_update(self, article):
        self._ensure_own(article)
        if not self.can_update(article):
            raise InvalidStateTransitionError("Approved articles can no longer be edited.")

    def ensure_delete(self, article):
        self._ensure_own(article)
        if not self.can_delete(article):
            raise InvalidStateTransitionError("Only draft articles can be deleted.")

    def ensure_submit(self, article):
        if not self.scope.is_business_owner:
            raise ForbiddenError("Only the owning business can submit an article for review.")
        self._ensure_own(article)
        if not self.can_submit(article):
            raise InvalidStateTransitionError(
                f"Articles in status '{article.status}' cannot be submitted for review."
            )

    def ensure_approve(self, article):
        self._ensure_reviewable(article, 'approved')

    def ensure_reject(self, article):
        self._ensure_reviewable(article, 'rejected')

    def _ensure_own(self, article):
        if self.scope.is_village_admin:
            return
        if not self.scope.owns(article):
            raise ForbiddenError("You do not have access to this article.")

    def _ensure_reviewable(self, article, verb):
        if not self.scope.is_village_admin:
            raise ForbiddenError("Only a village admin can review articles.")
        if self._status(article) not in REVIEWABLE:
            raise InvalidStateTransitionError(
                f"Only pending articles can be {verb}."
            )
