"""
Role & tenancy resolution and the business activation gate.

A business_owner is scoped to exactly one Business; a village_admin is
scoped to everything. The gate decides whether an authenticated account
may use the API at all and is evaluated at login and on every request.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from apps.core.exceptions import (
    AccountDisabledError,
    BusinessNotActiveError,
    BusinessNotLinkedError,
    ErrorCode,
)
from apps.core.models import UserRole
from apps.core.permissions import get_user_role

from .models import Business

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenancyScope:
    """What an authenticated account is allowed to reach."""
    user: object
    role: UserRole
    business: Optional[Business] = None

    @property
    def is_village_admin(self) -> bool:
        return self.role == UserRole.VILLAGE_ADMIN

    @property
    def is_business_owner(self) -> bool:
        return self.role == UserRole.BUSINESS_OWNER

    @property
    def has_business(self) -> bool:
        return self.business is not None

    def owns(self, obj) -> bool:
        """
        True when obj is this owner's Business or belongs to it.

        Village admins own nothing; they are authorized by role instead.
        """
        if not self.is_business_owner or self.business is None:
            return False
        if isinstance(obj, Business):
            return obj.pk == self.business.pk
        return getattr(obj, 'business_id', None) == self.business.pk


def resolve_tenancy(user) -> TenancyScope:
    """
    Load role and business scope for an authenticated user.

    A business_owner without a Business yields business=None; that is a
    valid scope, the activation gate decides what to do with it.
    """
    role = UserRole.from_string(get_user_role(user))
    business = None
    if role == UserRole.BUSINESS_OWNER:
        business = Business.objects.filter(owner=user).select_related('category').first()
    return TenancyScope(user=user, role=role, business=business)


@dataclass(frozen=True)
class PortalDecision:
    allowed: bool
    reason: str = ''
    code: Optional[ErrorCode] = None


REASON_NOT_LINKED = 'not linked to a business'
REASON_NOT_ACTIVE = 'business not active'


def can_enter_portal(role: UserRole, business: Optional[Business]) -> PortalDecision:
    """Classify whether role/business may use the portal. Pure."""
    if role == UserRole.VILLAGE_ADMIN:
        return PortalDecision(allowed=True)
    if business is None:
        return PortalDecision(False, REASON_NOT_LINKED, ErrorCode.BUSINESS_NOT_LINKED)
    if not business.is_active():
        return PortalDecision(False, REASON_NOT_ACTIVE, ErrorCode.BUSINESS_NOT_ACTIVE)
    return PortalDecision(allowed=True)


def enforce_portal_access(user) -> TenancyScope:
    """
    Run the activation gate for user and return its scope.

    Raises:
        AccountDisabledError: user.is_active is False
        BusinessNotLinkedError: business_owner without a business
        BusinessNotActiveError: business_owner whose business is not active
    """
    if not user.is_active:
        logger.warning("Portal access refused: user=%s disabled", user.pk)
        raise AccountDisabledError()

    scope = resolve_tenancy(user)
    decision = can_enter_portal(scope.role, scope.business)
    if decision.allowed:
        return scope

    logger.warning("Portal access refused: user=%s reason=%s", user.pk, decision.reason)
    if decision.code == ErrorCode.BUSINESS_NOT_LINKED:
        raise BusinessNotLinkedError()
    raise BusinessNotActiveError()
