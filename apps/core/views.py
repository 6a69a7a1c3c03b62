"""
Authentication, account management, audit trail and site settings views.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.signals import user_logged_out
from django.db import transaction
from django.db.models import Q
from django.utils.crypto import get_random_string
from django.utils.dateparse import parse_date
from rest_framework import generics, viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.core.audit import AuditTrail
from apps.core.exceptions import ForbiddenError, ValidationError, success_response
from apps.core.models import ActivityLog, Setting, UserRole
from apps.core.permissions import (
    IsBusinessOwner,
    IsVillageAdmin,
    PortalAccessPermission,
    get_user_role,
)
from apps.core.serializers import (
    ActivityLogSerializer,
    CustomTokenObtainPairSerializer,
    PasswordChangeSerializer,
    SiteSettingsSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()

GENERATED_PASSWORD_LENGTH = 12


# =============================================================================
# JWT Authentication Views
# =============================================================================

class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Login endpoint that returns JWT tokens.

    POST /api/auth/login/
    Body: {"username": "...", "password": "..."}
    Returns: {"access": "...", "refresh": "...", "user": {...}}
    """
    serializer_class = CustomTokenObtainPairSerializer
    permission_classes = [AllowAny]


class CustomTokenRefreshView(TokenRefreshView):
    """
    Token refresh endpoint.

    POST /api/auth/refresh/
    Body: {"refresh": "..."}
    Returns: {"access": "..."}
    """
    permission_classes = [AllowAny]


class CurrentUserView(APIView):
    """
    GET /api/auth/me/ - current user with role and business
    """
    permission_classes = [IsAuthenticated, PortalAccessPermission]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class LogoutView(APIView):
    """
    Logout endpoint - blacklist refresh token.

    POST /api/auth/logout/
    Body: {"refresh": "..."}

    Only IsAuthenticated: an owner whose business was suspended must still
    be able to log out.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh')
        if not refresh_token:
            raise ValidationError("Refresh token required", field='refresh')

        try:
            token = RefreshToken(refresh_token)
        except TokenError as e:
            raise ValidationError(str(e), field='refresh')

        if str(token.get(settings.SIMPLE_JWT['USER_ID_CLAIM'])) != str(request.user.pk):
            raise ForbiddenError("Refresh token belongs to another user")

        token.blacklist()
        user_logged_out.send(
            sender=request.user.__class__,
            request=request._request,
            user=request.user,
        )

        return success_response(message="Successfully logged out")


# =============================================================================
# Account management
# =============================================================================

class AdminUserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Business owner accounts for village admins.

    GET  /api/admin/users/                      - query params: search, status (active|inactive)
    GET  /api/admin/users/{id}/
    POST /api/admin/users/{id}/toggle-active/   - enable or disable the account
    POST /api/admin/users/{id}/reset-password/  - returns a generated password once

    Admin accounts, including the caller's own, cannot be changed here.
    """
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, PortalAccessPermission, IsVillageAdmin]
    audit_trail = AuditTrail()

    def get_queryset(self):
        queryset = (
            User.objects.filter(account_profile__role=UserRole.BUSINESS_OWNER.value)
            .exclude(is_superuser=True)
            .select_related('account_profile', 'business')
            .order_by('username')
        )
        params = self.request.query_params

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(username__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
            )

        account_status = params.get('status')
        if account_status == 'active':
            queryset = queryset.filter(is_active=True)
        elif account_status == 'inactive':
            queryset = queryset.filter(is_active=False)

        return queryset

    def get_managed_user(self):
        user = get_object_or_404(User.objects.all(), pk=self.kwargs['pk'])
        if user.pk == self.request.user.pk:
            raise ForbiddenError("You cannot change your own account here.")
        if get_user_role(user) != UserRole.BUSINESS_OWNER.value:
            raise ForbiddenError("Only business owner accounts can be managed.")
        return user

    @action(detail=True, methods=['post'], url_path='toggle-active')
    def toggle_active(self, request, pk=None):
        user = self.get_managed_user()

        with transaction.atomic():
            user.is_active = not user.is_active
            user.save(update_fields=['is_active'])
            self.audit_trail.record(
                request.user, ActivityLog.ACTION_UPDATE, 'user', user.pk,
                f"{'Enabled' if user.is_active else 'Disabled'} account {user.username}",
            )

        logger.info("User %s is_active=%s", user.pk, user.is_active)
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=['post'], url_path='reset-password')
    def reset_password(self, request, pk=None):
        user = self.get_managed_user()
        password = get_random_string(GENERATED_PASSWORD_LENGTH)

        with transaction.atomic():
            user.set_password(password)
            user.save(update_fields=['password'])
            self.audit_trail.record(
                request.user, ActivityLog.ACTION_UPDATE, 'user', user.pk,
                f"Reset password of {user.username}",
            )

        return success_response(
            {'user': UserSerializer(user).data, 'password': password},
            message="Password reset. Share it with the owner; it is not shown again.",
        )


class AccountPasswordView(APIView):
    """
    POST /api/umkm/account/password/
    Body: {"current_password": "...", "password": "...", "password_confirm": "..."}
    """
    permission_classes = [IsAuthenticated, PortalAccessPermission, IsBusinessOwner]
    audit_trail = AuditTrail()

    def post(self, request):
        serializer = PasswordChangeSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            user = serializer.save()
            self.audit_trail.record(
                user, ActivityLog.ACTION_UPDATE, 'user', user.pk, 'Password changed',
            )

        return success_response(message="Password changed")


# =============================================================================
# Audit Trail
# =============================================================================

class ActivityLogListView(generics.ListAPIView):
    """
    GET /api/admin/activity-logs/

    Query params: user_id, action, target_type, date_from, date_to
    (YYYY-MM-DD, inclusive) and search (description or username).
    """
    serializer_class = ActivityLogSerializer
    permission_classes = [IsAuthenticated, PortalAccessPermission, IsVillageAdmin]

    def get_queryset(self):
        queryset = ActivityLog.objects.select_related('user').order_by('-created_at')
        params = self.request.query_params

        user_id = params.get('user_id')
        if user_id:
            if not user_id.isdigit():
                raise ValidationError("user_id must be a number.", field='user_id')
            queryset = queryset.filter(user_id=int(user_id))
        if params.get('action'):
            queryset = queryset.filter(action=params['action'])
        if params.get('target_type'):
            queryset = queryset.filter(target_type=params['target_type'])

        date_from = parse_date(params.get('date_from') or '')
        if date_from:
            queryset = queryset.filter(created_at__date__gte=date_from)
        date_to = parse_date(params.get('date_to') or '')
        if date_to:
            queryset = queryset.filter(created_at__date__lte=date_to)

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(description__icontains=search) | Q(user__username__icontains=search)
            )

        return queryset


# =============================================================================
# Site Settings
# =============================================================================

class SiteSettingsView(APIView):
    """
    Site branding and map defaults.

    GET /api/admin/settings/ - stored values merged over SITE_DEFAULTS
    PATCH /api/admin/settings/ - update one or more keys
    """
    permission_classes = [IsAuthenticated, PortalAccessPermission, IsVillageAdmin]
    audit_trail = AuditTrail()

    def get_current(self):
        current = SiteSettingsSerializer.defaults()
        stored = Setting.get_many(list(current))
        current.update({key: value for key, value in stored.items() if value is not None})
        return current

    def get(self, request):
        return Response(self.get_current())

    def patch(self, request):
        serializer = SiteSettingsSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            Setting.set_many(serializer.validated_data)
            self.audit_trail.record(
                request.user,
                ActivityLog.ACTION_UPDATE,
                'setting',
                'site',
                'Updated settings: ' + ', '.join(sorted(serializer.validated_data)),
            )

        logger.info("Site settings updated by user=%s", request.user.pk)
        return Response(self.get_current())
