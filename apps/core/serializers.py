"""
Serializers for authentication, accounts, the audit trail and site settings.
"""

from django.conf import settings
from django.contrib.auth import get_user_model, password_validation
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.contrib.auth.signals import user_logged_in
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .exceptions import AccountDisabledError
from .models import ActivityLog
from .permissions import get_user_role

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User with role and linked business."""

    role = serializers.SerializerMethodField()
    business = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'is_active',
            'date_joined',
            'last_login',
            'role',
            'business',
        ]
        read_only_fields = fields

    def get_role(self, obj):
        return get_user_role(obj)

    def get_business(self, obj):
        try:
            business = obj.business
        except ObjectDoesNotExist:
            return None
        return {
            'id': str(business.id),
            'name': business.name,
            'slug': business.slug,
            'status': business.status,
        }


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Login serializer.

    Disabled accounts and owners failing the activation gate get no tokens.
    A successful login is announced with user_logged_in, which stamps
    last_login and writes the audit entry.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = get_user_role(user)
        return token

    def validate(self, attrs):
        from apps.businesses.tenancy import enforce_portal_access

        try:
            data = super().validate(attrs)
        except AuthenticationFailed:
            self._raise_if_disabled(attrs)
            raise

        enforce_portal_access(self.user)

        request = self.context.get('request')
        user_logged_in.send(
            sender=self.user.__class__,
            request=getattr(request, '_request', request),
            user=self.user,
        )

        data['user'] = UserSerializer(self.user).data
        return data

    def _raise_if_disabled(self, attrs):
        """Tell a deactivated user why, but only once the password matched."""
        user = User.objects.filter(
            **{User.USERNAME_FIELD: attrs.get(self.username_field)}
        ).first()
        if user is not None and not user.is_active and user.check_password(attrs.get('password')):
            raise AccountDisabledError()


class PasswordChangeSerializer(serializers.Serializer):
    """Owner changes their own password. The current one must match."""

    current_password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    password_confirm = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate_current_password(self, value):
        if not self.context['request'].user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({'password_confirm': "Passwords do not match."})
        try:
            password_validation.validate_password(attrs['password'], self.context['request'].user)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs

    def save(self):
        user = self.context['request'].user
        user.set_password(self.validated_data['password'])
        user.save(update_fields=['password'])
        return user


class ActivityLogSerializer(serializers.ModelSerializer):
    """Read-only audit entry."""

    username = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = ActivityLog
        fields = [
            'id',
            'user',
            'username',
            'action',
            'target_type',
            'target_id',
            'description',
            'created_at',
        ]
        read_only_fields = fields


class SiteSettingsSerializer(serializers.Serializer):
    """Site branding and map defaults stored in the settings table."""

    site_name = serializers.CharField(max_length=255)
    site_tagline = serializers.CharField(max_length=255, allow_blank=True)
    map_default_lat = serializers.DecimalField(
        max_digits=10, decimal_places=8, min_value=-90, max_value=90,
    )
    map_default_lng = serializers.DecimalField(
        max_digits=11, decimal_places=8, min_value=-180, max_value=180,
    )
    map_default_zoom = serializers.IntegerField(min_value=1, max_value=20)

    def validate(self, attrs):
        unknown = set(self.initial_data) - set(self.fields)
        if unknown:
            raise serializers.ValidationError(
                {key: 'Unknown setting.' for key in sorted(unknown)}
            )
        return attrs

    @staticmethod
    def defaults():
        return dict(settings.SITE_DEFAULTS)
