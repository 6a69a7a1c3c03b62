"""
Tests for the JWT auth endpoints: login, refresh, me and logout.

Covers the activation gate at login, the audit entries written for login
and logout, and the standard error envelope.
"""

import pytest
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from apps.businesses.models import BusinessStatus
from apps.core.models import ActivityLog

User = get_user_model()


def login(client, username, password):
    return client.post(
        '/api/auth/login/',
        {'username': username, 'password': password},
        format='json',
    )


# ============================================================================
# Login
# ============================================================================

@pytest.mark.django_db
class TestLogin:

    def test_owner_login_returns_tokens_and_user(self, api_client, owner, business):
        response = login(api_client, 'sri', 'ownerpass123')

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert 'refresh' in response.data
        assert response.data['user']['username'] == 'sri'
        assert response.data['user']['role'] == 'business_owner'
        assert response.data['user']['business']['slug'] == business.slug

        claims = AccessToken(response.data['access'])
        assert claims['role'] == 'business_owner'
        assert claims['username'] == 'sri'

    def test_admin_login(self, api_client, village_admin):
        response = login(api_client, 'admin_desa', 'adminpass123')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['role'] == 'village_admin'
        assert response.data['user']['business'] is None

    def test_login_is_audited_and_stamps_last_login(self, api_client, owner, business):
        assert owner.last_login is None

        login(api_client, 'sri', 'ownerpass123')

        owner.refresh_from_db()
        assert owner.last_login is not None
        entry = ActivityLog.objects.get(action=ActivityLog.ACTION_LOGIN)
        assert entry.user == owner
        assert entry.target_type == 'user'
        assert entry.target_id == str(owner.pk)

    def test_wrong_password(self, api_client, owner, business):
        response = login(api_client, 'sri', 'salah')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not ActivityLog.objects.exists()

    def test_disabled_account(self, api_client, owner, business):
        owner.is_active = False
        owner.save()

        response = login(api_client, 'sri', 'ownerpass123')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error']['code'] == 'ACCOUNT_DISABLED'
        assert 'access' not in response.data

    def test_disabled_account_with_wrong_password_reveals_nothing(self, api_client, owner, business):
        owner.is_active = False
        owner.save()

        response = login(api_client, 'sri', 'salah')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unlinked_owner_is_refused(self, api_client, unlinked_owner):
        response = login(api_client, 'tanpa_usaha', 'ownerpass123')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error']['code'] == 'BUSINESS_NOT_LINKED'
        assert not ActivityLog.objects.exists()
        unlinked_owner.refresh_from_db()
        assert unlinked_owner.last_login is None

    @pytest.mark.parametrize('business_status', [BusinessStatus.INACTIVE, BusinessStatus.SUSPENDED])
    def test_owner_of_blocked_business_is_refused(self, api_client, owner, business, business_status):
        business.status = business_status.value
        business.save()

        response = login(api_client, 'sri', 'ownerpass123')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error']['code'] == 'BUSINESS_NOT_ACTIVE'


# ============================================================================
# Session endpoints
# ============================================================================

@pytest.mark.django_db
class TestSession:

    @pytest.fixture
    def tokens(self, api_client, owner, business):
        return login(api_client, 'sri', 'ownerpass123').data

    @pytest.fixture
    def bearer_client(self, tokens):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        return client

    def test_me(self, bearer_client, business):
        response = bearer_client.get('/api/auth/me/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['username'] == 'sri'
        assert response.data['business']['name'] == business.name

    def test_me_after_suspension(self, bearer_client, business):
        business.status = BusinessStatus.SUSPENDED.value
        business.save()

        response = bearer_client.get('/api/auth/me/')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error']['code'] == 'BUSINESS_NOT_ACTIVE'

    def test_me_after_account_disabled(self, bearer_client, owner):
        owner.is_active = False
        owner.save()

        response = bearer_client.get('/api/auth/me/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error']['code'] == 'ACCOUNT_DISABLED'

    def test_refresh(self, api_client, tokens):
        response = api_client.post('/api/auth/refresh/', {'refresh': tokens['refresh']}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data

    def test_logout_blacklists_refresh_token(self, bearer_client, api_client, tokens, owner):
        response = bearer_client.post('/api/auth/logout/', {'refresh': tokens['refresh']}, format='json')

        assert response.status_code == status.HTTP_200_OK
        entry = ActivityLog.objects.get(action=ActivityLog.ACTION_LOGOUT)
        assert entry.user == owner

        response = api_client.post('/api/auth/refresh/', {'refresh': tokens['refresh']}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_still_works_after_suspension(self, bearer_client, tokens, business):
        business.status = BusinessStatus.SUSPENDED.value
        business.save()

        response = bearer_client.post('/api/auth/logout/', {'refresh': tokens['refresh']}, format='json')

        assert response.status_code == status.HTTP_200_OK

    def test_logout_requires_refresh_token(self, bearer_client):
        response = bearer_client.post('/api/auth/logout/', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['field'] == 'refresh'

    def test_logout_with_garbage_token(self, bearer_client):
        response = bearer_client.post('/api/auth/logout/', {'refresh': 'not-a-token'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_logout_with_someone_elses_token(self, bearer_client, other_owner):
        foreign = login(APIClient(), 'budi', 'ownerpass123').data

        response = bearer_client.post('/api/auth/logout/', {'refresh': foreign['refresh']}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not ActivityLog.objects.filter(action=ActivityLog.ACTION_LOGOUT).exists()


# ============================================================================
# Error envelope
# ============================================================================

@pytest.mark.django_db
class TestErrorEnvelope:

    def test_error_carries_request_id(self, api_client):
        response = api_client.get('/api/auth/me/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error']['code'] == 'AUTHENTICATION_REQUIRED'
        assert response.data['request_id'] == response['X-Request-ID']

    def test_incoming_request_id_is_echoed(self, api_client):
        request_id = '6f1c2a4e-8f0b-4c52-9d2e-3b7a1e5c9d10'

        response = api_client.get('/api/auth/me/', HTTP_X_REQUEST_ID=request_id)

        assert response['X-Request-ID'] == request_id
        assert response.data['request_id'] == request_id

    def test_malformed_request_id_is_replaced(self, api_client):
        response = api_client.get('/api/auth/me/', HTTP_X_REQUEST_ID='<script>')

        assert response['X-Request-ID'] != '<script>'
