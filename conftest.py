"""
Shared pytest fixtures for the UMKM Directory.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.businesses.models import Business, BusinessStatus, Category
from apps.core.models import UserRole

User = get_user_model()


@pytest.fixture
def api_client():
    """Create an API client."""
    return APIClient()


@pytest.fixture
def village_admin(db):
    """A non-superuser account holding the village_admin role."""
    user = User.objects.create_user(
        username='admin_desa',
        email='admin@kuwaru.desa.id',
        password='adminpass123',
    )
    user.account_profile.role = UserRole.VILLAGE_ADMIN.value
    user.account_profile.save()
    return user


@pytest.fixture
def category(db):
    return Category.objects.create(name='Kuliner', description='Makanan dan minuman')


def _make_business(owner, category, name='Warung Bu Sri', status=BusinessStatus.ACTIVE):
    return Business.objects.create(
        owner=owner,
        category=category,
        name=name,
        owner_name='Sri Rahayu',
        description='Nasi pecel dan gorengan',
        address='Dusun Kuwaru RT 02',
        latitude=Decimal('-7.97970000'),
        longitude=Decimal('110.29990000'),
        phone='0274123456',
        status=status.value,
    )


@pytest.fixture
def owner(db):
    """business_owner account (linked to `business`)."""
    return User.objects.create_user(
        username='sri',
        email='sri@example.com',
        password='ownerpass123',
    )


@pytest.fixture
def business(owner, category):
    return _make_business(owner, category)


@pytest.fixture
def other_owner(db, category):
    """A second business_owner with their own active business."""
    user = User.objects.create_user(
        username='budi',
        email='budi@example.com',
        password='ownerpass123',
    )
    _make_business(user, category, name='Kerajinan Bambu Budi')
    return user


@pytest.fixture
def unlinked_owner(db):
    """business_owner account with no business record."""
    return User.objects.create_user(
        username='tanpa_usaha',
        email='none@example.com',
        password='ownerpass123',
    )


@pytest.fixture
def admin_client(village_admin):
    client = APIClient()
    client.force_authenticate(user=village_admin)
    return client


@pytest.fixture
def owner_client(owner, business):
    client = APIClient()
    client.force_authenticate(user=owner)
    return client


@pytest.fixture
def make_business(db):
    """Factory for extra businesses: make_business(owner, category, name=..., status=...)."""
    return _make_business
