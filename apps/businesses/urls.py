"""
Business directory URLs, grouped by surface.

Each group is mounted under its prefix in config/urls.py.
"""

from django.urls import path, include
from config.routers import SurfaceRouter
from .views import (
    AdminBusinessViewSet,
    AdminCategoryViewSet,
    AdminProductViewSet,
    OwnerBusinessView,
    OwnerProductViewSet,
    PublicBusinessViewSet,
    PublicCategoryViewSet,
)

# /api/admin/
admin_router = SurfaceRouter()
admin_router.register(r'businesses', AdminBusinessViewSet, basename='admin-business')
admin_router.register(r'categories', AdminCategoryViewSet, basename='admin-category')
admin_router.register(r'products', AdminProductViewSet, basename='admin-product')

admin_urlpatterns = [
    path('', include(admin_router.urls)),
]

# /api/umkm/
owner_router = SurfaceRouter()
owner_router.register(r'products', OwnerProductViewSet, basename='owner-product')

owner_urlpatterns = [
    path('business/', OwnerBusinessView.as_view(), name='owner-business'),
    path('', include(owner_router.urls)),
]

# /api/public/
public_router = SurfaceRouter()
public_router.register(r'businesses', PublicBusinessViewSet, basename='public-business')
public_router.register(r'categories', PublicCategoryViewSet, basename='public-category')

public_urlpatterns = [
    path('', include(public_router.urls)),
]
