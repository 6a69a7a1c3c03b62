"""
Article URLs, grouped by surface.

Each group is mounted under its prefix in config/urls.py.
"""

from django.urls import path, include
from config.routers import SurfaceRouter
from .views import AdminArticleViewSet, OwnerArticleViewSet, PublicArticleViewSet

# /api/admin/articles/
admin_router = SurfaceRouter()
admin_router.register(r'articles', AdminArticleViewSet, basename='admin-article')

admin_urlpatterns = [
    path('', include(admin_router.urls)),
]

# /api/umkm/articles/
owner_router = SurfaceRouter()
owner_router.register(r'articles', OwnerArticleViewSet, basename='owner-article')

owner_urlpatterns = [
    path('', include(owner_router.urls)),
]

# /api/public/articles/
public_router = SurfaceRouter()
public_router.register(r'articles', PublicArticleViewSet, basename='public-article')

public_urlpatterns = [
    path('', include(public_router.urls)),
]
