"""
URL patterns for authentication, accounts, the audit trail and site settings.
"""

from django.urls import path, include
from config.routers import SurfaceRouter
from .views import (
    AccountPasswordView,
    ActivityLogListView,
    AdminUserViewSet,
    CurrentUserView,
    CustomTokenObtainPairView,
    CustomTokenRefreshView,
    LogoutView,
    SiteSettingsView,
)

# Auth URLs - mounted at /api/auth/ in main urls.py
auth_urlpatterns = [
    path('login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('me/', CurrentUserView.as_view(), name='current_user'),
    path('logout/', LogoutView.as_view(), name='logout'),
]

# Back-office URLs - mounted at /api/admin/ in main urls.py
admin_router = SurfaceRouter()
admin_router.register(r'users', AdminUserViewSet, basename='admin-user')

admin_urlpatterns = [
    path('activity-logs/', ActivityLogListView.as_view(), name='activity_logs'),
    path('settings/', SiteSettingsView.as_view(), name='site_settings'),
    path('', include(admin_router.urls)),
]

# Owner portal URLs - mounted at /api/umkm/ in main urls.py
owner_urlpatterns = [
    path('account/password/', AccountPasswordView.as_view(), name='account_password'),
]
