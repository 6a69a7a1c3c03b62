"""
URL configuration for the UMKM Directory project.

/api/auth/    login, refresh, me, logout
/api/admin/   village admin back office
/api/umkm/    business owner portal
/api/public/  anonymous directory
"""

from django.contrib import admin
from django.urls import path, include

from apps.articles import urls as article_urls
from apps.businesses import urls as business_urls
from apps.core import urls as core_urls

admin_api_urlpatterns = (
    core_urls.admin_urlpatterns
    + business_urls.admin_urlpatterns
    + article_urls.admin_urlpatterns
)

owner_api_urlpatterns = (
    core_urls.owner_urlpatterns
    + business_urls.owner_urlpatterns
    + article_urls.owner_urlpatterns
)

public_api_urlpatterns = (
    business_urls.public_urlpatterns
    + article_urls.public_urlpatterns
)

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('api/auth/', include((core_urls.auth_urlpatterns, 'auth'))),
    path('api/admin/', include((admin_api_urlpatterns, 'admin-api'))),
    path('api/umkm/', include((owner_api_urlpatterns, 'umkm'))),
    path('api/public/', include((public_api_urlpatterns, 'public'))),
]

# Customize admin site
admin.site.site_header = "UMKM Directory Administration"
admin.site.site_title = "UMKM Directory Admin"
admin.site.index_title = "Village back office"
