"""
Router shared by the admin, owner portal and public API surfaces.
"""

from rest_framework.routers import DefaultRouter


class SurfaceRouter(DefaultRouter):
    """
    DefaultRouter for one API surface.

    Several of these are mounted side by side under /api/, so format
    suffixes are off (their path converter can only be registered once)
    and so is the per-router API root view.
    """
    include_format_suffixes = False
    include_root_view = False
