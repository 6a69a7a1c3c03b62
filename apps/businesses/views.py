"""
Business directory API views.

GET    /api/public/businesses/             - active businesses
GET    /api/public/businesses/{slug}/      - one active business
GET    /api/public/businesses/{slug}/products/ - its products, featured first
GET    /api/public/categories/             - categories
*      /api/admin/businesses/              - village admin CRUD
POST   /api/admin/businesses/{id}/status/  - change status
POST   /api/admin/businesses/{id}/featured/ - toggle featured flag
*      /api/admin/categories/              - village admin CRUD
*      /api/admin/products/                - village admin CRUD
GET    /api/umkm/business/                 - owner's own business
PATCH  /api/umkm/business/                 - edit owner's own business
*      /api/umkm/products/                 - owner CRUD on own products
GET    /api/umkm/products/stats/           - own product counts
"""

import logging
import uuid

from django.db import transaction
from django.db.models import Q
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.audit import AuditTrail
from apps.core.exceptions import ForbiddenError
from apps.core.permissions import IsBusinessOwner, IsVillageAdmin, PortalAccessPermission

from .models import Business, Category, Product
from .serializers import (
    AdminBusinessSerializer,
    AdminProductSerializer,
    BusinessPublicSerializer,
    BusinessStatusSerializer,
    CategorySerializer,
    OwnerBusinessSerializer,
    ProductSerializer,
    PublicProductSerializer,
)

logger = logging.getLogger(__name__)


class AuditedModelViewSet(viewsets.ModelViewSet):
    """
    ModelViewSet whose writes run in one transaction with their audit entry.
    """

    audit_trail = AuditTrail()

    def perform_create(self, serializer):
        with transaction.atomic():
            instance = serializer.save()
            self.audit_trail.log_create(self.request.user, instance, str(instance))

    def perform_update(self, serializer):
        with transaction.atomic():
            instance = serializer.save()
            self.audit_trail.log_update(self.request.user, instance, str(instance))

    def perform_destroy(self, instance):
        with transaction.atomic():
            self.audit_trail.log_delete(self.request.user, instance, str(instance))
            instance.delete()


# =============================================================================
# Village admin
# =============================================================================

class AdminCategoryViewSet(AuditedModelViewSet):
    permission_classes = [IsAuthenticated, PortalAccessPermission, IsVillageAdmin]
    serializer_class = CategorySerializer

    def get_queryset(self):
        queryset = Category.objects.order_by('name')
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset


class AdminBusinessViewSet(AuditedModelViewSet):
    """
    Business management for village admins.

    Query params: status, category (id or slug), featured, search
    (name, owner name or address).
    """

    permission_classes = [IsAuthenticated, PortalAccessPermission, IsVillageAdmin]
    serializer_class = AdminBusinessSerializer

    def get_queryset(self):
        queryset = Business.objects.select_related('category', 'owner').order_by('name')
        params = self.request.query_params

        status_filter = params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        category = params.get('category')
        if category:
            if _looks_like_uuid(category):
                queryset = queryset.filter(category_id=category)
            else:
                queryset = queryset.filter(category__slug=category)

        featured = params.get('featured')
        if featured is not None:
            queryset = queryset.filter(is_featured=featured.lower() in ('true', '1', 'yes'))

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(owner_name__icontains=search)
                | Q(address__icontains=search)
            )

        return queryset

    @action(detail=True, methods=['post'], url_path='status')
    def change_status(self, request, pk=None):
        """Set status to active, inactive or suspended."""
        business = self.get_object()
        serializer = BusinessStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        old_status = business.status
        new_status = serializer.validated_data['status']

        with transaction.atomic():
            business.status = new_status
            business.save(update_fields=['status', 'updated_at'])
            self.audit_trail.log_update(
                request.user, business,
                f"Status changed from {old_status} to {new_status}",
            )

        logger.info("Business %s status %s -> %s", business.pk, old_status, new_status)
        return Response(AdminBusinessSerializer(business).data)

    @action(detail=True, methods=['post'], url_path='featured')
    def toggle_featured(self, request, pk=None):
        business = self.get_object()

        with transaction.atomic():
            business.is_featured = not business.is_featured
            business.save(update_fields=['is_featured', 'updated_at'])
            self.audit_trail.log_update(
                request.user, business,
                'Marked as featured' if business.is_featured else 'Removed from featured',
            )

        return Response(AdminBusinessSerializer(business).data)


class AdminProductViewSet(AuditedModelViewSet):
    """
    Products of every business. Query params: business (id), featured,
    search (product or business name).
    """

    permission_classes = [IsAuthenticated, PortalAccessPermission, IsVillageAdmin]
    serializer_class = AdminProductSerializer

    def get_queryset(self):
        queryset = Product.objects.select_related('business')
        params = self.request.query_params

        business = params.get('business')
        if business:
            if not _looks_like_uuid(business):
                return queryset.none()
            queryset = queryset.filter(business_id=business)

        featured = params.get('featured')
        if featured is not None:
            queryset = queryset.filter(is_featured=featured.lower() in ('true', '1', 'yes'))

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(business__name__icontains=search)
            )

        return queryset


def _looks_like_uuid(value):
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


# =============================================================================
# Business owner portal
# =============================================================================

class OwnerBusinessView(APIView):
    """The owner's own business. The activation gate guarantees it exists."""

    permission_classes = [IsAuthenticated, PortalAccessPermission, IsBusinessOwner]
    audit_trail = AuditTrail()

    def get(self, request):
        return Response(OwnerBusinessSerializer(request.tenancy.business).data)

    def patch(self, request):
        business = request.tenancy.business
        serializer = OwnerBusinessSerializer(business, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            business = serializer.save()
            self.audit_trail.log_update(request.user, business, 'Business profile updated')

        return Response(OwnerBusinessSerializer(business).data)


class OwnerProductViewSet(AuditedModelViewSet):
    """
    Products of the owner's own business.

    Another business's product is a 403, not a 404.
    """

    permission_classes = [IsAuthenticated, PortalAccessPermission, IsBusinessOwner]
    serializer_class = ProductSerializer

    def get_queryset(self):
        return Product.objects.filter(business=self.request.tenancy.business)

    def get_object(self):
        product = get_object_or_404(Product.objects.all(), pk=self.kwargs['pk'])
        if not self.request.tenancy.owns(product):
            raise ForbiddenError("You can only manage products of your own business.")
        return product

    def perform_create(self, serializer):
        with transaction.atomic():
            product = serializer.save(business=self.request.tenancy.business)
            self.audit_trail.log_create(self.request.user, product, str(product))

    @action(detail=False, methods=['get'])
    def stats(self, request):
        products = self.get_queryset()
        return Response({
            'total': products.count(),
            'featured': products.filter(is_featured=True).count(),
        })


# =============================================================================
# Public directory
# =============================================================================

class PublicBusinessViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Active businesses only. Query params: category (slug), featured, search.
    """

    permission_classes = [AllowAny]
    serializer_class = BusinessPublicSerializer
    lookup_field = 'slug'

    def get_queryset(self):
        queryset = (
            Business.objects.active()
            .select_related('category')
            .order_by('-is_featured', 'name')
        )
        params = self.request.query_params

        category = params.get('category')
        if category:
            queryset = queryset.filter(category__slug=category)

        featured = params.get('featured')
        if featured is not None and featured.lower() in ('true', '1', 'yes'):
            queryset = queryset.filter(is_featured=True)

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(description__icontains=search)
            )

        return queryset

    @action(detail=True, methods=['get'])
    def products(self, request, slug=None):
        business = self.get_object()
        products = business.products.order_by('-is_featured', 'name')
        page = self.paginate_queryset(products)
        serializer = PublicProductSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)


class PublicCategoryViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [AllowAny]
    serializer_class = CategorySerializer
    lookup_field = 'slug'
    queryset = Category.objects.order_by('name')
