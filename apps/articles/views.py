"""
Article API views.

Village admin (/api/admin/articles/):
    CRUD, POST {id}/approve/, POST {id}/reject/
    Query params: status, business, search. Pending articles first unless
    a status filter is given.

Business owner (/api/umkm/articles/):
    CRUD on own business's articles, POST {id}/submit/, GET stats/

Public (/api/public/articles/):
    Approved and published articles, looked up by slug.
"""

from django.db.models import Case, Count, IntegerField, Q, Value, When
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from apps.businesses.models import BusinessStatus
from apps.core.permissions import IsBusinessOwner, IsVillageAdmin, PortalAccessPermission

from .models import Article
from .serializers import (
    AdminArticleSerializer,
    ArticleRejectSerializer,
    ArticleSerializer,
    PublicArticleSerializer,
)
from .services import ArticleModerationService
from .state_machine import ArticlePolicy, ArticleStatus


class ModeratedArticleViewSet(viewsets.ModelViewSet):
    """
    ModelViewSet that routes every write through ArticleModerationService.

    request.tenancy is set by PortalAccessPermission.
    """

    def get_service(self):
        return ArticleModerationService(self.request.tenancy)

    def get_object(self):
        # Look up across all businesses so a foreign article is a 403, not a 404
        article = get_object_or_404(
            Article.objects.select_related('business', 'approved_by'),
            pk=self.kwargs[self.lookup_url_kwarg or self.lookup_field],
        )
        ArticlePolicy(self.request.tenancy).ensure_view(article)
        return article

    def perform_create(self, serializer):
        business = serializer.validated_data.get('business')
        serializer.instance = self.get_service().create(serializer.validated_data, business=business)

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(serializer.instance, serializer.validated_data)

    def perform_destroy(self, instance):
        self.get_service().delete(instance)


class AdminArticleViewSet(ModeratedArticleViewSet):
    permission_classes = [IsAuthenticated, PortalAccessPermission, IsVillageAdmin]
    serializer_class = AdminArticleSerializer

    def get_queryset(self):
        queryset = Article.objects.select_related('business', 'approved_by')
        params = self.request.query_params

        business_id = params.get('business')
        if business_id:
            queryset = queryset.filter(business_id=business_id)

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search) | Q(business__name__icontains=search)
            )

        status_filter = params.get('status')
        if status_filter:
            return queryset.filter(status=status_filter).order_by('-created_at')

        # Review queue first
        return queryset.annotate(
            review_order=Case(
                When(status=ArticleStatus.PENDING.value, then=Value(0)),
                default=Value(1),
                output_field=IntegerField(),
            )
        ).order_by('review_order', '-created_at')

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        article = self.get_service().approve(self.get_object())
        return Response(self.get_serializer(article).data)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        serializer = ArticleRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        article = self.get_service().reject(
            self.get_object(), serializer.validated_data.get('rejection_notes'),
        )
        return Response(self.get_serializer(article).data)


class OwnerArticleViewSet(ModeratedArticleViewSet):
    permission_classes = [IsAuthenticated, PortalAccessPermission, IsBusinessOwner]
    serializer_class = ArticleSerializer

    def get_queryset(self):
        queryset = Article.objects.for_business(self.request.tenancy.business).select_related('business')

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        return queryset.order_by('-created_at')

    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        article = self.get_service().submit(self.get_object())
        return Response(self.get_serializer(article).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Article counts per status for the owner's business."""
        counts = dict(
            Article.objects.for_business(request.tenancy.business)
            .values_list('status')
            .annotate(total=Count('id'))
            .order_by()
        )
        data = {status.value: counts.get(status.value, 0) for status in ArticleStatus}
        data['total'] = sum(data.values())
        return Response(data)


class PublicArticleViewSet(viewsets.ReadOnlyModelViewSet):
    """Query params: business (slug), search."""

    permission_classes = [AllowAny]
    serializer_class = PublicArticleSerializer
    lookup_field = 'slug'

    def get_queryset(self):
        queryset = (
            Article.objects.published()
            .filter(business__status=BusinessStatus.ACTIVE.value)
            .select_related('business')
            .order_by('-published_at')
        )
        params = self.request.query_params

        business = params.get('business')
        if business:
            queryset = queryset.filter(business__slug=business)

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search) | Q(excerpt__icontains=search)
            )

        return queryset
