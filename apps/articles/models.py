"""
Article models for the UMKM Directory.
Articles written by businesses and moderated by village admins.
"""

from django.conf import settings
from django.db import models

from apps.core.models import BaseModel

from .state_machine import ArticleStatus


class ArticleQuerySet(models.QuerySet):

    def published(self):
        """Approved and published; what the public site shows."""
        return self.filter(
            status=ArticleStatus.APPROVED.value,
            published_at__isnull=False,
        )

    def for_business(self, business):
        return self.filter(business=business)


class Article(BaseModel):
    """
    An article belonging to one business.

    Status moves only through apps.articles.services.ArticleModerationService.
    """

    STATUS_CHOICES = [
        (ArticleStatus.DRAFT.value, 'Draft'),
        (ArticleStatus.PENDING.value, 'Menunggu Review'),
        (ArticleStatus.APPROVED.value, 'Disetujui'),
        (ArticleStatus.REJECTED.value, 'Ditolak'),
    ]

    business = models.ForeignKey(
        'businesses.Business',
        on_delete=models.CASCADE,
        related_name='articles',
        verbose_name='Business',
        help_text='The business this article belongs to'
    )

    title = models.CharField(
        max_length=255,
        verbose_name='Title'
    )

    slug = models.SlugField(
        max_length=255,
        unique=True,
        verbose_name='Slug'
    )

    excerpt = models.TextField(
        blank=True,
        max_length=500,
        verbose_name='Excerpt',
        help_text='Short summary for previews'
    )

    content = models.TextField(
        verbose_name='Content'
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=ArticleStatus.DRAFT.value,
        db_index=True,
        verbose_name='Status'
    )

    seo_title = models.CharField(
        max_length=60,
        blank=True,
        verbose_name='SEO Title',
        help_text='Overrides the title in search results'
    )

    seo_description = models.CharField(
        max_length=160,
        blank=True,
        verbose_name='SEO Description'
    )

    rejection_notes = models.TextField(
        null=True,
        blank=True,
        verbose_name='Rejection Notes',
        help_text='Reason given by the reviewing admin; cleared on resubmission'
    )

    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_articles',
        verbose_name='Approved By'
    )

    approved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name='Approved At'
    )

    published_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name='Published At'
    )

    objects = ArticleQuerySet.as_manager()

    class Meta:
        db_table = 'articles'
        verbose_name = 'Article'
        verbose_name_plural = 'Articles'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'published_at'], name='article_status_published_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=[status.value for status in ArticleStatus]),
                name='article_status_valid',
            ),
        ]

    def __str__(self):
        return self.title

    @property
    def status_enum(self) -> ArticleStatus:
        return ArticleStatus.from_string(self.status)
