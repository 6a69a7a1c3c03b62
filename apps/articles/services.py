"""
Article moderation service: create, edit, delete and status transitions.

Every operation:
1. re-reads the article row with select_for_update() inside
   transaction.atomic(),
2. checks ArticlePolicy against the locked row,
3. writes the change and exactly one audit entry in the same transaction.

A failed guard raises before anything is written.
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.core.audit import AuditTrail
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.models import unique_slug

from .models import Article
from .state_machine import ArticlePolicy, ArticleStatus

logger = logging.getLogger(__name__)

CONTENT_FIELDS = ('title', 'excerpt', 'content', 'seo_title', 'seo_description')


class ArticleModerationService:
    """
    Transactional article operations for one acting TenancyScope.

    Usage:
        service = ArticleModerationService(request.tenancy)
        article = service.submit(article)
    """

    def __init__(self, scope, audit_trail: Optional[AuditTrail] = None):
        self.scope = scope
        self.policy = ArticlePolicy(scope)
        self.audit_trail = audit_trail or AuditTrail()

    @property
    def user(self):
        return self.scope.user

    def _lock(self, article: Article) -> Article:
        try:
            return Article.objects.select_for_update().get(pk=article.pk)
        except Article.DoesNotExist:
            raise NotFoundError("Article not found")

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any], business=None) -> Article:
        """
        Create an article.

        Owners always write into their own business; admins must name one.
        Admins creating directly as approved stamp the approval fields.
        """
        if self.scope.is_business_owner and business is None:
            business = self.scope.business
        status = ArticleStatus.from_string(data.get('status') or ArticleStatus.DRAFT.value)

        self.policy.ensure_create(business, status)
        if business is None:
            raise ValidationError("Business is required.", field='business')

        article = Article(business=business, status=status.value)
        for field in CONTENT_FIELDS:
            if field in data:
                setattr(article, field, data[field] if data[field] is not None else '')

        if status == ArticleStatus.APPROVED:
            now = timezone.now()
            article.approved_by = self.user
            article.approved_at = now
            article.published_at = now

        with transaction.atomic():
            article.slug = unique_slug(Article, article.title)
            article.save()
            self.audit_trail.log_create(
                self.user, article, f"Article '{article.title}' created as {status.value}",
            )

        logger.info("Article %s created by user=%s status=%s", article.pk, self.user.pk, status.value)
        return article

    def update(self, article: Article, data: Dict[str, Any]) -> Article:
        """Edit content. Status is changed only by submit/approve/reject."""
        with transaction.atomic():
            article = self._lock(article)
            self.policy.ensure_update(article)

            old_title = article.title
            for field in CONTENT_FIELDS:
                if field in data:
                    setattr(article, field, data[field] if data[field] is not None else '')

            if self.scope.is_village_admin and data.get('business') is not None:
                article.business = data['business']

            if article.title != old_title:
                article.slug = unique_slug(Article, article.title, article)

            article.save()
            self.audit_trail.log_update(self.user, article, f"Article '{article.title}' updated")

        logger.info("Article %s updated by user=%s", article.pk, self.user.pk)
        return article

    def delete(self, article: Article) -> None:
        with transaction.atomic():
            article = self._lock(article)
            self.policy.ensure_delete(article)
            self.audit_trail.log_delete(self.user, article, f"Article '{article.title}' deleted")
            article_id = article.pk
            article.delete()

        logger.info("Article %s deleted by user=%s", article_id, self.user.pk)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def submit(self, article: Article) -> Article:
        """draft/rejected -> pending. Clears rejection notes."""
        with transaction.atomic():
            article = self._lock(article)
            self.policy.ensure_submit(article)

            previous = article.status
            article.status = ArticleStatus.PENDING.value
            article.rejection_notes = None
            article.save(update_fields=['status', 'rejection_notes', 'updated_at'])
            self.audit_trail.log_submit(
                self.user, article, f"Article '{article.title}' submitted for review",
            )

        logger.info("Article %s %s -> pending by user=%s", article.pk, previous, self.user.pk)
        return article

    def approve(self, article: Article) -> Article:
        """pending -> approved. Publishes the article."""
        with transaction.atomic():
            article = self._lock(article)
            self.policy.ensure_approve(article)

            now = timezone.now()
            article.status = ArticleStatus.APPROVED.value
            article.approved_by = self.user
            article.approved_at = now
            article.published_at = now
            article.rejection_notes = None
            article.save(update_fields=[
                'status', 'approved_by', 'approved_at', 'published_at',
                'rejection_notes', 'updated_at',
            ])
            self.audit_trail.log_approve(self.user, article, f"Article '{article.title}' approved")

        logger.info("Article %s pending -> approved by user=%s", article.pk, self.user.pk)
        return article

    def reject(self, article: Article, notes: Optional[str]) -> Article:
        """pending -> rejected. A reason is required."""
        with transaction.atomic():
            article = self._lock(article)
            self.policy.ensure_reject(article)

            notes = self.clean_rejection_notes(notes)
            article.status = ArticleStatus.REJECTED.value
            article.rejection_notes = notes
            article.save(update_fields=['status', 'rejection_notes', 'updated_at'])
            self.audit_trail.log_reject(
                self.user, article, f"Article '{article.title}' rejected: {notes}",
            )

        logger.info("Article %s pending -> rejected by user=%s", article.pk, self.user.pk)
        return article

    @staticmethod
    def clean_rejection_notes(notes: Optional[str]) -> str:
        notes = (notes or '').strip()
        if not notes:
            raise ValidationError("A rejection reason is required.", field='rejection_notes')
        max_length = settings.ARTICLE_REJECTION_NOTES_MAX_LENGTH
        if len(notes) > max_length:
            raise ValidationError(
                f"Rejection reason must be at most {max_length} characters.",
                field='rejection_notes',
            )
        return notes
