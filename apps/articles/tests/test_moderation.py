"""
Tests for ArticleModerationService.

Covers the moderation workflow end to end against the database: state
changes, approval stamps, rejection notes and the audit entry written for
every successful operation (and none for failed ones).
"""

import pytest
from django.test import override_settings

from apps.articles.models import Article
from apps.articles.services import ArticleModerationService
from apps.articles.state_machine import ArticleStatus
from apps.businesses.tenancy import resolve_tenancy
from apps.core.audit import AuditTrail
from apps.core.exceptions import (
    ForbiddenError,
    InvalidStateTransitionError,
    ValidationError,
)
from apps.core.models import ActivityLog


class RecordingAuditTrail(AuditTrail):
    """Keeps (action, target_type, target_id) tuples alongside the real rows."""

    def __init__(self):
        self.calls = []

    def record(self, user, action, target_type, target_id, description=None):
        self.calls.append((action, target_type, str(target_id)))
        return super().record(user, action, target_type, target_id, description)


@pytest.fixture
def audit():
    return RecordingAuditTrail()


@pytest.fixture
def owner_service(owner, business, audit):
    return ArticleModerationService(resolve_tenancy(owner), audit_trail=audit)


@pytest.fixture
def admin_service(village_admin, audit):
    return ArticleModerationService(resolve_tenancy(village_admin), audit_trail=audit)


@pytest.fixture
def make_article(business):
    def _make(status=ArticleStatus.DRAFT, target=None, **fields):
        return Article.objects.create(
            business=target or business,
            title=fields.pop('title', 'Resep Pecel Kuwaru'),
            slug=fields.pop('slug', None) or f"artikel-{Article.objects.count() + 1}",
            content=fields.pop('content', 'Isi artikel'),
            status=status.value,
            **fields,
        )
    return _make


@pytest.mark.django_db
class TestCreate:

    def test_owner_creates_draft_in_own_business(self, owner_service, business, audit):
        article = owner_service.create({'title': 'Pecel Enak', 'content': 'Isi'})

        assert article.business == business
        assert article.status == ArticleStatus.DRAFT.value
        assert article.slug == 'pecel-enak'
        assert audit.calls == [(ActivityLog.ACTION_CREATE, 'article', str(article.pk))]

    def test_owner_may_create_directly_as_pending(self, owner_service):
        article = owner_service.create({'title': 'Pecel', 'content': 'Isi', 'status': 'pending'})

        assert article.status == ArticleStatus.PENDING.value
        assert article.approved_by is None

    def test_owner_cannot_create_approved(self, owner_service, audit):
        with pytest.raises(InvalidStateTransitionError):
            owner_service.create({'title': 'Pecel', 'content': 'Isi', 'status': 'approved'})

        assert not Article.objects.exists()
        assert audit.calls == []

    def test_owner_cannot_create_for_foreign_business(self, owner_service, other_owner):
        with pytest.raises(ForbiddenError):
            owner_service.create({'title': 'X', 'content': 'Y'}, business=other_owner.business)

    def test_admin_creates_approved_with_stamps(self, admin_service, village_admin, business):
        article = admin_service.create(
            {'title': 'Festival Desa', 'content': 'Isi', 'status': 'approved'}, business=business,
        )

        assert article.status == ArticleStatus.APPROVED.value
        assert article.approved_by == village_admin
        assert article.approved_at is not None
        assert article.published_at is not None

    def test_admin_must_name_business(self, admin_service):
        with pytest.raises(ValidationError):
            admin_service.create({'title': 'X', 'content': 'Y'})

    def test_slugs_are_unique(self, owner_service):
        first = owner_service.create({'title': 'Pecel', 'content': 'a'})
        second = owner_service.create({'title': 'Pecel', 'content': 'b'})

        assert first.slug == 'pecel'
        assert second.slug == 'pecel-1'


@pytest.mark.django_db
class TestSubmit:

    def test_draft_to_pending_is_audited(self, owner_service, make_article, audit):
        """Owner submits a draft: pending, one submit entry."""
        article = make_article(ArticleStatus.DRAFT)

        result = owner_service.submit(article)

        assert result.status == ArticleStatus.PENDING.value
        article.refresh_from_db()
        assert article.status == ArticleStatus.PENDING.value
        assert audit.calls == [(ActivityLog.ACTION_SUBMIT, 'article', str(article.pk))]
        assert ActivityLog.objects.filter(action='submit', target_id=str(article.pk)).count() == 1

    def test_resubmit_after_rejection_clears_notes(self, owner_service, admin_service, make_article):
        article = make_article(ArticleStatus.PENDING)
        admin_service.reject(article, 'Foto kurang jelas')

        result = owner_service.submit(article)

        assert result.status == ArticleStatus.PENDING.value
        assert result.rejection_notes is None
        article.refresh_from_db()
        assert article.rejection_notes is None

    def test_submitting_pending_article_fails(self, owner_service, make_article, audit):
        article = make_article(ArticleStatus.PENDING)

        with pytest.raises(InvalidStateTransitionError):
            owner_service.submit(article)

        assert audit.calls == []

    def test_submitting_approved_article_fails(self, owner_service, make_article):
        with pytest.raises(InvalidStateTransitionError):
            owner_service.submit(make_article(ArticleStatus.APPROVED))

    def test_admin_cannot_submit(self, admin_service, make_article):
        with pytest.raises(ForbiddenError):
            admin_service.submit(make_article(ArticleStatus.DRAFT))

    def test_guard_uses_current_row_not_stale_instance(self, owner_service, make_article):
        article = make_article(ArticleStatus.DRAFT)
        Article.objects.filter(pk=article.pk).update(status=ArticleStatus.PENDING.value)

        # `article` still says draft in memory
        with pytest.raises(InvalidStateTransitionError):
            owner_service.submit(article)


@pytest.mark.django_db
class TestReview:

    def test_approve_pending(self, admin_service, owner_service, village_admin, make_article, audit):
        """Approval stamps reviewer and time; the owner can no longer edit."""
        article = make_article(ArticleStatus.PENDING, rejection_notes='lama')

        result = admin_service.approve(article)

        assert result.status == ArticleStatus.APPROVED.value
        assert result.approved_by_id == village_admin.id
        assert result.approved_at is not None
        assert result.published_at is not None
        assert result.rejection_notes is None
        assert audit.calls == [(ActivityLog.ACTION_APPROVE, 'article', str(article.pk))]

        with pytest.raises(ForbiddenError):
            owner_service.update(result, {'title': 'Ganti judul'})

    def test_reject_pending_with_reason(self, admin_service, make_article, audit):
        article = make_article(ArticleStatus.PENDING)

        result = admin_service.reject(article, 'missing required fields')

        assert result.status == ArticleStatus.REJECTED.value
        assert result.rejection_notes == 'missing required fields'
        assert result.approved_by is None
        assert audit.calls == [(ActivityLog.ACTION_REJECT, 'article', str(article.pk))]

    @pytest.mark.parametrize('notes', [None, '', '   '])
    def test_reject_requires_reason(self, admin_service, make_article, audit, notes):
        article = make_article(ArticleStatus.PENDING)

        with pytest.raises(ValidationError):
            admin_service.reject(article, notes)

        article.refresh_from_db()
        assert article.status == ArticleStatus.PENDING.value
        assert audit.calls == []

    @override_settings(ARTICLE_REJECTION_NOTES_MAX_LENGTH=10)
    def test_reject_reason_length_limit(self, admin_service, make_article):
        with pytest.raises(ValidationError):
            admin_service.reject(make_article(ArticleStatus.PENDING), 'x' * 11)

    @pytest.mark.parametrize('status', [ArticleStatus.DRAFT, ArticleStatus.APPROVED, ArticleStatus.REJECTED])
    def test_review_only_from_pending(self, admin_service, make_article, audit, status):
        article = make_article(status)

        with pytest.raises(InvalidStateTransitionError):
            admin_service.approve(article)
        with pytest.raises(InvalidStateTransitionError):
            admin_service.reject(article, 'alasan')

        article.refresh_from_db()
        assert article.status == status.value
        assert audit.calls == []

    def test_owner_cannot_approve(self, owner_service, make_article):
        with pytest.raises(ForbiddenError):
            owner_service.approve(make_article(ArticleStatus.PENDING))

    def test_second_review_of_same_article_fails(self, admin_service, make_article):
        article = make_article(ArticleStatus.PENDING)
        admin_service.approve(article)

        with pytest.raises(InvalidStateTransitionError):
            admin_service.reject(article, 'terlambat')


@pytest.mark.django_db
class TestUpdateAndDelete:

    @pytest.mark.parametrize('status', list(ArticleStatus))
    def test_owner_cannot_touch_foreign_article(self, owner_service, other_owner, make_article, status):
        article = make_article(status, target=other_owner.business)

        with pytest.raises(ForbiddenError):
            owner_service.update(article, {'title': 'Bukan milikku'})
        with pytest.raises(ForbiddenError):
            owner_service.delete(article)

        assert Article.objects.filter(pk=article.pk).exists()

    def test_owner_edits_rejected_article_without_status_change(self, owner_service, make_article, audit):
        article = make_article(ArticleStatus.REJECTED, rejection_notes='perbaiki')

        result = owner_service.update(article, {'content': 'Sudah diperbaiki'})

        assert result.status == ArticleStatus.REJECTED.value
        assert result.content == 'Sudah diperbaiki'
        assert audit.calls == [(ActivityLog.ACTION_UPDATE, 'article', str(article.pk))]

    def test_title_change_regenerates_slug(self, owner_service, make_article):
        article = make_article(ArticleStatus.DRAFT)

        result = owner_service.update(article, {'title': 'Judul Baru'})

        assert result.slug == 'judul-baru'

    def test_owner_deletes_draft(self, owner_service, make_article, audit):
        article = make_article(ArticleStatus.DRAFT)
        article_id = str(article.pk)

        owner_service.delete(article)

        assert not Article.objects.filter(pk=article_id).exists()
        assert audit.calls == [(ActivityLog.ACTION_DELETE, 'article', article_id)]

    def test_owner_cannot_delete_pending(self, owner_service, make_article, audit):
        """Only drafts are owner-deletable."""
        article = make_article(ArticleStatus.PENDING)

        with pytest.raises(ForbiddenError):
            owner_service.delete(article)

        assert Article.objects.filter(pk=article.pk).exists()
        assert audit.calls == []

    def test_admin_edits_and_deletes_approved(self, admin_service, make_article, other_owner):
        article = make_article(ArticleStatus.APPROVED)

        updated = admin_service.update(article, {'title': 'Disunting', 'business': other_owner.business})
        assert updated.business == other_owner.business
        assert updated.status == ArticleStatus.APPROVED.value

        admin_service.delete(updated)
        assert not Article.objects.filter(pk=article.pk).exists()


@pytest.mark.django_db
class TestUnlinkedOwner:

    def test_every_operation_is_forbidden(self, unlinked_owner, make_article):
        service = ArticleModerationService(resolve_tenancy(unlinked_owner))
        article = make_article(ArticleStatus.DRAFT)

        with pytest.raises(ForbiddenError):
            service.create({'title': 'X', 'content': 'Y'})
        for operation in (service.submit, service.delete):
            with pytest.raises(ForbiddenError):
                operation(article)
        with pytest.raises(ForbiddenError):
            service.update(article, {'title': 'Z'})

        assert not ActivityLog.objects.exists()
