"""
Tests for the article moderation policy.

Pure tests: scopes and articles are unsaved model instances.
"""

import uuid

import pytest

from apps.articles.models import Article
from apps.articles.state_machine import (
    VALID_TRANSITIONS,
    ArticlePolicy,
    ArticleStatus,
    can_transition,
)
from apps.businesses.models import Business
from apps.businesses.tenancy import TenancyScope
from apps.core.exceptions import ForbiddenError, InvalidStateTransitionError
from apps.core.models import UserRole


@pytest.fixture
def own_business():
    return Business(id=uuid.uuid4(), status='active')


@pytest.fixture
def foreign_business():
    return Business(id=uuid.uuid4(), status='active')


@pytest.fixture
def owner_policy(own_business):
    return ArticlePolicy(TenancyScope(user=object(), role=UserRole.BUSINESS_OWNER, business=own_business))


@pytest.fixture
def unlinked_policy():
    return ArticlePolicy(TenancyScope(user=object(), role=UserRole.BUSINESS_OWNER, business=None))


@pytest.fixture
def admin_policy():
    return ArticlePolicy(TenancyScope(user=object(), role=UserRole.VILLAGE_ADMIN))


def article_in(business, status):
    return Article(business_id=business.id, status=status.value, title='Pecel')


ALL_STATUSES = list(ArticleStatus)


class TestArticleStatus:

    def test_closed_set_of_states(self):
        assert {s.value for s in ArticleStatus} == {'draft', 'pending', 'approved', 'rejected'}

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            ArticleStatus.from_string('published')

    def test_approved_has_no_outgoing_transition(self):
        assert VALID_TRANSITIONS[ArticleStatus.APPROVED] == set()

    @pytest.mark.parametrize('current,target,expected', [
        (ArticleStatus.DRAFT, ArticleStatus.PENDING, True),
        (ArticleStatus.REJECTED, ArticleStatus.PENDING, True),
        (ArticleStatus.PENDING, ArticleStatus.APPROVED, True),
        (ArticleStatus.PENDING, ArticleStatus.REJECTED, True),
        (ArticleStatus.DRAFT, ArticleStatus.APPROVED, False),
        (ArticleStatus.APPROVED, ArticleStatus.DRAFT, False),
        (ArticleStatus.REJECTED, ArticleStatus.DRAFT, False),
        (ArticleStatus.PENDING, ArticleStatus.PENDING, False),
    ])
    def test_transition_table(self, current, target, expected):
        assert can_transition(current, target) is expected


class TestOwnerPolicy:

    @pytest.mark.parametrize('status', ALL_STATUSES)
    def test_foreign_article_is_forbidden_regardless_of_status(
        self, owner_policy, foreign_business, status,
    ):
        article = article_in(foreign_business, status)

        for guard in (owner_policy.ensure_view, owner_policy.ensure_update,
                      owner_policy.ensure_delete, owner_policy.ensure_submit):
            with pytest.raises(ForbiddenError) as exc_info:
                guard(article)
            assert not isinstance(exc_info.value, InvalidStateTransitionError)

    @pytest.mark.parametrize('status,allowed', [
        (ArticleStatus.DRAFT, True),
        (ArticleStatus.PENDING, True),
        (ArticleStatus.REJECTED, True),
        (ArticleStatus.APPROVED, False),
    ])
    def test_update_own_article(self, owner_policy, own_business, status, allowed):
        assert owner_policy.can_update(article_in(own_business, status)) is allowed

    @pytest.mark.parametrize('status,allowed', [
        (ArticleStatus.DRAFT, True),
        (ArticleStatus.PENDING, False),
        (ArticleStatus.REJECTED, False),
        (ArticleStatus.APPROVED, False),
    ])
    def test_delete_own_article(self, owner_policy, own_business, status, allowed):
        assert owner_policy.can_delete(article_in(own_business, status)) is allowed

    @pytest.mark.parametrize('status,allowed', [
        (ArticleStatus.DRAFT, True),
        (ArticleStatus.REJECTED, True),
        (ArticleStatus.PENDING, False),
        (ArticleStatus.APPROVED, False),
    ])
    def test_submit_own_article(self, owner_policy, own_business, status, allowed):
        assert owner_policy.can_submit(article_in(own_business, status)) is allowed

    def test_wrong_state_is_an_invalid_transition(self, owner_policy, own_business):
        with pytest.raises(InvalidStateTransitionError):
            owner_policy.ensure_submit(article_in(own_business, ArticleStatus.PENDING))
        with pytest.raises(InvalidStateTransitionError):
            owner_policy.ensure_update(article_in(own_business, ArticleStatus.APPROVED))

    def test_owner_cannot_review(self, owner_policy, own_business):
        article = article_in(own_business, ArticleStatus.PENDING)

        assert not owner_policy.can_approve(article)
        with pytest.raises(ForbiddenError):
            owner_policy.ensure_approve(article)
        with pytest.raises(ForbiddenError):
            owner_policy.ensure_reject(article)

    def test_create_only_for_own_business(self, owner_policy, own_business, foreign_business):
        assert owner_policy.can_create()
        assert owner_policy.can_create(own_business)
        assert not owner_policy.can_create(foreign_business)

    def test_owner_cannot_create_approved(self, owner_policy, own_business):
        owner_policy.ensure_create(own_business, ArticleStatus.PENDING)
        with pytest.raises(InvalidStateTransitionError):
            owner_policy.ensure_create(own_business, ArticleStatus.APPROVED)

    def test_unlinked_owner_cannot_do_anything(self, unlinked_policy, own_business):
        article = article_in(own_business, ArticleStatus.DRAFT)

        assert not unlinked_policy.can_create()
        with pytest.raises(ForbiddenError):
            unlinked_policy.ensure_create()
        with pytest.raises(ForbiddenError):
            unlinked_policy.ensure_submit(article)
        with pytest.raises(ForbiddenError):
            unlinked_policy.ensure_delete(article)


class TestAdminPolicy:

    @pytest.mark.parametrize('status', ALL_STATUSES)
    def test_admin_can_edit_and_delete_any_article(self, admin_policy, foreign_business, status):
        article = article_in(foreign_business, status)

        assert admin_policy.can_update(article)
        assert admin_policy.can_delete(article)

    def test_admin_cannot_submit(self, admin_policy, foreign_business):
        with pytest.raises(ForbiddenError):
            admin_policy.ensure_submit(article_in(foreign_business, ArticleStatus.DRAFT))

    @pytest.mark.parametrize('status', [ArticleStatus.DRAFT, ArticleStatus.APPROVED, ArticleStatus.REJECTED])
    def test_review_only_from_pending(self, admin_policy, foreign_business, status):
        article = article_in(foreign_business, status)

        with pytest.raises(InvalidStateTransitionError):
            admin_policy.ensure_approve(article)
        with pytest.raises(InvalidStateTransitionError):
            admin_policy.ensure_reject(article)

    def test_review_pending(self, admin_policy, foreign_business):
        article = article_in(foreign_business, ArticleStatus.PENDING)

        assert admin_policy.can_approve(article)
        assert admin_policy.can_reject(article)

    def test_admin_may_create_approved_but_not_rejected(self, admin_policy, foreign_business):
        admin_policy.ensure_create(foreign_business, ArticleStatus.APPROVED)
        with pytest.raises(InvalidStateTransitionError):
            admin_policy.ensure_create(foreign_business, ArticleStatus.REJECTED)
