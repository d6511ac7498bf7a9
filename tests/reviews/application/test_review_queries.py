"""Application tests for review read access and the visibility rule."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from reviews.errors import Forbidden
from reviews.review import queries
from reviews.review.moderation import RejectReview, VerifyReview


def _publish(admin, review_id):
    current_domain.process(VerifyReview(actor_id=str(admin.id), review_id=review_id), asynchronous=False)


class TestGetReview:
    def test_pending_review_hidden_from_public(self, author, submit_review):
        review_id = submit_review(author)
        with pytest.raises(Forbidden) as exc:
            queries.get_review(review_id)
        assert exc.value.messages == {"review": ["This review is not publicly available"]}

    def test_published_review_is_stripped(self, author, admin, submit_review):
        review_id = submit_review(author, documents=1)
        _publish(admin, review_id)

        view = queries.get_review(review_id)

        assert view["id"] == review_id
        for private in ("user_id", "verification_documents", "metadata", "admin_notes", "flag_count"):
            assert private not in view

    def test_owner_sees_own_pending_review(self, author, submit_review):
        review_id = submit_review(author)
        view = queries.get_review(review_id, viewer=author)
        assert view["status"] == "pending_verification"
        assert "verification_documents" not in view

    def test_other_user_cannot_see_pending(self, author, submit_review, make_user):
        review_id = submit_review(author)
        with pytest.raises(Forbidden):
            queries.get_review(review_id, viewer=make_user())

    def test_admin_sees_everything(self, author, admin, submit_review):
        review_id = submit_review(author, documents=2, ip_address="198.51.100.7")
        view = queries.get_review(review_id, viewer=admin)
        assert view["user_id"] == str(author.id)
        assert len(view["verification_documents"]) == 2
        assert view["metadata"]["ip_address"] == "198.51.100.7"


class TestListPublished:
    def test_only_published_reviews_listed(self, author, admin, submit_review):
        published = submit_review(author)
        submit_review(author)
        rejected = submit_review(author)
        _publish(admin, published)
        current_domain.process(
            RejectReview(actor_id=str(admin.id), review_id=rejected, reason="Not a tenant"),
            asynchronous=False,
        )

        page = queries.list_published()
        assert page["total"] == 1
        assert [item["id"] for item in page["items"]] == [published]

    def test_address_filter_is_case_insensitive(self, author, admin, submit_review):
        maple = submit_review(author, property_address="12 Maple Court")
        oak = submit_review(author, property_address="4 Oak Street")
        _publish(admin, maple)
        _publish(admin, oak)

        page = queries.list_published(property_address="maple")
        assert [item["id"] for item in page["items"]] == [maple]

    def test_pagination(self, author, admin, submit_review):
        for _ in range(3):
            _publish(admin, submit_review(author))

        page = queries.list_published(page=2, limit=2)
        assert page["total"] == 3
        assert page["total_pages"] == 2
        assert page["current_page"] == 2
        assert len(page["items"]) == 1

    def test_empty(self):
        assert queries.list_published() == {"items": [], "total_pages": 0, "current_page": 1, "total": 0}


class TestMyReviews:
    def test_lists_only_own_reviews(self, author, submit_review, make_user):
        submit_review(author)
        submit_review(author)
        other = make_user()
        submit_review(other)

        mine = queries.list_my_reviews(author.id)
        assert mine["count"] == 2


class TestAdminListing:
    def test_status_filter(self, author, admin, submit_review):
        _publish(admin, submit_review(author))
        submit_review(author)

        page = queries.list_reviews_for_admin(status="pending_verification")
        assert page["total"] == 1
        assert page["items"][0]["status"] == "pending_verification"

    def test_sort_by_rating(self, author, submit_review):
        for rating in (3, 5, 1):
            submit_review(author, rating=rating)

        page = queries.list_reviews_for_admin(sort_by="rating", order="asc")
        assert [item["rating"] for item in page["items"]] == [1, 3, 5]

    def test_unknown_sort_field(self):
        with pytest.raises(ValidationError):
            queries.list_reviews_for_admin(sort_by="body")


class TestPublishedListingDegrades:
    def test_repository_failure_yields_empty_page(self, monkeypatch):
        def broken(*args):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(queries, "_published_page", broken)
        assert queries.list_published(page=2) == {"items": [], "total_pages": 0, "current_page": 2, "total": 0}
