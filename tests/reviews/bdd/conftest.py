"""Shared BDD fixtures and step definitions for review moderation."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from reviews.review.moderation import VerifyReview
from reviews.review.review import Review


@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


def _load(review_id):
    return current_domain.repository_for(Review).get(review_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse("a pending review with {count:d} verification documents"),
    target_fixture="review_id",
)
def pending_review(author, submit_review, count):
    return submit_review(author, documents=count)


@given("a published review", target_fixture="review_id")
def published_review(author, admin, submit_review):
    review_id = submit_review(author)
    current_domain.process(VerifyReview(actor_id=str(admin.id), review_id=review_id), asynchronous=False)
    return review_id


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the review status is "{status}"'))
def review_status(review_id, status):
    assert _load(review_id).status == status


@then(parsers.cfparse('the verification status is "{status}"'))
def verification_status(review_id, status):
    assert _load(review_id).verification_status == status


@then("the review is anonymized")
def review_anonymized(review_id):
    review = _load(review_id)
    assert review.is_anonymized is True
    assert review.anonymization_date is not None


@then("no verification documents remain")
def no_documents(review_id, document_store):
    assert len(_load(review_id).verification_documents) == 0
    assert document_store.files == {}


@then(parsers.cfparse("{count:d} verification documents remain"))
def documents_remain(review_id, document_store, count):
    assert len(_load(review_id).verification_documents) == count
    assert len(document_store.files) == count


@then(parsers.cfparse('a validation error mentions "{message}"'))
def validation_error(error, message):
    assert isinstance(error["exc"], ValidationError)
    assert message in str(error["exc"])
