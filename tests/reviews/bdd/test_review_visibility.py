"""BDD tests for public review visibility."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when
from reviews.errors import Forbidden
from reviews.review import queries
from reviews.review.moderation import VerifyReview

scenarios("features/review_visibility.feature")


@when("the review is verified by an admin")
def verify(review_id, admin):
    current_domain.process(VerifyReview(actor_id=str(admin.id), review_id=review_id), asynchronous=False)


@when("an anonymous visitor opens the review", target_fixture="visit")
def open_review(review_id):
    try:
        return {"view": queries.get_review(review_id), "exc": None}
    except Forbidden as exc:
        return {"view": None, "exc": exc}


@then(parsers.cfparse('access is refused with "{message}"'))
def refused(visit, message):
    assert visit["view"] is None
    assert message in str(visit["exc"].messages)


@then("the visitor sees the review title")
def sees_title(visit):
    assert visit["view"]["title"] == "Responsive landlord"


@then(parsers.cfparse('the visitor does not see "{field}"'))
def hidden_field(visit, field):
    assert field not in visit["view"]
