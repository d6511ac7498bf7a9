import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture
from reviews.documents import reset_document_store, set_document_store
from reviews.documents.fake_store import FakeDocumentStore
from reviews.notifications import reset_email_channel, set_email_channel
from reviews.notifications.fake_email import FakeEmailAdapter
from reviews.throttle import reset_rate_limiters


@pytest.fixture(scope="session")
def reviews_bed():
    from reviews.domain import reviews

    bed = DomainFixture(reviews)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(reviews_bed):
    with reviews_bed.domain_context():
        yield

        # Clear all databases and drain the event store after every test
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def document_store():
    store = FakeDocumentStore()
    set_document_store(store)
    yield store
    reset_document_store()


@pytest.fixture(autouse=True)
def email_channel():
    channel = FakeEmailAdapter()
    set_email_channel(channel)
    yield channel
    reset_email_channel()


@pytest.fixture(autouse=True)
def _fresh_rate_limiters():
    reset_rate_limiters()
    yield
    reset_rate_limiters()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
REVIEW_BODY = (
    "The landlord answered every repair request within two days and returned the deposit in full."
)
PASSWORD = "correct-horse-battery"


@pytest.fixture()
def make_user():
    from reviews.account.user import User

    counter = {"n": 0}

    def _make(username=None, email=None, role="user", verified=True, password=PASSWORD):
        counter["n"] += 1
        user = User.register(
            username=username or f"tenant{counter['n']}",
            email=email or f"tenant{counter['n']}@example.com",
            role=role,
            email_verified=verified,
            password=password,
        )
        current_domain.repository_for(User).add(user)
        return current_domain.repository_for(User).get(user.id)

    return _make


@pytest.fixture()
def author(make_user):
    return make_user(username="tenant", email="tenant@example.com")


@pytest.fixture()
def admin(make_user):
    return make_user(username="moderator", email="moderator@example.com", role="admin")


@pytest.fixture()
def submit_review(document_store):
    """Submit a review through the command pipeline, optionally with stored documents."""
    import json

    from reviews.review.submission import SubmitReview

    def _submit(user, documents=0, **overrides):
        stored = [
            document_store.store(f"lease-{i}.pdf", "application/pdf", b"%PDF-1.4 lease")
            for i in range(documents)
        ]
        fields = {
            "user_id": str(user.id),
            "property_name": "Maple Court",
            "property_address": "12 Maple Court, Springfield",
            "landlord_name": "Acme Lettings",
            "rating": 4,
            "title": "Responsive landlord",
            "body": REVIEW_BODY,
            "documents": json.dumps(stored) if stored else None,
        }
        fields.update(overrides)
        return current_domain.process(SubmitReview(**fields), asynchronous=False)

    return _submit
