import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.trips.models import TripParticipant, TripRole, ParticipantKind
from apps.trips.services import create_trip


def make_client(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Trip creator (ADMIN)."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Trip Admin',
    )


@pytest.fixture
def editor_user(db):
    return User.objects.create_user(
        email='editor@example.com',
        password='TestPass123!',
        display_name='Trip Editor',
    )


@pytest.fixture
def outsider(db):
    """User that takes part in no trip."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider',
    )


@pytest.fixture
def trip(admin_user):
    """Trip with only its creator."""
    return create_trip(
        name='Tokyo 2026',
        created_by=admin_user,
        destination='Tokyo',
        default_currency='JPY',
    )


@pytest.fixture
def trip_with_members(trip, editor_user):
    """Trip with an admin, an editor and a ghost."""
    TripParticipant.objects.create(
        trip=trip,
        user=editor_user,
        name=editor_user.get_display_name(),
        kind=ParticipantKind.REGISTERED,
        role=TripRole.EDITOR,
    )
    TripParticipant.objects.create(
        trip=trip,
        name='Grandma',
        kind=ParticipantKind.GHOST,
        role=TripRole.VIEWER,
    )
    return trip


@pytest.fixture
def admin_client(admin_user):
    return make_client(admin_user)


@pytest.fixture
def editor_client(editor_user):
    return make_client(editor_user)


@pytest.fixture
def outsider_client(outsider):
    return make_client(outsider)
