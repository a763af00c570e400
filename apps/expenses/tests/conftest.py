import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.trips.models import TripParticipant, TripRole, ParticipantKind
from apps.trips.services import create_trip


def make_user(name):
    return User.objects.create_user(
        email=f'{name.lower()}@example.com',
        password='TestPass123!',
        display_name=name,
    )


def make_client(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def alice(db):
    """Trip admin."""
    return make_user('Alice')


@pytest.fixture
def bob(db):
    """Trip editor."""
    return make_user('Bob')


@pytest.fixture
def vera(db):
    """Trip viewer."""
    return make_user('Vera')


@pytest.fixture
def outsider(db):
    return make_user('Outsider')


@pytest.fixture
def trip(alice, bob, vera):
    """CLP trip: Alice (admin), Bob (editor), Vera (viewer) and ghost Grandma."""
    trip = create_trip(name='Santiago', created_by=alice, default_currency='CLP')
    TripParticipant.objects.create(
        trip=trip, user=bob, name='Bob', kind=ParticipantKind.REGISTERED, role=TripRole.EDITOR
    )
    TripParticipant.objects.create(
        trip=trip, user=vera, name='Vera', kind=ParticipantKind.REGISTERED, role=TripRole.VIEWER
    )
    TripParticipant.objects.create(
        trip=trip, name='Grandma', kind=ParticipantKind.GHOST, role=TripRole.VIEWER
    )
    return trip


@pytest.fixture
def members(trip):
    """Participant rows of the trip keyed by name."""
    return {p.name: p for p in trip.participants.all()}


@pytest.fixture
def other_trip(outsider):
    return create_trip(name='Elsewhere', created_by=outsider)


@pytest.fixture
def alice_client(alice):
    return make_client(alice)


@pytest.fixture
def bob_client(bob):
    return make_client(bob)


@pytest.fixture
def vera_client(vera):
    return make_client(vera)


@pytest.fixture
def outsider_client(outsider):
    return make_client(outsider)
