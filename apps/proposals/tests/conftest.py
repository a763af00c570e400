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


def add_member(trip, user, role=TripRole.EDITOR):
    return TripParticipant.objects.create(
        trip=trip,
        user=user,
        name=user.get_display_name(),
        kind=ParticipantKind.REGISTERED,
        role=role,
    )


def add_ghost(trip, name):
    return TripParticipant.objects.create(
        trip=trip,
        name=name,
        kind=ParticipantKind.GHOST,
        role=TripRole.VIEWER,
    )


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
def alice(db):
    """Trip creator and admin."""
    return make_user('Alice')


@pytest.fixture
def bob(db):
    return make_user('Bob')


@pytest.fixture
def carol(db):
    return make_user('Carol')


@pytest.fixture
def outsider(db):
    return make_user('Outsider')


@pytest.fixture
def solo_trip(alice):
    """Trip whose only participant is Alice."""
    return create_trip(name='Solo', created_by=alice)


@pytest.fixture
def trip(alice, bob, carol):
    """Trip with three eligible voters (required = 2)."""
    trip = create_trip(name='Lisbon', created_by=alice)
    add_member(trip, bob)
    add_member(trip, carol)
    return trip


@pytest.fixture
def alice_client(alice):
    return make_client(alice)


@pytest.fixture
def bob_client(bob):
    return make_client(bob)


@pytest.fixture
def carol_client(carol):
    return make_client(carol)


@pytest.fixture
def outsider_client(outsider):
    return make_client(outsider)
