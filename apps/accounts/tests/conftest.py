import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserStatus

PASSWORD = 'TestPass123!'


def make_member(email, display_name='', status=UserStatus.ACTIVE):
    return User.objects.create_user(
        email=email,
        password=PASSWORD,
        display_name=display_name,
        status=status,
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    """Active traveller who logs in with PASSWORD."""
    return make_member('testuser@example.com', 'Test User')


@pytest.fixture
def other_user(db):
    return make_member('otheruser@example.com', 'Other User')


@pytest.fixture
def user_disabled(db):
    return make_member('disabled@example.com', 'Disabled User', status=UserStatus.DISABLED)


@pytest.fixture
def authenticated_client(api_client, user):
    token = RefreshToken.for_user(user).access_token
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return api_client


@pytest.fixture
def staff_user(db):
    member = make_member('staff@example.com', 'Staff')
    member.is_staff = True
    member.save(update_fields=['is_staff'])
    return member


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    token = RefreshToken.for_user(staff_user).access_token
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client
