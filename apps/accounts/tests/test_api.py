import uuid

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserStatus
from apps.trips.models import TripParticipant, TripRole, ParticipantKind
from apps.trips.services import create_trip


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'display_name': 'New User',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['status'] == UserStatus.ACTIVE
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_register_without_display_name(self, api_client):
        """Register without display name (optional field)."""
        url = reverse('users:register')
        data = {
            'email': 'minimal@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('users:register')
        data = {
            'email': user.email.upper(),
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_weak_password(self, api_client):
        url = reverse('users:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['email'] == user.email

        user.refresh_from_db()
        assert user.last_login is not None

    def test_login_wrong_password(self, api_client, user):
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'WrongPassword123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data

    def test_login_nonexistent_user(self, api_client):
        url = reverse('users:login')
        data = {
            'email': 'nonexistent@example.com',
            'password': 'SomePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_disabled_user(self, api_client, user_disabled):
        """Disabled accounts cannot log in."""
        url = reverse('users:login')
        data = {
            'email': user_disabled.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestGetCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['display_name'] == 'Test User'

    def test_get_current_user_unauthenticated(self, api_client):
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_disabled_user_token_rejected(self, api_client, user_disabled):
        """Tokens of disabled accounts no longer authenticate."""
        refresh = RefreshToken.for_user(user_disabled)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')

        response = api_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Delete Account Tests
# =============================================================================

@pytest.mark.django_db
class TestDeleteAccount:
    """Tests for DELETE /api/auth/user/delete/"""

    def test_delete_account_success(self, authenticated_client, user):
        """Deleting an account anonymizes it."""
        url = reverse('users:delete-account')
        data = {
            'password': 'TestPass123!',
            'confirm': True,
        }
        response = authenticated_client.delete(url, data, format='json')

        assert response.status_code == status.HTTP_204_NO_CONTENT

        user.refresh_from_db()
        assert user.status == UserStatus.DELETED
        assert user.is_active is False
        assert user.deleted_at is not None
        assert 'anonymized' in user.email

    def test_delete_account_wrong_password(self, authenticated_client, user):
        url = reverse('users:delete-account')
        data = {
            'password': 'WrongPassword!',
            'confirm': True,
        }
        response = authenticated_client.delete(url, data, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        user.refresh_from_db()
        assert user.status == UserStatus.ACTIVE

    def test_delete_account_without_confirmation(self, authenticated_client, user):
        url = reverse('users:delete-account')
        data = {
            'password': 'TestPass123!',
            'confirm': False,
        }
        response = authenticated_client.delete(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        user.refresh_from_db()
        assert user.status == UserStatus.ACTIVE


# =============================================================================
# User Status Tests
# =============================================================================

@pytest.mark.django_db
class TestUpdateUserStatus:
    """Tests for PATCH /api/auth/users/{id}/status/"""

    def test_disable_user(self, staff_client, other_user):
        url = reverse('users:user-status', args=[other_user.id])
        response = staff_client.patch(url, {'status': 'DISABLED'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['status'] == UserStatus.DISABLED
        assert response.data['items_recalculated'] == 0

        other_user.refresh_from_db()
        assert other_user.status == UserStatus.DISABLED
        assert other_user.is_active is False

    def test_delete_user_anonymizes(self, staff_client, other_user):
        url = reverse('users:user-status', args=[other_user.id])
        response = staff_client.patch(url, {'status': 'DELETED'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        other_user.refresh_from_db()
        assert other_user.status == UserStatus.DELETED
        assert other_user.display_name == 'Deleted User'

    def test_cannot_reactivate(self, staff_client, user_disabled):
        """ACTIVE is not an accepted target status."""
        url = reverse('users:user-status', args=[user_disabled.id])
        response = staff_client.patch(url, {'status': 'ACTIVE'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        user_disabled.refresh_from_db()
        assert user_disabled.status == UserStatus.DISABLED

    def test_cannot_change_own_status(self, staff_client, staff_user):
        url = reverse('users:user-status', args=[staff_user.id])
        response = staff_client.patch(url, {'status': 'DISABLED'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_same_status_conflict(self, staff_client, user_disabled):
        url = reverse('users:user-status', args=[user_disabled.id])
        response = staff_client.patch(url, {'status': 'DISABLED'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_unknown_user(self, staff_client):
        url = reverse('users:user-status', args=[uuid.uuid4()])
        response = staff_client.patch(url, {'status': 'DISABLED'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_stranger_cannot_disable(self, authenticated_client, other_user):
        """A regular user with no shared trip gets 403."""
        url = reverse('users:user-status', args=[other_user.id])
        response = authenticated_client.patch(url, {'status': 'DISABLED'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        other_user.refresh_from_db()
        assert other_user.status == UserStatus.ACTIVE

    def test_trip_admin_can_disable_member(self, authenticated_client, user, other_user):
        trip = create_trip(name='Valparaiso', created_by=user)
        TripParticipant.objects.create(
            trip=trip,
            user=other_user,
            name=other_user.get_display_name(),
            kind=ParticipantKind.REGISTERED,
            role=TripRole.EDITOR,
        )

        url = reverse('users:user-status', args=[other_user.id])
        response = authenticated_client.patch(url, {'status': 'DISABLED'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        other_user.refresh_from_db()
        assert other_user.status == UserStatus.DISABLED


# =============================================================================
# User Model Tests
# =============================================================================

@pytest.mark.django_db
class TestUserModel:
    """Tests for User model methods."""

    def test_create_user(self, db):
        user = User.objects.create_user(
            email='model@example.com',
            password='TestPass123!',
        )

        assert user.email == 'model@example.com'
        assert user.check_password('TestPass123!')
        assert user.status == UserStatus.ACTIVE
        assert user.is_active is True
        assert user.is_voting_eligible is True

    def test_status_drives_is_active(self, user):
        user.status = UserStatus.DISABLED
        user.save(update_fields=['status'])

        user.refresh_from_db()
        assert user.is_active is False
        assert user.is_voting_eligible is False

    def test_get_display_name(self, user):
        assert user.get_display_name() == 'Test User'

        user.display_name = ''
        user.save()
        assert user.get_display_name() == 'testuser'

    def test_anonymize(self, user):
        original_id = user.id
        user.anonymize()

        assert user.status == UserStatus.DELETED
        assert 'anonymized' in user.email
        assert user.display_name == 'Deleted User'
        assert user.deleted_at is not None
        assert user.id == original_id
