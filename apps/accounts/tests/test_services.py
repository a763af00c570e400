import uuid

import pytest
from apps.accounts.models import User, UserStatus
from apps.accounts.services import (
    register_user,
    authenticate_user,
    change_user_status,
    delete_user_account,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidStatusChangeError,
    UserNotFoundError,
    PasswordConfirmationError,
    StatusChangeForbiddenError,
)
from apps.trips.models import TripParticipant, TripRole, ParticipantKind
from apps.trips.services import create_trip
from .conftest import PASSWORD, make_member


def join(trip, member, role):
    return TripParticipant.objects.create(
        trip=trip,
        user=member,
        name=member.get_display_name(),
        kind=ParticipantKind.REGISTERED,
        role=role,
    )


@pytest.mark.django_db
class TestRegisterUser:

    def test_email_is_lowercased(self):
        user = register_user(email='  Maria@Example.COM ', password=PASSWORD)

        assert user.email == 'maria@example.com'
        assert user.status == UserStatus.ACTIVE
        assert user.is_voting_eligible

    def test_blank_display_name_falls_back_to_email(self):
        user = register_user(email='pedro@example.com', password=PASSWORD, display_name='   ')

        assert user.display_name == ''
        assert user.get_display_name() == 'pedro'

    def test_duplicate_email_any_case(self, user):
        with pytest.raises(UserRegistrationError):
            register_user(email='TESTUSER@example.com', password=PASSWORD)

        assert User.objects.filter(email__iexact=user.email).count() == 1


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_success_stamps_last_login(self, user):
        result = authenticate_user(email='TestUser@Example.com', password=PASSWORD)

        assert result == user
        user.refresh_from_db()
        assert user.last_login is not None

    def test_wrong_password(self, user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=user.email, password='nope')

    def test_unknown_email(self, db):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='ghost@example.com', password=PASSWORD)

    def test_disabled_account(self, user_disabled):
        with pytest.raises(InactiveAccountError, match='disabled'):
            authenticate_user(email=user_disabled.email, password=PASSWORD)

    def test_disabled_account_with_wrong_password_is_invalid(self, user_disabled):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=user_disabled.email, password='nope')


@pytest.mark.django_db
class TestChangeUserStatus:

    def test_disable(self, staff_user, other_user):
        target, items_changed = change_user_status(
            target_user_id=other_user.id,
            new_status=UserStatus.DISABLED,
            changed_by=staff_user,
        )

        assert target.status == UserStatus.DISABLED
        assert target.is_active is False
        assert items_changed == 0

    def test_delete_anonymizes(self, staff_user, other_user):
        target, _ = change_user_status(
            target_user_id=other_user.id,
            new_status=UserStatus.DELETED,
            changed_by=staff_user,
        )

        assert target.email.endswith('@anonymized.local')
        assert target.get_display_name() == 'Deleted User'
        assert not target.has_usable_password()

    def test_disabled_user_can_still_be_deleted(self, staff_user, user_disabled):
        target, _ = change_user_status(
            target_user_id=user_disabled.id,
            new_status=UserStatus.DELETED,
            changed_by=staff_user,
        )

        assert target.status == UserStatus.DELETED

    def test_reactivation_not_allowed(self, staff_user, user_disabled):
        with pytest.raises(InvalidStatusChangeError):
            change_user_status(
                target_user_id=user_disabled.id,
                new_status=UserStatus.ACTIVE,
                changed_by=staff_user,
            )

    def test_own_status(self, user):
        with pytest.raises(InvalidStatusChangeError):
            change_user_status(
                target_user_id=user.id,
                new_status=UserStatus.DISABLED,
                changed_by=user,
            )

    def test_already_deleted(self, staff_user):
        gone = make_member('gone@example.com')
        gone.anonymize()

        with pytest.raises(InvalidStatusChangeError, match='already deleted'):
            change_user_status(
                target_user_id=gone.id,
                new_status=UserStatus.DISABLED,
                changed_by=staff_user,
            )

    def test_unknown_target(self, staff_user):
        with pytest.raises(UserNotFoundError):
            change_user_status(
                target_user_id=uuid.uuid4(),
                new_status=UserStatus.DISABLED,
                changed_by=staff_user,
            )


@pytest.mark.django_db
class TestStatusChangePermissions:
    """Only staff or an admin of a shared trip may disable someone."""

    def test_stranger_is_forbidden(self, user, other_user):
        trip = create_trip(name='Mendoza', created_by=other_user)

        with pytest.raises(StatusChangeForbiddenError):
            change_user_status(
                target_user_id=other_user.id,
                new_status=UserStatus.DISABLED,
                changed_by=user,
            )

        other_user.refresh_from_db()
        assert other_user.status == UserStatus.ACTIVE
        assert trip.participants.eligible_voters().count() == 1

    def test_editor_of_shared_trip_is_forbidden(self, user, other_user):
        trip = create_trip(name='Mendoza', created_by=other_user)
        join(trip, user, TripRole.EDITOR)

        with pytest.raises(StatusChangeForbiddenError):
            change_user_status(
                target_user_id=other_user.id,
                new_status=UserStatus.DISABLED,
                changed_by=user,
            )

    def test_admin_of_shared_trip_is_allowed(self, user, other_user):
        trip = create_trip(name='Mendoza', created_by=user)
        join(trip, other_user, TripRole.VIEWER)

        target, _ = change_user_status(
            target_user_id=other_user.id,
            new_status=UserStatus.DISABLED,
            changed_by=user,
        )

        assert target.status == UserStatus.DISABLED

    def test_admin_of_unrelated_trip_is_forbidden(self, user, other_user):
        create_trip(name='Mendoza', created_by=user)

        with pytest.raises(StatusChangeForbiddenError):
            change_user_status(
                target_user_id=other_user.id,
                new_status=UserStatus.DELETED,
                changed_by=user,
            )


@pytest.mark.django_db
class TestDeleteUserAccount:

    def test_wrong_password_keeps_account(self, user):
        with pytest.raises(PasswordConfirmationError):
            delete_user_account(user_id=user.id, password='nope')

        user.refresh_from_db()
        assert user.status == UserStatus.ACTIVE

    def test_deletes(self, user):
        assert delete_user_account(user_id=user.id, password=PASSWORD) == 0

        user.refresh_from_db()
        assert user.status == UserStatus.DELETED
        assert user.is_active is False
