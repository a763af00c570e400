"""
Service layer tests for expenses app.

Tests cover:
- Equal-split expense recording
- Direct payments
- Settlement read path
- Participant and trip deletion with ledger entries
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.expenses.models import Expense, ExpenseShare, Payment
from apps.expenses.services import (
    create_expense,
    delete_expense,
    get_trip_expenses,
    create_payment,
    delete_payment,
    get_trip_settlement,
)
from apps.expenses.services.exceptions import (
    ExpenseNotFoundError,
    PaymentNotFoundError,
    IneligibleSplitParticipantError,
    SameParticipantPaymentError,
    InvalidAmountError,
)
from apps.trips.models import Trip
from apps.trips.services import (
    NotParticipantError,
    InsufficientPermissionsError,
    ParticipantInUseError,
    remove_participant,
    delete_trip,
)

D = Decimal


def record_dinner(trip, user, members, amount='300.00', payer='Alice', names=('Alice', 'Bob', 'Grandma')):
    return create_expense(
        trip_id=trip.id,
        user=user,
        description='Dinner',
        amount=D(amount),
        participant_ids=[members[n].id for n in names],
        paid_by_id=members[payer].id if payer else None,
    )


# =============================================================================
# Expense Tests
# =============================================================================

@pytest.mark.django_db
class TestCreateExpense:
    """Tests for create_expense()."""

    def test_equal_split(self, trip, alice, members):
        expense = record_dinner(trip, alice, members)

        assert expense.currency == 'CLP'
        assert expense.split_type == 'EQUAL'
        amounts = {s.participant.name: s.amount for s in expense.shares.select_related('participant')}
        assert amounts == {'Alice': D('100.00'), 'Bob': D('100.00'), 'Grandma': D('100.00')}

    def test_remainder_goes_to_first_listed(self, trip, bob, members):
        expense = record_dinner(trip, bob, members, amount='100.00', names=('Grandma', 'Alice', 'Bob'))

        shares = {s.participant.name: s.amount for s in expense.shares.select_related('participant')}
        assert shares['Grandma'] == D('33.34')
        assert shares['Alice'] == D('33.33')
        assert sum(shares.values()) == D('100.00')

    def test_duplicate_participants_collapse(self, trip, alice, members):
        expense = create_expense(
            trip_id=trip.id,
            user=alice,
            description='Taxi',
            amount=D('20.00'),
            participant_ids=[members['Bob'].id, members['Bob'].id, members['Alice'].id],
        )

        assert expense.shares.count() == 2

    def test_explicit_currency(self, trip, alice, members):
        expense = create_expense(
            trip_id=trip.id,
            user=alice,
            description='Ramen',
            amount=D('3000'),
            currency='JPY',
            participant_ids=[members['Alice'].id],
        )

        assert expense.currency == 'JPY'

    def test_share_from_other_trip_rejected(self, trip, other_trip, alice, members):
        stranger = other_trip.participants.first()

        with pytest.raises(IneligibleSplitParticipantError) as exc_info:
            create_expense(
                trip_id=trip.id,
                user=alice,
                description='Dinner',
                amount=D('10.00'),
                participant_ids=[members['Alice'].id, stranger.id],
            )

        assert exc_info.value.code == 'INELIGIBLE_SPLIT_PARTICIPANT'
        assert not Expense.objects.exists()

    def test_payer_from_other_trip_rejected(self, trip, other_trip, alice, members):
        with pytest.raises(IneligibleSplitParticipantError):
            create_expense(
                trip_id=trip.id,
                user=alice,
                description='Dinner',
                amount=D('10.00'),
                participant_ids=[members['Alice'].id],
                paid_by_id=other_trip.participants.first().id,
            )

    @pytest.mark.parametrize('amount', ['0', '-5.00', '1.234'])
    def test_invalid_amount(self, trip, alice, members, amount):
        with pytest.raises(InvalidAmountError):
            record_dinner(trip, alice, members, amount=amount)

    def test_invalid_currency(self, trip, alice, members):
        with pytest.raises(ValueError):
            create_expense(
                trip_id=trip.id,
                user=alice,
                description='Dinner',
                amount=D('10.00'),
                currency='XXX',
                participant_ids=[members['Alice'].id],
            )

    def test_viewer_cannot_record(self, trip, vera, members):
        with pytest.raises(InsufficientPermissionsError):
            record_dinner(trip, vera, members)

    def test_outsider_cannot_record(self, trip, outsider, members):
        with pytest.raises(NotParticipantError):
            record_dinner(trip, outsider, members)


@pytest.mark.django_db
class TestExpenseManagement:

    def test_list_expenses(self, trip, alice, vera, members):
        record_dinner(trip, alice, members)

        expenses = list(get_trip_expenses(trip_id=trip.id, user=vera))

        assert len(expenses) == 1
        assert expenses[0].shares.count() == 3

    def test_delete_by_creator(self, trip, bob, members):
        expense = record_dinner(trip, bob, members)

        delete_expense(expense_id=expense.id, user=bob)

        assert not Expense.objects.filter(id=expense.id).exists()
        assert not ExpenseShare.objects.exists()

    def test_delete_by_admin(self, trip, alice, bob, members):
        expense = record_dinner(trip, bob, members)

        delete_expense(expense_id=expense.id, user=alice)

        assert not Expense.objects.filter(id=expense.id).exists()

    def test_delete_by_other_member_forbidden(self, trip, alice, bob, members):
        expense = record_dinner(trip, alice, members)

        with pytest.raises(InsufficientPermissionsError):
            delete_expense(expense_id=expense.id, user=bob)

    def test_delete_missing(self, alice):
        with pytest.raises(ExpenseNotFoundError):
            delete_expense(expense_id=uuid4(), user=alice)


# =============================================================================
# Payment Tests
# =============================================================================

@pytest.mark.django_db
class TestPayments:
    """Tests for create_payment() and delete_payment()."""

    def test_create_payment(self, trip, bob, members):
        payment = create_payment(
            trip_id=trip.id,
            user=bob,
            from_participant_id=members['Bob'].id,
            to_participant_id=members['Alice'].id,
            amount=D('100.00'),
        )

        assert payment.currency == 'CLP'
        assert payment.created_by == bob

    def test_same_participant(self, trip, bob, members):
        with pytest.raises(SameParticipantPaymentError):
            create_payment(
                trip_id=trip.id,
                user=bob,
                from_participant_id=members['Bob'].id,
                to_participant_id=members['Bob'].id,
                amount=D('10.00'),
            )

    def test_receiver_outside_trip(self, trip, other_trip, bob, members):
        with pytest.raises(IneligibleSplitParticipantError):
            create_payment(
                trip_id=trip.id,
                user=bob,
                from_participant_id=members['Bob'].id,
                to_participant_id=other_trip.participants.first().id,
                amount=D('10.00'),
            )

    def test_viewer_cannot_record(self, trip, vera, members):
        with pytest.raises(InsufficientPermissionsError):
            create_payment(
                trip_id=trip.id,
                user=vera,
                from_participant_id=members['Vera'].id,
                to_participant_id=members['Alice'].id,
                amount=D('10.00'),
            )

    def test_only_admin_deletes(self, trip, alice, bob, members):
        payment = create_payment(
            trip_id=trip.id,
            user=bob,
            from_participant_id=members['Bob'].id,
            to_participant_id=members['Alice'].id,
            amount=D('10.00'),
        )

        with pytest.raises(InsufficientPermissionsError):
            delete_payment(payment_id=payment.id, user=bob)

        delete_payment(payment_id=payment.id, user=alice)
        assert not Payment.objects.exists()

    def test_delete_missing(self, alice):
        with pytest.raises(PaymentNotFoundError):
            delete_payment(payment_id=uuid4(), user=alice)


# =============================================================================
# Settlement Read Path
# =============================================================================

@pytest.mark.django_db
class TestTripSettlement:
    """Tests for get_trip_settlement()."""

    def test_dinner_scenario(self, trip, alice, vera, members):
        record_dinner(trip, alice, members)

        result = get_trip_settlement(trip_id=trip.id, user=vera)

        balances = {b.name: b.balance for b in result.balances['CLP']}
        assert balances == {
            'Alice': D('200.00'),
            'Bob': D('-100.00'),
            'Vera': D('0'),
            'Grandma': D('-100.00'),
        }
        assert [(t.from_name, t.to_name, t.amount) for t in result.settlements] == [
            ('Bob', 'Alice', D('100.00')),
            ('Grandma', 'Alice', D('100.00')),
        ]

    def test_payment_reduces_transfers(self, trip, alice, bob, members):
        record_dinner(trip, alice, members)
        create_payment(
            trip_id=trip.id,
            user=bob,
            from_participant_id=members['Bob'].id,
            to_participant_id=members['Alice'].id,
            amount=D('100.00'),
        )

        result = get_trip_settlement(trip_id=trip.id, user=alice)

        assert [(t.from_name, t.to_name) for t in result.settlements] == [('Grandma', 'Alice')]

    def test_outsider_forbidden(self, trip, outsider):
        with pytest.raises(NotParticipantError):
            get_trip_settlement(trip_id=trip.id, user=outsider)


# =============================================================================
# Ledger References
# =============================================================================

@pytest.mark.django_db
class TestLedgerReferences:

    def test_participant_with_expenses_cannot_be_removed(self, trip, alice, members):
        record_dinner(trip, alice, members)

        with pytest.raises(ParticipantInUseError):
            remove_participant(trip_id=trip.id, participant_id=members['Grandma'].id, removed_by=alice)

    def test_participant_without_entries_can_be_removed(self, trip, alice, members):
        record_dinner(trip, alice, members)

        remove_participant(trip_id=trip.id, participant_id=members['Vera'].id, removed_by=alice)

        assert not trip.participants.filter(name='Vera').exists()

    def test_trip_deletion_removes_ledger(self, trip, alice, bob, members):
        record_dinner(trip, alice, members)
        create_payment(
            trip_id=trip.id,
            user=bob,
            from_participant_id=members['Bob'].id,
            to_participant_id=members['Alice'].id,
            amount=D('50.00'),
        )

        delete_trip(trip_id=trip.id, user=alice)

        assert not Trip.objects.filter(id=trip.id).exists()
        assert not Expense.objects.exists()
        assert not Payment.objects.exists()
