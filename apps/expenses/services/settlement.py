"""
Settlement engine.

Reduces a trip's expenses and direct payments to per-participant
balances and a short list of suggested transfers, one closed ledger per
currency (no conversion between currencies).

calculate_settlement() is pure: it touches no storage and trusts its
input. get_trip_settlement() is the read path that feeds it a snapshot.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence
from uuid import UUID

from apps.accounts.models import User
from apps.expenses.ledger import (
    LedgerExpense,
    LedgerParticipant,
    LedgerPayment,
    ParticipantBalance,
    SettlementResult,
    SettlementTransfer,
    ShareEntry,
)
from apps.expenses.models import Expense, Payment
from apps.trips.models import TripParticipant
from apps.trips.services import get_trip_for_participant

logger = logging.getLogger(__name__)

EPSILON = Decimal('0.005')
CENT = Decimal('0.01')
ZERO = Decimal('0')


def _collect_currencies(expenses, payments) -> list:
    """Currencies in order of first appearance, expenses before payments."""
    seen = {}
    for entry in list(expenses) + list(payments):
        seen.setdefault(entry.currency, None)
    return list(seen)


def _currency_balances(currency, expenses, payments, participants) -> list:
    paid = {p.id: ZERO for p in participants}
    owes = {p.id: ZERO for p in participants}
    net = {p.id: ZERO for p in participants}

    for expense in expenses:
        if expense.currency != currency:
            continue
        if expense.payer_id in net:
            paid[expense.payer_id] += expense.amount
            net[expense.payer_id] += expense.amount
        for share in expense.shares:
            if share.participant_id in net:
                owes[share.participant_id] += share.amount
                net[share.participant_id] -= share.amount

    for payment in payments:
        if payment.currency != currency:
            continue
        # The sender's debt shrinks, the receiver's credit shrinks
        if payment.from_id in net:
            net[payment.from_id] += payment.amount
        if payment.to_id in net:
            net[payment.to_id] -= payment.amount

    return [
        ParticipantBalance(
            participant_id=p.id,
            name=p.name,
            paid=paid[p.id],
            owes=owes[p.id],
            balance=net[p.id],
        )
        for p in participants
    ]


def _match_transfers(currency: str, balances: Sequence[ParticipantBalance]) -> list:
    """
    Greedy matching of the largest creditor against the largest debtor.

    Sorting is stable, so equal balances keep participant order.
    """
    creditors = [
        [b, b.balance]
        for b in sorted(
            (b for b in balances if b.balance > EPSILON),
            key=lambda b: b.balance,
            reverse=True,
        )
    ]
    debtors = [
        [b, -b.balance]
        for b in sorted(
            (b for b in balances if b.balance < -EPSILON),
            key=lambda b: b.balance,
        )
    ]

    transfers = []
    ci = di = 0
    while ci < len(creditors) and di < len(debtors):
        creditor, credit = creditors[ci]
        debtor, debt = debtors[di]
        amount = min(credit, debt)

        if amount > EPSILON:
            transfers.append(SettlementTransfer(
                from_id=debtor.participant_id,
                from_name=debtor.name,
                to_id=creditor.participant_id,
                to_name=creditor.name,
                amount=amount.quantize(CENT, rounding=ROUND_HALF_UP),
                currency=currency,
            ))

        creditors[ci][1] = credit - amount
        debtors[di][1] = debt - amount

        if creditors[ci][1] < EPSILON:
            ci += 1
        if debtors[di][1] < EPSILON:
            di += 1

    return transfers


def calculate_settlement(
    expenses: Iterable[LedgerExpense],
    participants: Iterable[LedgerParticipant],
    payments: Iterable[LedgerPayment] = ()
) -> SettlementResult:
    """
    Compute balances and suggested transfers per currency.

    Algorithm, per currency:
        1. Every participant starts at zero.
        2. An expense credits its payer with the full amount and debits
           each share holder with their share.
        3. A payment from A to B credits A and debits B.
        4. Balances above +0.005 are creditors, below -0.005 debtors.
        5. The largest creditor is repeatedly paired with the largest
           debtor for min(credit, debt) until one side runs out.

    References to participants not in ``participants`` are ignored.

    Args:
        expenses: LedgerExpense entries (any currencies)
        participants: LedgerParticipant entries, in display order
        payments: LedgerPayment entries already made

    Returns:
        SettlementResult with balances keyed by currency, the transfer
        list across all currencies, and the currencies in order of first
        appearance
    """
    expenses = list(expenses)
    participants = list(participants)
    payments = list(payments)

    currencies = _collect_currencies(expenses, payments)
    balances = {}
    settlements = []

    for currency in currencies:
        currency_balances = _currency_balances(currency, expenses, payments, participants)
        balances[currency] = currency_balances
        settlements.extend(_match_transfers(currency, currency_balances))

    return SettlementResult(
        balances=balances,
        settlements=settlements,
        currencies=currencies,
    )


def build_ledger(*, trip_id: UUID) -> tuple[list, list, list]:
    """
    Snapshot a trip's participants, expenses and payments as ledger entries.

    Returns:
        Tuple of (expenses, participants, payments)
    """
    participants = [
        LedgerParticipant(id=p.id, name=p.name)
        for p in TripParticipant.objects.filter(trip_id=trip_id).order_by('joined_at')
    ]

    expenses = [
        LedgerExpense(
            id=e.id,
            amount=e.amount,
            currency=e.currency,
            payer_id=e.paid_by_id,
            shares=tuple(
                ShareEntry(participant_id=s.participant_id, amount=s.amount)
                for s in e.shares.all()
            ),
        )
        for e in (
            Expense.objects
            .filter(trip_id=trip_id)
            .prefetch_related('shares')
            .order_by('expense_date', 'created_at')
        )
    ]

    payments = [
        LedgerPayment(
            id=p.id,
            from_id=p.from_participant_id,
            to_id=p.to_participant_id,
            amount=p.amount,
            currency=p.currency,
        )
        for p in Payment.objects.filter(trip_id=trip_id).order_by('paid_at', 'created_at')
    ]

    return expenses, participants, payments


def get_trip_settlement(*, trip_id: UUID, user: User) -> SettlementResult:
    """
    Settlement for a trip (participants only).

    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError: If user is not a participant
    """
    get_trip_for_participant(trip_id=trip_id, user=user)

    expenses, participants, payments = build_ledger(trip_id=trip_id)
    result = calculate_settlement(expenses, participants, payments)

    logger.info(
        "settlement.computed trip=%s currencies=%s transfers=%s",
        trip_id, ",".join(result.currencies), len(result.settlements),
    )
    return result
