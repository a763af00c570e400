"""
Value objects exchanged with the settlement engine.

Plain frozen dataclasses with no behavior. Money is always Decimal.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Hashable, Optional


@dataclass(frozen=True)
class ShareEntry:
    participant_id: Hashable
    amount: Decimal


@dataclass(frozen=True)
class LedgerExpense:
    id: Hashable
    amount: Decimal
    currency: str
    payer_id: Optional[Hashable]
    shares: tuple = ()


@dataclass(frozen=True)
class LedgerPayment:
    id: Hashable
    from_id: Hashable
    to_id: Hashable
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class LedgerParticipant:
    id: Hashable
    name: str


@dataclass(frozen=True)
class ParticipantBalance:
    """Net position of one participant in one currency (positive = is owed)."""
    participant_id: Hashable
    name: str
    paid: Decimal
    owes: Decimal
    balance: Decimal


@dataclass(frozen=True)
class SettlementTransfer:
    from_id: Hashable
    from_name: str
    to_id: Hashable
    to_name: str
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class SettlementResult:
    balances: dict = field(default_factory=dict)
    settlements: list = field(default_factory=list)
    currencies: list = field(default_factory=list)
