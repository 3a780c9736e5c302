"""Shared typed models.

This module defines the entity capability contract and the immutable
entity models used by the store, import, persistence, and domain layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Hashable, Literal, Protocol, runtime_checkable


@runtime_checkable
class KeyedEntity(Protocol):
    """Capability required of anything held by an entity store.

    An entity exposes a read-only, hashable identifier. Shipped entity
    types are frozen dataclasses, so identity cannot change after creation.
    """

    @property
    def id(self) -> Hashable: ...


@dataclass(frozen=True)
class InventoryItem:
    """Logged inventory entry.

    Attributes:
        id: Unique item id.
        name: Item display name.
        quantity: Units on hand.
        date_added: Timestamp the entry was recorded.
    """

    id: int
    name: str
    quantity: int
    date_added: datetime


@dataclass(frozen=True)
class ElectronicItem:
    """Warehouse electronic product.

    Attributes:
        id: Unique item id.
        name: Product name.
        quantity: Units on hand.
        brand: Manufacturer brand.
        warranty_months: Warranty length in months.
    """

    id: int
    name: str
    quantity: int
    brand: str
    warranty_months: int


@dataclass(frozen=True)
class GroceryItem:
    """Warehouse grocery product.

    Attributes:
        id: Unique item id.
        name: Product name.
        quantity: Units on hand.
        expiry_date: Calendar date the product expires.
    """

    id: int
    name: str
    quantity: int
    expiry_date: date


@dataclass(frozen=True)
class Student:
    """Graded student record."""

    id: int
    full_name: str
    score: int


@dataclass(frozen=True)
class Patient:
    """Registered patient."""

    id: int
    name: str
    age: int
    gender: str


@dataclass(frozen=True)
class Prescription:
    """Prescription issued to one patient.

    Attributes:
        id: Unique prescription id.
        patient_id: Id of the patient the prescription belongs to.
        medication_name: Prescribed medication.
        date_issued: Timestamp of issue.
    """

    id: int
    patient_id: int
    medication_name: str
    date_issued: datetime


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction debiting an account."""

    id: int
    date: datetime
    amount: Decimal
    category: str


AccountKind = Literal["unconstrained", "balance_limited"]
ACCOUNT_KINDS: tuple[AccountKind, ...] = ("unconstrained", "balance_limited")
PaymentChannel = Literal["bank_transfer", "mobile_money", "crypto_wallet"]
PAYMENT_CHANNELS: tuple[PaymentChannel, ...] = ("bank_transfer", "mobile_money", "crypto_wallet")


@dataclass(frozen=True)
class Account:
    """Account with a balance and a debit policy.

    Attributes:
        id: Account number.
        balance: Current balance.
        kind: Debit policy variant.
    """

    id: str
    balance: Decimal
    kind: AccountKind = "unconstrained"


@dataclass(frozen=True)
class LedgerEntry:
    """Outcome of one processed transaction, keyed by transaction id.

    Attributes:
        id: Transaction id.
        account_id: Account the transaction was applied to.
        channel: Processing channel.
        amount: Requested debit.
        applied: Whether the debit was accepted.
        balance_after: Account balance after processing.
    """

    id: int
    account_id: str
    channel: PaymentChannel
    amount: Decimal
    applied: bool
    balance_after: Decimal
