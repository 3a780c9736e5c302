"""Finance ledger workflow.

This module applies debit transactions to accounts. Account behavior is
a tagged variant dispatched in ``apply_transaction``; every processed
transaction is recorded as a ledger entry whether or not it was applied.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from core.errors import DuplicateKeyError, InvalidValueError
from core.logging_config import get_logger
from core.types import Account, LedgerEntry, PaymentChannel, Transaction
from domains.registry import get_entity_type
from store.entity_store import EntityStore

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class TransactionOutcome:
    """Result of applying one transaction to an account.

    Attributes:
        applied: Whether the debit was accepted.
        account: Account state after the attempt.
        reason: Rejection reason when not applied.
    """

    applied: bool
    account: Account
    reason: str | None = None


@dataclass(frozen=True)
class FinanceLedger:
    """Accounts, processed transactions, and their ledger entries."""

    accounts: EntityStore[str, Account]
    transactions: EntityStore[int, Transaction]
    entries: EntityStore[int, LedgerEntry]


def build_finance_ledger() -> FinanceLedger:
    """Create an empty ledger with registered validators on each store."""
    return FinanceLedger(
        accounts=get_entity_type("account").new_store(),
        transactions=get_entity_type("transaction").new_store(),
        entries=get_entity_type("ledger_entry").new_store(),
    )


def apply_transaction(account: Account, transaction: Transaction) -> TransactionOutcome:
    """Debit ``transaction.amount`` according to the account kind.

    Unconstrained accounts accept every debit and may go negative.
    Balance-limited accounts reject debits larger than the balance.

    Args:
        account: Account to debit.
        transaction: Debit to apply.

    Returns:
        Outcome carrying the resulting account state.

    Raises:
        InvalidValueError: If the account kind is not recognized.
    """
    if account.kind == "unconstrained":
        return _debit(account, transaction)
    if account.kind == "balance_limited":
        if transaction.amount > account.balance:
            return TransactionOutcome(
                applied=False,
                account=account,
                reason=(
                    f"Insufficient funds for {transaction.category}: "
                    f"{transaction.amount} exceeds balance {account.balance}."
                ),
            )
        return _debit(account, transaction)
    raise InvalidValueError(f"Unsupported account kind '{account.kind}' for {account.id}.")


def process_transaction(
    ledger: FinanceLedger,
    account_id: str,
    transaction: Transaction,
    channel: PaymentChannel,
) -> LedgerEntry:
    """Record and apply one transaction against a stored account.

    Args:
        ledger: Finance ledger stores.
        account_id: Account to debit.
        transaction: Transaction to process; its id must be new.
        channel: Channel the payment was processed through.

    Returns:
        The recorded ledger entry.

    Raises:
        NotFoundError: If the account does not exist.
        DuplicateKeyError: If the transaction id was already processed.
        InvalidValueError: If the amount is negative.
    """
    account = ledger.accounts.get_by_id(account_id)
    if transaction.id in ledger.transactions:
        raise DuplicateKeyError(f"Transaction with ID {transaction.id} was already processed.")
    if transaction.amount < 0:
        raise InvalidValueError(
            f"Transaction amount cannot be negative, got {transaction.amount}."
        )
    outcome = apply_transaction(account, transaction)
    ledger.transactions.add(transaction)
    if outcome.applied:
        ledger.accounts.update_field(account_id, "balance", outcome.account.balance)
    entry = LedgerEntry(
        id=transaction.id,
        account_id=account_id,
        channel=channel,
        amount=transaction.amount,
        applied=outcome.applied,
        balance_after=outcome.account.balance,
    )
    ledger.entries.add(entry)
    _LOGGER.info(
        "transaction_processed",
        transaction_id=transaction.id,
        account_id=account_id,
        channel=channel,
        applied=outcome.applied,
    )
    return entry


def process_transactions(
    ledger: FinanceLedger,
    account_id: str,
    batch: Iterable[tuple[Transaction, PaymentChannel]],
) -> list[LedgerEntry]:
    """Process transactions in order against one account."""
    return [
        process_transaction(ledger, account_id, transaction, channel)
        for transaction, channel in batch
    ]


def _debit(account: Account, transaction: Transaction) -> TransactionOutcome:
    updated_account = replace(account, balance=account.balance - transaction.amount)
    return TransactionOutcome(applied=True, account=updated_account)
