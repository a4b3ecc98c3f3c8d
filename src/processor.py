import logging
from typing import Dict, Optional, Tuple

from errors import DisputeTargetInvalid, DisputedTransactionClientMissing
from models import (
    AccountSnapshot,
    Amount,
    ClientAccount,
    ClientId,
    ProcessingResult,
    Transaction,
    TransactionRecord,
    TransactionState,
    TransactionType,
)
from state import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to ledger state, one at a time in input order.

    Expected anomalies (unknown dispute targets, disputes in the wrong state,
    withdrawals on locked accounts or without funds) are ignored and reported
    as ProcessingResult.IGNORED. Broken invariants raise an EngineError and the
    run should stop.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction.

        Returns:
            APPLIED: State changed or the transaction was recorded
            IGNORED: Swallowed as a no-op

        Raises:
            DuplicateTransactionId: deposit/withdrawal reuses a cached id
            DisputeTargetInvalid: referenced record is not a deposit or withdrawal
            DisputedTransactionClientMissing: referenced record's account is gone
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)

    def snapshot(self) -> Dict[ClientId, AccountSnapshot]:
        """Final balances for every known client."""
        return {
            client_id: account.snapshot()
            for client_id, account in self._state.get_all_accounts().items()
        }

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        account = self._state.get_or_create_account(transaction.client_id)

        # Locked accounts still accept deposits
        account.credit(transaction.amount)
        self._state.cache_transaction(transaction)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        account = self._state.get_or_create_account(transaction.client_id)

        # Not cached either, so a later dispute treats it as unknown
        if account.locked:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: account {account.client_id} is locked, skipping")
            return ProcessingResult.IGNORED

        if account.available >= transaction.amount:
            account.debit(transaction.amount)
            result = ProcessingResult.APPLIED
        else:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds (available {account.available}, requested {transaction.amount})")
            result = ProcessingResult.IGNORED

        # Cached even without funds so the id stays reserved and disputable
        self._state.cache_transaction(transaction)
        return result

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        target = self._find_target(transaction, TransactionState.ALIVE)
        if target is None:
            return ProcessingResult.IGNORED

        record, account, amount = target
        record.state = TransactionState.DISPUTED
        account.hold(amount)
        return ProcessingResult.APPLIED

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        target = self._find_target(transaction, TransactionState.DISPUTED)
        if target is None:
            return ProcessingResult.IGNORED

        record, account, amount = target
        record.state = TransactionState.ALIVE
        account.release_hold(amount)
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        target = self._find_target(transaction, TransactionState.DISPUTED)
        if target is None:
            return ProcessingResult.IGNORED

        record, account, amount = target
        record.state = TransactionState.CHARGED_BACK
        account.remove_held(amount)
        account.locked = True
        return ProcessingResult.APPLIED

    def _find_target(
        self, transaction: Transaction, required_state: TransactionState
    ) -> Optional[Tuple[TransactionRecord, ClientAccount, Amount]]:
        """
        Resolve the record a dispute, resolve or chargeback refers to.

        Returns None when the reference should be ignored. Everything is
        validated here so callers can mutate without partial updates.
        """
        action = transaction.transaction_type.value
        record = self._state.get_transaction(transaction.transaction_id)

        if record is None:
            # Partner system may know transactions we never saw
            logger.info(f"{action.capitalize()} for tx {transaction.transaction_id}: transaction not found, ignoring")
            return None

        if record.state != required_state:
            logger.info(f"{action.capitalize()} for tx {transaction.transaction_id}: transaction is {record.state.value}, expected {required_state.value}")
            return None

        amount = self._disputed_amount(record)

        # The referenced record's client is used; the disputer's client id is not checked
        account = self._state.get_account(record.client_id)
        if account is None:
            raise DisputedTransactionClientMissing(record.client_id)

        return record, account, amount

    @staticmethod
    def _disputed_amount(record: TransactionRecord) -> Amount:
        # Withdrawals are negated so one set of hold/release rules serves both kinds
        match record.transaction_type:
            case TransactionType.DEPOSIT:
                return record.amount
            case TransactionType.WITHDRAWAL:
                return -record.amount
            case _:
                raise DisputeTargetInvalid(record.transaction_id)
