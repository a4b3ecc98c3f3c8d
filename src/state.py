from typing import Dict, Optional

from errors import DuplicateTransactionId
from models import ClientAccount, ClientId, Transaction, TransactionId, TransactionRecord


class StateManager:
    """
    Owns client accounts and the transaction history used for dispute lookups.
    Accounts are created on first reference and never removed.
    """

    def __init__(self):
        self._accounts: Dict[ClientId, ClientAccount] = {}
        self._transactions: Dict[TransactionId, TransactionRecord] = {}

    def get_or_create_account(self, client_id: ClientId) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: ClientId) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def cache_transaction(self, transaction: Transaction) -> TransactionRecord:
        """
        Store a deposit or withdrawal for future dispute lookups.

        Raises:
            DuplicateTransactionId: history already holds this transaction id
        """
        if transaction.transaction_id in self._transactions:
            raise DuplicateTransactionId(transaction.transaction_id)
        record = TransactionRecord.from_transaction(transaction)
        self._transactions[transaction.transaction_id] = record
        return record

    def get_transaction(self, transaction_id: TransactionId) -> Optional[TransactionRecord]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def get_all_accounts(self) -> Dict[ClientId, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
