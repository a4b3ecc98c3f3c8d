from models import ClientId, TransactionId


class LedgerError(Exception):
    """Base class for errors that abort a processing run."""


class DecodeError(LedgerError):
    """An input row could not be turned into a transaction."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}")


class EngineError(LedgerError):
    """The transaction stream broke an invariant of the ledger."""


class DuplicateTransactionId(EngineError):
    def __init__(self, transaction_id: TransactionId):
        self.transaction_id = transaction_id
        super().__init__(f"Duplicate transaction id: {transaction_id}")


class DisputeTargetInvalid(EngineError):
    def __init__(self, transaction_id: TransactionId):
        self.transaction_id = transaction_id
        super().__init__(f"Dispute of non-disputable transaction id: {transaction_id}")


class DisputedTransactionClientMissing(EngineError):
    def __init__(self, client_id: ClientId):
        self.client_id = client_id
        super().__init__(f"Disputed transaction refers to non-existent client id: {client_id}")
