import logging
from typing import Dict, Iterable, TextIO

from decoder import TransactionReader
from models import AccountSnapshot, ClientId, ProcessingResult, Transaction
from processor import TransactionProcessor
from state import StateManager

logger = logging.getLogger(__name__)


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.applied = 0
        self.ignored = 0

    @property
    def processed(self) -> int:
        return self.applied + self.ignored

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1


class PaymentsEngine:
    """
    Feeds a transaction stream through a single TransactionProcessor.
    The first error aborts the run; no snapshot is produced for a failed run.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self.stats = ProcessingStats()

    def apply(self, transaction: Transaction) -> ProcessingResult:
        result = self._processor.apply(transaction)
        self.stats.record(result)
        return result

    def snapshot(self) -> Dict[ClientId, AccountSnapshot]:
        return self._processor.snapshot()

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[ClientId, AccountSnapshot]:
        """Apply transactions in order and return final account states."""
        for transaction in transactions:
            self.apply(transaction)

        logger.info(f"Processed: {self.stats.processed}, Applied: {self.stats.applied}, Ignored: {self.stats.ignored}")
        return self.snapshot()

    def process_stream(self, stream: TextIO) -> Dict[ClientId, AccountSnapshot]:
        """Process CSV text and return final account states."""
        return self.process_transactions(TransactionReader(stream))

    def process_file(self, filepath: str) -> Dict[ClientId, AccountSnapshot]:
        """Process CSV file and return final account states."""
        with open(filepath, "r", newline="") as f:
            return self.process_stream(f)
