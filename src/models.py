from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from enum import Enum
from typing import Optional, Union


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class TransactionState(Enum):
    ALIVE = "alive"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


@dataclass(frozen=True, order=True)
class ClientId:
    value: int

    MAX = 2**16 - 1

    def __post_init__(self):
        if not 0 <= self.value <= self.MAX:
            raise ValueError(f"client id out of range: {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class TransactionId:
    value: int

    MAX = 2**32 - 1

    def __post_init__(self):
        if not 0 <= self.value <= self.MAX:
            raise ValueError(f"transaction id out of range: {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Amount:
    """
    Fixed-point money value with four fractional digits.
    Stored as an integer count of 1/10000 units so repeated additions stay exact.
    """

    units: int = 0

    SCALE = 10000
    QUANTUM = Decimal("0.0001")

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0)

    @classmethod
    def from_decimal(cls, value: Union[Decimal, str, int]) -> "Amount":
        """Round to four places, halves away from zero."""
        try:
            decimal_value = Decimal(value)
            if not decimal_value.is_finite():
                raise ValueError(f"invalid amount: {value!r}")
            quantized = decimal_value.quantize(cls.QUANTUM, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError(f"invalid amount: {value!r}") from None
        return cls(int(quantized.scaleb(4)))

    def to_decimal(self) -> Decimal:
        return Decimal(self.units).scaleb(-4)

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.units + other.units)

    def __sub__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.units - other.units)

    def __neg__(self) -> "Amount":
        return Amount(-self.units)

    def __str__(self) -> str:
        normalized = self.to_decimal().normalize()
        return f"{normalized:f}"

    def __repr__(self) -> str:
        return f"Amount({self})"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: ClientId
    transaction_id: TransactionId
    amount: Optional[Amount] = None

    def __post_init__(self):
        if self.transaction_type.carries_amount and self.amount is None:
            raise ValueError(f"{self.transaction_type.value} transaction requires an amount")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class TransactionRecord:
    """A deposit or withdrawal kept in history so it can be disputed later."""

    transaction_id: TransactionId
    client_id: ClientId
    transaction_type: TransactionType
    amount: Amount
    state: TransactionState = TransactionState.ALIVE

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionRecord":
        return cls(
            transaction_id=transaction.transaction_id,
            client_id=transaction.client_id,
            transaction_type=transaction.transaction_type,
            amount=transaction.amount,
        )


@dataclass
class ClientAccount:
    client_id: ClientId
    available: Amount = field(default_factory=Amount.zero)
    held: Amount = field(default_factory=Amount.zero)
    locked: bool = False

    @property
    def total(self) -> Amount:
        return self.available + self.held

    def credit(self, amount: Amount) -> None:
        self.available += amount

    def debit(self, amount: Amount) -> None:
        self.available -= amount

    def hold(self, amount: Amount) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Amount) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Amount) -> None:
        self.held -= amount

    def snapshot(self) -> "AccountSnapshot":
        return AccountSnapshot(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: ClientId
    available: Amount
    held: Amount
    total: Amount
    locked: bool
