"""Core consensus value types: block references, authority sets, transactions and statements."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

AuthorityIndex = int
RoundNumber = int
Stake = int
TimestampNs = int
EpochStatus = bool

DIGEST_LEN = 32
_AUTHORITY_SET_BITS = 128
# Upper bound on transaction offsets covered by a locator range.
_MAX_RANGE_LEN = 1024 * 1024


class InternalEpochStatus(enum.Enum):
    """Progress of the current epoch towards closing."""

    OPEN = "open"
    # Change is triggered by an external deterministic mechanism.
    BEGIN_CHANGE = "begin_change"
    # Committed blocks from >= 2f+1 stake indicate epoch change.
    SAFE_TO_CLOSE = "safe_to_close"

    @classmethod
    def default(cls) -> "InternalEpochStatus":
        return cls.OPEN


def format_authority_index(index: AuthorityIndex) -> str:
    """Render an authority index as a letter, 0 -> 'A'."""
    return chr((ord("A") + index) & 0xFF)


def format_authority_round(index: AuthorityIndex, round_number: RoundNumber) -> str:
    """Render an authority and round as e.g. 'B3'."""
    return f"{format_authority_index(index)}{round_number}"


@dataclass(frozen=True, repr=False)
class BlockReference:
    """Identifies a block by its author, round and digest.

    Ordering considers the round first and then the authority; the digest
    does not take part in ordering, although it does in equality.
    """

    authority: AuthorityIndex = 0
    round: RoundNumber = 0
    digest: bytes = field(default=bytes(DIGEST_LEN))

    def _order_key(self) -> tuple[int, int]:
        return (self.round, self.authority)

    def __lt__(self, other: "BlockReference") -> bool:
        if not isinstance(other, BlockReference):
            return NotImplemented
        return self._order_key() < other._order_key()

    def __le__(self, other: "BlockReference") -> bool:
        if not isinstance(other, BlockReference):
            return NotImplemented
        return self._order_key() <= other._order_key()

    def __gt__(self, other: "BlockReference") -> bool:
        if not isinstance(other, BlockReference):
            return NotImplemented
        return self._order_key() > other._order_key()

    def __ge__(self, other: "BlockReference") -> bool:
        if not isinstance(other, BlockReference):
            return NotImplemented
        return self._order_key() >= other._order_key()

    def author_round(self) -> tuple[AuthorityIndex, RoundNumber]:
        return (self.authority, self.round)

    def author_digest(self) -> tuple[AuthorityIndex, bytes]:
        return (self.authority, self.digest)

    def __str__(self) -> str:
        if self.authority < 26:
            return format_authority_round(self.authority, self.round)
        return f"[{self.authority:02}]{self.round}"

    __repr__ = __str__


class AuthoritySet:
    """A set of up to 128 authority indices stored as a bit mask."""

    __slots__ = ("_bits",)

    def __init__(self, bits: int = 0) -> None:
        self._bits = bits

    @staticmethod
    def _bit(authority: AuthorityIndex) -> int:
        if not 0 <= authority < _AUTHORITY_SET_BITS:
            raise ValueError(
                f"authority index {authority} out of range [0, {_AUTHORITY_SET_BITS})"
            )
        return 1 << authority

    def insert(self, authority: AuthorityIndex) -> bool:
        """Add an authority; return False if it was already present."""
        bit = self._bit(authority)
        if self._bits & bit:
            return False
        self._bits |= bit
        return True

    def present(self) -> Iterator[AuthorityIndex]:
        """Yield the authorities in the set in ascending order."""
        return (i for i in range(_AUTHORITY_SET_BITS) if self._bits >> i & 1)

    def clear(self) -> None:
        self._bits = 0

    def __contains__(self, authority: object) -> bool:
        return (
            isinstance(authority, int)
            and 0 <= authority < _AUTHORITY_SET_BITS
            and bool(self._bits >> authority & 1)
        )

    def __len__(self) -> int:
        return bin(self._bits).count("1")

    def __iter__(self) -> Iterator[AuthorityIndex]:
        return self.present()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuthoritySet):
            return NotImplemented
        return self._bits == other._bits

    def __hash__(self) -> int:
        return hash(self._bits)

    def __repr__(self) -> str:
        return f"AuthoritySet({list(self.present())})"


@dataclass(frozen=True)
class Transaction:
    """Opaque transaction payload."""

    data: bytes = b""

    def __bytes__(self) -> bytes:
        return bytes(self.data)


@dataclass(frozen=True, repr=False)
class TransactionLocator:
    """Position of a transaction inside a block."""

    block: BlockReference
    offset: int

    def _order_key(self) -> tuple[int, int, int]:
        return (*self.block._order_key(), self.offset)

    def __lt__(self, other: "TransactionLocator") -> bool:
        if not isinstance(other, TransactionLocator):
            return NotImplemented
        return self._order_key() < other._order_key()

    def __le__(self, other: "TransactionLocator") -> bool:
        if not isinstance(other, TransactionLocator):
            return NotImplemented
        return self._order_key() <= other._order_key()

    def __gt__(self, other: "TransactionLocator") -> bool:
        if not isinstance(other, TransactionLocator):
            return NotImplemented
        return self._order_key() > other._order_key()

    def __ge__(self, other: "TransactionLocator") -> bool:
        if not isinstance(other, TransactionLocator):
            return NotImplemented
        return self._order_key() >= other._order_key()

    def __str__(self) -> str:
        return f"{self.block}:{self.offset}"

    __repr__ = __str__


class InvalidRangeError(ValueError):
    """A transaction locator range failed validation."""


@dataclass(frozen=True)
class TransactionLocatorRange:
    """A contiguous run of transaction offsets inside one block."""

    block: BlockReference
    offset_start_inclusive: int
    offset_end_exclusive: int

    @classmethod
    def one(cls, locator: TransactionLocator) -> "TransactionLocatorRange":
        """A range covering exactly one transaction."""
        return cls(locator.block, locator.offset, locator.offset + 1)

    def _order_key(self) -> tuple[int, int, int, int]:
        return (
            *self.block._order_key(),
            self.offset_start_inclusive,
            self.offset_end_exclusive,
        )

    def __lt__(self, other: "TransactionLocatorRange") -> bool:
        if not isinstance(other, TransactionLocatorRange):
            return NotImplemented
        return self._order_key() < other._order_key()

    def __le__(self, other: "TransactionLocatorRange") -> bool:
        if not isinstance(other, TransactionLocatorRange):
            return NotImplemented
        return self._order_key() <= other._order_key()

    def __gt__(self, other: "TransactionLocatorRange") -> bool:
        if not isinstance(other, TransactionLocatorRange):
            return NotImplemented
        return self._order_key() > other._order_key()

    def __ge__(self, other: "TransactionLocatorRange") -> bool:
        if not isinstance(other, TransactionLocatorRange):
            return NotImplemented
        return self._order_key() >= other._order_key()

    def range(self) -> range:
        return range(self.offset_start_inclusive, self.offset_end_exclusive)

    def locators(self) -> Iterator[TransactionLocator]:
        """Yield a locator for every offset in the range."""
        return (TransactionLocator(self.block, offset) for offset in self.range())

    def __len__(self) -> int:
        return len(self.range())

    def verify(self) -> None:
        """Raise InvalidRangeError if the range is reversed or too large."""
        if self.offset_end_exclusive < self.offset_start_inclusive:
            raise InvalidRangeError(
                "offset_end_exclusive must be greater or equal offset_start_inclusive: "
                f"{self.offset_end_exclusive}, {self.offset_start_inclusive}"
            )
        length = self.offset_end_exclusive - self.offset_start_inclusive
        if length >= _MAX_RANGE_LEN:
            raise InvalidRangeError(f"Include is too large when uncompressed: {length}")
        if self.offset_end_exclusive >= _MAX_RANGE_LEN:
            raise InvalidRangeError(
                "offset_end_exclusive is too large when uncompressed: "
                f"{self.offset_end_exclusive}"
            )


@dataclass(frozen=True)
class Accept:
    """Vote to accept a transaction."""


@dataclass(frozen=True)
class Reject:
    """Vote to reject a transaction, optionally naming a conflicting one."""

    conflict: Optional[TransactionLocator] = None


Vote = Union[Accept, Reject]


@dataclass(frozen=True)
class Share:
    """An authority shares a transaction without voting on it."""

    transaction: Transaction

    def __str__(self) -> str:
        return "tx"


@dataclass(frozen=True)
class VoteStatement:
    """An authority votes to accept or reject a transaction."""

    locator: TransactionLocator
    vote: Vote

    def __str__(self) -> str:
        sign = "+" if isinstance(self.vote, Accept) else "-"
        return f"{sign}{self.locator}"


@dataclass(frozen=True)
class VoteRange:
    """An authority accepts a contiguous range of transactions."""

    range: TransactionLocatorRange

    def __str__(self) -> str:
        r = self.range
        return f"+{r.block}:{r.offset_start_inclusive}:{r.offset_end_exclusive}"


BaseStatement = Union[Share, VoteStatement, VoteRange]