"""Synthetic transaction load generation for benchmarks."""

from __future__ import annotations

import random
import time
from datetime import timedelta
from typing import Optional

from .types import Transaction

_U64_MASK = (1 << 64) - 1
_TIMESTAMP_LEN = 8
_RANDOM_LEN = 8
_REPORT_EVERY = 10_000


def extract_timestamp(transaction: Transaction) -> timedelta:
    """Return the creation time (since the epoch) stored in a generated transaction."""
    data = bytes(transaction.data)
    if len(data) < _TIMESTAMP_LEN:
        raise ValueError("transactions should be at least 8 bytes")
    return timedelta(milliseconds=int.from_bytes(data[:_TIMESTAMP_LEN], "little"))


class TransactionGenerator:
    """Produces fixed-size transactions at a target load, one batch list per interval.

    Each transaction is an 8-byte little-endian millisecond timestamp, an
    8-byte pseudo-random value and zero padding up to ``transaction_size``.
    """

    TARGET_BLOCK_INTERVAL = timedelta(milliseconds=100)

    def __init__(
        self,
        seed: int,
        transaction_size: int,
        load: int,
        max_block_size: int,
    ) -> None:
        if transaction_size <= _TIMESTAMP_LEN + _RANDOM_LEN:
            raise ValueError(
                f"transaction size must exceed {_TIMESTAMP_LEN + _RANDOM_LEN} bytes, "
                f"got {transaction_size}"
            )
        self.transaction_size = transaction_size
        self.load = load
        self.max_block_size = max_block_size
        self.transactions_per_interval = (load + 9) // 10
        self.submitted_transactions = 0
        self._random = random.Random(seed).getrandbits(64)
        self._counter = 0
        self._to_report = 0
        self._padding = bytes(transaction_size - _TIMESTAMP_LEN - _RANDOM_LEN)

    def interval_batches(self, timestamp_ms: Optional[int] = None) -> list[list[Transaction]]:
        """Generate one interval's transactions, split into batches by block size."""
        if timestamp_ms is None:
            timestamp_ms = time.time_ns() // 1_000_000
        timestamp = (timestamp_ms & _U64_MASK).to_bytes(_TIMESTAMP_LEN, "little")

        batches: list[list[Transaction]] = []
        block: list[Transaction] = []
        block_size = 0
        for _ in range(self.transactions_per_interval):
            self._random = (self._random + self._counter) & _U64_MASK
            payload = timestamp + self._random.to_bytes(_RANDOM_LEN, "little") + self._padding
            block.append(Transaction(payload))
            block_size += self.transaction_size
            self._counter += 1
            self._to_report += 1
            if block_size >= self.max_block_size:
                batches.append(block)
                block = []
                block_size = 0
        if block:
            batches.append(block)

        if self._counter % _REPORT_EVERY == 0:
            self.submitted_transactions += self._to_report
            self._to_report = 0
        return batches