"""
Snowflake-style identifier generator.

Layout of the 63-bit id (most significant first):
    41 bits  milliseconds since EPOCH_MS
     5 bits  datacenter id
     5 bits  worker id
    12 bits  per-millisecond sequence
"""
import threading
import time
from typing import Callable, Optional

EPOCH_MS = 1704067200000  # 2024-01-01T00:00:00Z

WORKER_ID_BITS = 5
DATACENTER_ID_BITS = 5
SEQUENCE_BITS = 12

MAX_WORKER_ID = (1 << WORKER_ID_BITS) - 1
MAX_DATACENTER_ID = (1 << DATACENTER_ID_BITS) - 1
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1

WORKER_ID_SHIFT = SEQUENCE_BITS
DATACENTER_ID_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS
TIMESTAMP_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS + DATACENTER_ID_BITS


class ClockMovedBackwards(RuntimeError):
    pass


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class IdGenerator:
    def __init__(
        self,
        worker_id: int = 1,
        datacenter_id: int = 1,
        clock_ms: Optional[Callable[[], int]] = None,
    ):
        if not 0 <= worker_id <= MAX_WORKER_ID:
            raise ValueError(f"worker_id must be between 0 and {MAX_WORKER_ID}")
        if not 0 <= datacenter_id <= MAX_DATACENTER_ID:
            raise ValueError(f"datacenter_id must be between 0 and {MAX_DATACENTER_ID}")

        self.worker_id = worker_id
        self.datacenter_id = datacenter_id
        self._clock_ms = clock_ms or _now_ms
        self._lock = threading.Lock()
        self._last_timestamp = -1
        self._sequence = 0

    def _wait_next_millis(self, last_timestamp: int) -> int:
        timestamp = self._clock_ms()
        while timestamp <= last_timestamp:
            timestamp = self._clock_ms()
        return timestamp

    def next_id(self) -> str:
        with self._lock:
            timestamp = self._clock_ms()

            if timestamp < self._last_timestamp:
                raise ClockMovedBackwards(
                    f"Clock moved backwards by {self._last_timestamp - timestamp} ms. Refusing to generate id"
                )

            if timestamp == self._last_timestamp:
                self._sequence = (self._sequence + 1) & SEQUENCE_MASK
                if self._sequence == 0:
                    # Sequence exhausted for this millisecond
                    timestamp = self._wait_next_millis(self._last_timestamp)
            else:
                self._sequence = 0

            self._last_timestamp = timestamp

            new_id = (
                ((timestamp - EPOCH_MS) << TIMESTAMP_SHIFT)
                | (self.datacenter_id << DATACENTER_ID_SHIFT)
                | (self.worker_id << WORKER_ID_SHIFT)
                | self._sequence
            )
            return str(new_id)
