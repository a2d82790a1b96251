"""Snowflake-style ID generator for economy entity IDs (accounts, loans, events...).

IDs are monotonically increasing strings with an optional short type prefix,
e.g. ``LN-7151845632049152`` for a loan. Single-process generator; the
economy runs as one logical instance.
"""

import threading
import time


class SnowflakeIdGenerator:
    """Simple snowflake ID generator.

    Layout (63 bits):
      - 41 bits: millisecond timestamp (since custom epoch)
      - 10 bits: node_id (0-1023)
      - 12 bits: sequence (0-4095 per millisecond)
    """

    _EPOCH_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z
    _NODE_BITS = 10
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, node_id: int = 0) -> None:
        if not (0 <= node_id < (1 << self._NODE_BITS)):
            raise ValueError(f"node_id must be 0-{(1 << self._NODE_BITS) - 1}")
        self._node_id = node_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_int(self) -> int:
        with self._lock:
            ts = self._now_ms()
            if ts < self._last_ms:
                # Clock moved backwards: keep issuing from the last timestamp
                ts = self._last_ms
            if ts == self._last_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    ts = self._wait_next_ms(ts)
            else:
                self._sequence = 0

            self._last_ms = ts
            return (
                ((ts - self._EPOCH_MS) << (self._NODE_BITS + self._SEQUENCE_BITS))
                | (self._node_id << self._SEQUENCE_BITS)
                | self._sequence
            )

    def next_id(self, prefix: str = "") -> str:
        value = str(self.next_int())
        return f"{prefix}-{value}" if prefix else value

    def _now_ms(self) -> int:
        return int(time.time() * 1000)

    def _wait_next_ms(self, last_ts: int) -> int:
        ts = self._now_ms()
        while ts <= last_ts:
            ts = self._now_ms()
        return ts


_default_generator = SnowflakeIdGenerator()


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID using the module-level default generator."""
    return _default_generator.next_id(prefix)
