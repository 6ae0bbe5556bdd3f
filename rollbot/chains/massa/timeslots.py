"""Slot arithmetic from genesis time and slot duration. Times in milliseconds."""
from __future__ import annotations

import time

from ...errors import SlotComputationError
from ...models import Slot


def _thread_duration(thread_count: int, t0: int) -> int:
    if thread_count <= 0:
        raise SlotComputationError(f"Invalid thread count: {thread_count}")
    if t0 <= 0:
        raise SlotComputationError(f"Invalid slot duration t0: {t0}")
    duration = t0 // thread_count
    if duration == 0:
        raise SlotComputationError(
            f"Slot duration t0={t0}ms is shorter than thread count {thread_count}"
        )
    return duration


def compensated_now(clock_compensation: int = 0, now_ms: int | None = None) -> int:
    """Current UNIX time in milliseconds shifted by ``clock_compensation``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    compensated = now_ms + clock_compensation
    if compensated < 0:
        raise SlotComputationError(
            f"Clock compensation {clock_compensation}ms yields a negative time"
        )
    return compensated


def get_latest_block_slot_at_timestamp(
    thread_count: int, t0: int, genesis_timestamp: int, timestamp: int
) -> Slot | None:
    """Latest slot started at ``timestamp``, or None before genesis."""
    thread_duration = _thread_duration(thread_count, t0)
    if timestamp < genesis_timestamp:
        return None
    elapsed = timestamp - genesis_timestamp
    return Slot(period=elapsed // t0, thread=(elapsed % t0) // thread_duration)


def get_current_latest_block_slot(
    thread_count: int,
    t0: int,
    genesis_timestamp: int,
    clock_compensation: int = 0,
    now_ms: int | None = None,
) -> Slot | None:
    return get_latest_block_slot_at_timestamp(
        thread_count,
        t0,
        genesis_timestamp,
        compensated_now(clock_compensation, now_ms),
    )


def get_block_slot_timestamp(
    thread_count: int, t0: int, genesis_timestamp: int, slot: Slot
) -> int:
    """Start time of ``slot``."""
    thread_duration = _thread_duration(thread_count, t0)
    return genesis_timestamp + slot.period * t0 + slot.thread * thread_duration
