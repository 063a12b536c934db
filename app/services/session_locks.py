"""Per-session locks so at most one level decision per session is in flight.

Submitting an answer reads the answer window and point balance, runs the
level engine, then writes the result back. Two overlapping submissions for
the same session would both read the same state and the later write would
silently drop the earlier decision. Within one process the lock serializes
them; across processes the versioned write in ``save_decision`` catches it.

A session's lock only lives while some request holds it or waits for it, so
abandoned sessions leave nothing behind. The registry is only touched between
awaits, which keeps it consistent on a single event loop without a lock of
its own.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

_session_locks: Dict[int, asyncio.Lock] = {}
# Requests currently holding or waiting on each session's lock
_lock_users: Dict[int, int] = {}


def _checkout(session_id: int) -> asyncio.Lock:
    lock = _session_locks.get(session_id)
    if lock is None:
        lock = _session_locks[session_id] = asyncio.Lock()
    _lock_users[session_id] = _lock_users.get(session_id, 0) + 1
    return lock


def _checkin(session_id: int) -> None:
    remaining = _lock_users.get(session_id, 0) - 1
    if remaining > 0:
        _lock_users[session_id] = remaining
    else:
        _lock_users.pop(session_id, None)
        _session_locks.pop(session_id, None)


@asynccontextmanager
async def session_lock(session_id: int) -> AsyncIterator[None]:
    """Hold the quiz session's lock for the duration of the block."""
    lock = _checkout(session_id)
    try:
        async with lock:
            yield
    finally:
        _checkin(session_id)


def active_session_locks() -> int:
    """Number of sessions that currently have a lock."""
    return len(_session_locks)


def reset_session_locks() -> None:
    """Drop every lock (they are bound to the running event loop)."""
    _session_locks.clear()
    _lock_users.clear()
