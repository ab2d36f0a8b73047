"""Per-issue serialization of verification runs."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


def _normalize(issue_key: str) -> str:
    # Jira issue keys are case-insensitive: proj-1 and PROJ-1 are one issue
    return issue_key.strip().upper()


class IssueLocks:
    """One asyncio.Lock per issue key, dropped once nobody holds or awaits it.

    The read-then-write comment reconciliation is not atomic on the tracker,
    so two runs on the same issue must not interleave. Runs on different
    issues proceed concurrently.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, issue_key: str) -> AsyncIterator[None]:
        key = _normalize(issue_key)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, issue_key: str) -> bool:
        lock = self._locks.get(_normalize(issue_key))
        return lock is not None and lock.locked()
