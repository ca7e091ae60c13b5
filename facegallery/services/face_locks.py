"""Per-face and per-person mutation serialization."""
import asyncio
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncContextManager, AsyncGenerator, Dict, List, Optional, Tuple

LockKey = Tuple[str, str]


class FaceLockRegistry:
    """Hands out one asyncio lock per face ID and one per person ID.

    Every mutation of a face runs while holding that face's lock, and then
    the locks of every person it reads or changes. Two requests touching the
    same face, or the same person, are applied one after the other and the
    second always sees the outcome of the first. Unrelated operations do not
    contend.

    Lock order is fixed: the face first, then persons sorted by ID.

    Example:
        ```python
        locks = FaceLockRegistry()
        async with locks.hold(face_id):
            async with locks.hold_persons(source_id, target_id):
                ...  # read, mutate and commit
        ```
    """

    def __init__(self) -> None:
        self._locks: Dict[LockKey, asyncio.Lock] = {}
        self._waiters: Dict[LockKey, int] = {}

    def hold(self, face_id: str) -> AsyncContextManager[None]:
        """Serialize mutations of one face."""
        return self._hold_all([("face", face_id)])

    def hold_persons(self, *person_ids: Optional[str]) -> AsyncContextManager[None]:
        """Serialize changes to the membership of the given persons.

        Duplicate and None IDs are ignored.
        """
        keys = [("person", person_id) for person_id in sorted({p for p in person_ids if p})]
        return self._hold_all(keys)

    @asynccontextmanager
    async def _hold_all(self, keys: List[LockKey]) -> AsyncGenerator[None, None]:
        async with AsyncExitStack() as stack:
            for key in keys:
                await stack.enter_async_context(self._hold_one(key))
            yield

    @asynccontextmanager
    async def _hold_one(self, key: LockKey) -> AsyncGenerator[None, None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
