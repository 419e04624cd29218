"""
키별 asyncio 락

같은 회원에 대한 패스 변경(생성/출석)을 한 번에 하나씩 처리합니다.
사용 중인 키만 dict 에 남깁니다.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Tuple


class KeyedLock:
    """키(회원 ID)별 직렬화 락"""

    def __init__(self):
        self._locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def acquire(self, key: str):
        lock, waiters = self._locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[key] = (lock, waiters + 1)
        try:
            async with lock:
                yield
        finally:
            lock, waiters = self._locks[key]
            if waiters <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, waiters - 1)

    def __len__(self) -> int:
        return len(self._locks)
