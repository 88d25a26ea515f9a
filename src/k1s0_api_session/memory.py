"""InMemorySessionStorage 実装"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from .models import SESSION_TYPE_ID_DEFAULT, Session
from .storage import SessionStorageWithGarbageCollection


class _StoredSession:
    __slots__ = ("session", "expires_at")

    def __init__(self, session: Session) -> None:
        self.session = session
        # expire() でスケジュールされた期限
        self.expires_at: float | None = None

    def is_expired(self, now: float) -> bool:
        if self.expires_at is not None and now >= self.expires_at:
            return True
        return self.session.has_expired(now)


class InMemorySessionStorage(SessionStorageWithGarbageCollection):
    """テスト用インメモリセッションストレージ。スレッドセーフ。"""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._store: dict[str, _StoredSession] = {}
        self._lock = threading.Lock()

    def set(self, session: Session) -> None:
        with self._lock:
            self._store[session.type_id] = _StoredSession(session)

    def get(
        self,
        type_id: str = SESSION_TYPE_ID_DEFAULT,
        ignore_expired: bool = True,
    ) -> Session | None:
        with self._lock:
            entry = self._store.get(type_id)
            if entry is None:
                return None
            if ignore_expired and entry.is_expired(self._clock()):
                return None
            return entry.session

    def exists(
        self,
        type_id: str = SESSION_TYPE_ID_DEFAULT,
        ignore_expired: bool = True,
    ) -> bool:
        return self.get(type_id, ignore_expired) is not None

    def delete(self, type_id: str = SESSION_TYPE_ID_DEFAULT) -> None:
        with self._lock:
            self._store.pop(type_id, None)

    def count(self, ignore_expired: bool = True) -> int:
        with self._lock:
            if not ignore_expired:
                return len(self._store)
            now = self._clock()
            return sum(1 for entry in self._store.values() if not entry.is_expired(now))

    def expire(
        self,
        type_id: str = SESSION_TYPE_ID_DEFAULT,
        interval: int = 0,
    ) -> None:
        with self._lock:
            entry = self._store.get(type_id)
            if entry is not None:
                entry.expires_at = self._clock() + interval

    def delete_expired(self, type_id: str | None = None) -> None:
        with self._lock:
            now = self._clock()
            for key in list(self._store):
                if type_id is not None and key != type_id:
                    continue
                if self._store[key].is_expired(now):
                    del self._store[key]
