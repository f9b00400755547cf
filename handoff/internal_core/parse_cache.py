from __future__ import annotations

import hashlib
import time
from collections import OrderedDict
from concurrent.futures import Future
from threading import RLock
from typing import Any, Callable, Dict, Optional, Tuple


class ParseResultCache:
    """
    Request-layer LRU cache for parse results, keyed by content hash.

    Identical concurrent requests share one in-flight future, so the same
    document is parsed once even when several callers ask at the same time.
    """

    def __init__(
        self,
        max_size: int = 50,
        ttl_seconds: float = 300.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_size = max(1, int(max_size))
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._lock = RLock()
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._inflight: Dict[str, Future] = {}

    @staticmethod
    def key_for(content: str) -> str:
        return hashlib.sha256((content or "").encode("utf-8")).hexdigest()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, stored_at: float) -> bool:
        return self._ttl_seconds > 0 and self._clock() - stored_at > self._ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._expired(stored_at):
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            while len(self._entries) >= self._max_size:
                self._entries.popitem(last=False)
            self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup_expired(self) -> int:
        with self._lock:
            expired = [key for key, (stored_at, _) in self._entries.items() if self._expired(stored_at)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def get_or_submit(self, key: str, submit: Callable[[], Future]) -> Future:
        with self._lock:
            cached = self.get(key)
            if cached is not None:
                future: Future = Future()
                future.set_result(cached)
                return future
            inflight = self._inflight.get(key)
            if inflight is not None:
                return inflight
            future = submit()
            self._inflight[key] = future
        future.add_done_callback(lambda done: self._settle(key, done))
        return future

    def _settle(self, key: str, future: Future) -> None:
        with self._lock:
            if self._inflight.get(key) is future:
                del self._inflight[key]
        if future.cancelled() or future.exception() is not None:
            return
        self.set(key, future.result())
