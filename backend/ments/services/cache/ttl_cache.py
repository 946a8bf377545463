"""
TTL Cache

Process-local response cache with per-entry expiration.

Entries expire lazily on read and are reclaimed by a background sweeper
whose running state tracks occupancy: it starts on the first insertion
into an empty store and exits once a sweep leaves the store empty.
"""

import copy
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 60.0


@dataclass(frozen=True)
class CacheEntry:
    """Stored value with its absolute expiry deadline (epoch seconds)."""

    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheStats:
    """Live entry count and keys at the moment of the call."""

    size: int
    keys: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"size": self.size, "keys": list(self.keys)}


class TTLCache:
    """
    In-memory key/value cache with per-entry TTL.

    The store is heterogeneous: any key may hold a value of any shape, and
    keeping shapes consistent per key namespace is the caller's contract.
    Values are deep-copied on the way in and on the way out, so the cached
    copy is frozen from the moment of ``set``.

    Every public operation holds an internal lock, which makes the cache
    safe to share between the event loop and FastAPI's worker threads.
    """

    def __init__(
        self,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
        copy_values: bool = True,
    ):
        """
        Initialize the cache.

        Args:
            sweep_interval: Seconds between background sweeps
            clock: Wall-clock source in epoch seconds (injectable for tests)
            copy_values: Deep-copy values on insertion and on read
        """
        if sweep_interval <= 0:
            raise ValueError("sweep_interval must be positive")

        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._clock = clock
        self._copy_values = copy_values
        self.sweep_interval = sweep_interval

        self._sweeper: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    def _copy(self, value: Any) -> Any:
        return copy.deepcopy(value) if self._copy_values else value

    # Core operations

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a live value by key.

        An expired entry is deleted as a side effect and reported absent.
        Reads never extend the entry's TTL.

        Args:
            key: Cache key
            default: Value returned when the key is absent or expired

        Returns:
            Cached value or ``default``
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return default

            if entry.is_expired(self._clock()):
                del self._store[key]
                return default

            return self._copy(entry.value)

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """
        Store a value, replacing any existing entry for the key.

        A non-positive TTL stores an entry that is already expired.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Time to live in seconds, from now
        """
        with self._lock:
            self._store[key] = CacheEntry(
                value=self._copy(value),
                expires_at=self._clock() + ttl_seconds,
            )
            self.start()

    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if an entry was removed."""
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear_by_prefix(self, prefix: str) -> int:
        """
        Remove every key starting with ``prefix``.

        Plain case-sensitive string prefix; ``"job"`` also matches
        ``"jobxyz:..."``.

        Returns:
            Number of entries removed
        """
        with self._lock:
            matching = [key for key in self._store if key.startswith(prefix)]
            for key in matching:
                del self._store[key]

        logger.debug("Cache cleared by prefix", prefix=prefix, count=len(matching))
        return len(matching)

    def clear_all(self) -> int:
        """Remove every entry, expired or not. Returns the count removed."""
        with self._lock:
            count = len(self._store)
            self._store.clear()

        logger.debug("Cache cleared", count=count)
        return count

    def sweep(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            expired = [
                key for key, entry in self._store.items() if entry.is_expired(now)
            ]
            for key in expired:
                del self._store[key]
            return len(expired)

    def stats(self) -> CacheStats:
        """Sweep expired entries, then report the live size and keys."""
        with self._lock:
            self.sweep()
            return CacheStats(size=len(self._store), keys=list(self._store))

    # Background sweeper lifecycle

    @property
    def is_sweeping(self) -> bool:
        """Whether the background sweeper is currently running."""
        with self._lock:
            return self._sweeper is not None and self._sweeper.is_alive()

    def start(self) -> None:
        """Start the background sweeper if it is not already running."""
        with self._lock:
            if self._sweeper is not None and self._sweeper.is_alive():
                return

            stop_event = threading.Event()
            sweeper = threading.Thread(
                target=self._sweep_loop,
                args=(stop_event,),
                name="ttl-cache-sweeper",
                daemon=True,
            )
            self._stop_event = stop_event
            self._sweeper = sweeper
            sweeper.start()

        logger.info("Cache sweeper started", interval=self.sweep_interval)

    def stop(self) -> None:
        """Stop the background sweeper and wait for it to exit."""
        with self._lock:
            sweeper, stop_event = self._sweeper, self._stop_event
            self._sweeper = None
            self._stop_event = None

        if sweeper is None:
            return

        stop_event.set()
        if sweeper is not threading.current_thread():
            sweeper.join()
        logger.info("Cache sweeper stopped")

    def _sweep_loop(self, stop_event: threading.Event) -> None:
        """Sweep on every tick until stopped or the store is empty."""
        while not stop_event.wait(self.sweep_interval):
            with self._lock:
                removed = self.sweep()
                remaining = len(self._store)

                if remaining == 0:
                    # Only release the handle if it is still ours.
                    if self._stop_event is stop_event:
                        self._sweeper = None
                        self._stop_event = None
                    logger.debug("Cache empty, sweeper exiting", removed=removed)
                    return

            logger.debug("Cache sweep completed", removed=removed, remaining=remaining)

    # Diagnostics

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._store.get(key)  # type: ignore[arg-type]
            return entry is not None and not entry.is_expired(self._clock())
