"""
SessionStore — short-lived in-memory bundles keyed by an opaque id.

Entries expire after a fixed TTL through two independent mechanisms:
a one-shot deadline armed on every put(), and a periodic sweep that catches
anything a lost deadline left behind. get() never returns an entry older
than the TTL, whichever mechanism has or hasn't fired yet.

All per-entry deadlines share one expiry thread driven by a heap, so a
burst of puts does not park one thread per session.
"""
from __future__ import annotations

import dataclasses
import heapq
import itertools
import threading
import time
import uuid
from typing import Callable, Optional

from equilibro.config import SESSION_TTL_SECONDS, SWEEP_INTERVAL_SECONDS, SESSION_ID_LENGTH
from equilibro.data.schemas import SessionBundle


class SessionStore:
    """Thread-safe id -> SessionBundle mapping with dual expiry."""

    def __init__(
        self,
        ttl: float = SESSION_TTL_SECONDS,
        sweep_interval: float = SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._wakeup = threading.Condition(self._lock)
        self._entries: dict[str, SessionBundle] = {}
        # (deadline, seq, session_id, bundle); stale items are dropped when popped
        self._deadlines: list[tuple[float, int, str, SessionBundle]] = []
        self._seq = itertools.count()
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None
        self._expirer: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> "SessionStore":
        """Start the sweep and expiry threads; deadlines are armed from now on."""
        if self.is_running:
            return self
        self._stop.clear()
        self._sweeper = threading.Thread(target=self._sweep_loop, name="session-sweep", daemon=True)
        self._expirer = threading.Thread(target=self._expiry_loop, name="session-expiry", daemon=True)
        self._sweeper.start()
        self._expirer.start()
        return self

    def stop(self) -> None:
        """Stop both background threads and drop pending deadlines."""
        self._stop.set()
        with self._wakeup:
            self._deadlines.clear()
            self._wakeup.notify_all()
        for thread in (self._sweeper, self._expirer):
            if thread is not None:
                thread.join(timeout=5)
        self._sweeper = None
        self._expirer = None

    @property
    def is_running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @staticmethod
    def new_id() -> str:
        """Short URL-safe id; collisions are not checked."""
        return uuid.uuid4().hex[:SESSION_ID_LENGTH]

    def put(self, session_id: str, bundle: SessionBundle) -> SessionBundle:
        """Insert or overwrite, stamping the current time.

        An overwritten entry's deadline stays in the heap but no longer
        matches, so it can't evict the new bundle.
        """
        stamped = dataclasses.replace(bundle, created_at=self._clock())
        with self._wakeup:
            self._entries[session_id] = stamped
            if self.is_running:
                item = (time.monotonic() + self.ttl, next(self._seq), session_id, stamped)
                heapq.heappush(self._deadlines, item)
                if self._deadlines[0] is item:
                    self._wakeup.notify()
        return stamped

    def get(self, session_id: str) -> Optional[SessionBundle]:
        """Look up a bundle; entries past their TTL read as absent."""
        with self._lock:
            bundle = self._entries.get(session_id)
        if bundle is None or self._is_expired(bundle, self._clock()):
            return None
        return bundle

    def delete(self, session_id: str) -> None:
        """Remove an entry if present."""
        with self._lock:
            self._entries.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, session_id: str) -> bool:
        return self.get(session_id) is not None

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    def _is_expired(self, bundle: SessionBundle, now: float) -> bool:
        return now - bundle.created_at > self.ttl

    def _remove_locked(self, session_id: str, bundle: SessionBundle) -> bool:
        if self._entries.get(session_id) is not bundle:
            return False
        del self._entries[session_id]
        return True

    def _expire(self, session_id: str, bundle: SessionBundle) -> bool:
        """Per-entry deadline action: remove the entry if it is still this bundle."""
        with self._lock:
            return self._remove_locked(session_id, bundle)

    def _expiry_loop(self) -> None:
        with self._wakeup:
            while not self._stop.is_set():
                if not self._deadlines:
                    self._wakeup.wait()
                    continue
                delay = self._deadlines[0][0] - time.monotonic()
                if delay > 0:
                    self._wakeup.wait(delay)
                    continue
                _, _, session_id, bundle = heapq.heappop(self._deadlines)
                self._remove_locked(session_id, bundle)

    def sweep(self) -> int:
        """Remove every entry older than the TTL. Returns the number removed.

        Scans a snapshot so the lock is only held for the copy and for each
        individual removal.
        """
        with self._lock:
            snapshot = list(self._entries.items())
        now = self._clock()
        removed = 0
        for session_id, bundle in snapshot:
            if self._is_expired(bundle, now) and self._expire(session_id, bundle):
                removed += 1
        return removed

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self.sweep_interval):
            removed = self.sweep()
            if removed:
                print(f"  Session sweep removed {removed} expired bundle(s)")
