"""Per-session snapshot of the latest completed lookup.

Every lookup takes a token before it starts. A finished lookup is only shown
if its token is newer than the one already on screen, so a slow response to
an older request never replaces a newer result.
"""
import itertools
import threading
from datetime import datetime
from typing import Callable, Generic, Hashable, MutableMapping, Optional, Tuple, TypeVar

from collect import CodeforcesClient, CodeforcesError, USER_MESSAGE, fetch_handle_data
from process import analyze
from structs import HandleAnalysis
from utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SnapshotStore(Generic[T]):
    def __init__(self):
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()
        self._latest_token = 0
        self._snapshot: Optional[T] = None
        self._error: Optional[str] = None

    def begin(self) -> int:
        with self._lock:
            return next(self._tokens)

    def commit(self, token: int, snapshot: Optional[T], error: Optional[str] = None) -> bool:
        """Store a finished lookup. Returns False when a newer one is already shown."""
        with self._lock:
            if token <= self._latest_token:
                logger.info("Dropping stale result for request %d (showing %d)", token, self._latest_token)
                return False
            self._latest_token = token
            self._snapshot = snapshot
            self._error = error
            return True

    def fail(self, token: int, error: str) -> bool:
        return self.commit(token, None, error)

    @property
    def current(self) -> Tuple[int, Optional[T], Optional[str]]:
        with self._lock:
            return self._latest_token, self._snapshot, self._error

    @property
    def snapshot(self) -> Optional[T]:
        return self.current[1]

    @property
    def error(self) -> Optional[str]:
        return self.current[2]


def run_lookup(store: SnapshotStore, handle: str, client: Optional[CodeforcesClient] = None,
               now: Optional[datetime] = None) -> Tuple[int, Optional[HandleAnalysis]]:
    """Fetch and analyze one handle, then offer the result to the store.

    Returns the request token and the analysis (None on failure). Whether it
    is displayed is up to the store.
    """
    token = store.begin()
    handle = handle.strip()
    if not handle:
        store.fail(token, "Please enter a handle")
        return token, None
    try:
        data = fetch_handle_data(handle, client)
    except CodeforcesError as e:
        logger.warning("Lookup %d for %s failed: %s", token, handle, e)
        store.fail(token, USER_MESSAGE)
        return token, None

    analysis = analyze(data["user"], data["submissions"], data["ratings"], now=now,
                       warnings=data["warnings"])
    store.commit(token, analysis)
    return token, analysis


def cached_sample(state: MutableMapping, slot: str, key: Hashable, refresh: bool,
                  compute: Callable[[], T]) -> T:
    """Reuse the sample stored in `state[slot]` until `key` changes or a refresh is asked for."""
    entry = state.get(slot)
    if refresh or entry is None or entry[0] != key:
        entry = (key, compute())
        state[slot] = entry
    return entry[1]
