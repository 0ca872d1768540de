import threading
from typing import Iterable, Optional, Set


class VisitedSet:
    """URLs already admitted for extraction in one ingestion session.

    ``mark`` is the only admission path: check and insert happen under one
    lock, so concurrent callers never both extract the same URL.
    """

    def __init__(self, urls: Optional[Iterable[str]] = None):
        self._urls: Set[str] = set(urls or ())
        self._lock = threading.Lock()

    def mark(self, url: str) -> bool:
        """Record ``url`` as visited. Returns False if it already was."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def clear(self) -> None:
        with self._lock:
            self._urls.clear()

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
