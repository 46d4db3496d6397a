import threading


class DocIdCounter:
    """Process-wide monotonic doc id source."""

    def __init__(self, start: int = 0) -> None:
        self._next = start
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            current = self._next
            self._next += 1
            return current


GLOBAL_DOC_IDS = DocIdCounter()
