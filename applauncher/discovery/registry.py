import threading
from typing import Iterable, Tuple
from applauncher.discovery.desktop_entry import ApplicationRecord


class AppRegistry:
    """
    Holds the current list of applications shared between the discovery
    worker and the UI.

    The list is an immutable tuple that is only ever replaced as a whole, so
    readers get a consistent snapshot and the lock is held just long enough
    to swap or read the reference.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Tuple[ApplicationRecord, ...] = ()
        self._generation = 0

    def replace(self, records: Iterable[ApplicationRecord]) -> int:
        """Publishes a new list. Returns the new generation number."""
        new_records = tuple(records)
        with self._lock:
            self._records = new_records
            self._generation += 1
            return self._generation

    def snapshot(self) -> Tuple[ApplicationRecord, ...]:
        with self._lock:
            return self._records

    @property
    def generation(self) -> int:
        """0 until the first scan is published, then incremented per scan."""
        with self._lock:
            return self._generation

    @property
    def loaded(self) -> bool:
        return self.generation > 0

    def __len__(self) -> int:
        return len(self.snapshot())


def filter_records(
    records: Iterable[ApplicationRecord], term: str
) -> Tuple[ApplicationRecord, ...]:
    """Keeps records whose name contains `term`, ignoring case. Order is kept."""
    needle = term.strip().casefold()
    if not needle:
        return tuple(records)
    return tuple(r for r in records if needle in r.name.casefold())


def find_by_name(records: Iterable[ApplicationRecord], name: str):
    """Returns the first record whose name equals `name` ignoring case, or None."""
    wanted = name.strip().casefold()
    for record in records:
        if record.name.casefold() == wanted:
            return record
    return None
