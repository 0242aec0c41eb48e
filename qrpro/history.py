"""Bounded in-memory generation history with per-record reload counters."""

from dataclasses import replace

from qrpro.logging import audit, get_logger
from qrpro.models import HistoryRecord

log = get_logger("history")

MAX_CAPACITY = 10
DEFAULT_CAPACITY = MAX_CAPACITY


class HistoryStore:
    """Newest-first record of past generations.

    Records are only ever evicted by capacity overflow; a reload replaces
    the record with a copy whose ``reload_count`` is one higher.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if not 1 <= capacity <= MAX_CAPACITY:
            raise ValueError(f"capacity must be between 1 and {MAX_CAPACITY}, got {capacity}")
        self.capacity = capacity
        self._records: list[HistoryRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def record(self, item: HistoryRecord) -> None:
        """Prepend ``item`` and drop anything beyond capacity."""
        self._records.insert(0, item)
        evicted = self._records[self.capacity:]
        del self._records[self.capacity:]
        audit("history.recorded", logger=log, id=item.id, kind=item.kind.value,
              size=len(self._records), evicted=[r.id for r in evicted])

    def get(self, record_id: int) -> HistoryRecord | None:
        for rec in self._records:
            if rec.id == record_id:
                return rec
        return None

    def reload(self, record_id: int) -> HistoryRecord | None:
        """Count one reload of ``record_id``. Unknown ids are ignored."""
        for i, rec in enumerate(self._records):
            if rec.id == record_id:
                updated = replace(rec, reload_count=rec.reload_count + 1)
                self._records[i] = updated
                audit("history.reloaded", logger=log, id=record_id, reload_count=updated.reload_count)
                return updated
        log.debug("reload ignored, no record with id=%s", record_id)
        return None

    def total_reloads(self) -> int:
        return sum(r.reload_count for r in self._records)

    def all(self) -> tuple[HistoryRecord, ...]:
        """Current records, newest first."""
        return tuple(self._records)

    def stats(self) -> dict:
        return {
            "total_generated": len(self._records),
            "total_reloads": self.total_reloads(),
        }
