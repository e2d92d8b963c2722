"""
Chronological ordering and analysis gating of interventions.

Dated interventions come first, ascending by ISO date; undated ones follow.
Ties break by original index. Only the earliest intervention that is not yet
analyzed may be analyzed, so the fold always runs in chronological order.
"""
import re
from datetime import date

from .coerce import first_of

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:\d{2})?)?$")


def resolvable_iso(value) -> str | None:
    """Return value if it is a real ISO date (optionally with time), else None."""
    if not isinstance(value, str):
        return None
    v = value.strip()
    if not ISO_DATE_RE.match(v):
        return None
    try:
        date.fromisoformat(v[:10])
    except ValueError:
        return None
    return v


def sort_key(item):
    index = first_of(item, "index")
    iso = resolvable_iso(first_of(item, "fecha_iso", "fechaISO"))
    if iso is None:
        return (1, "", index)
    return (0, iso, index)


def chronological_order(items) -> list:
    """Indices of items in chronological order."""
    return [first_of(it, "index") for it in sorted(items, key=sort_key)]


class Chronology:
    """Ordering plus gating state for one set of interventions."""

    def __init__(self, items, analyzed=()):
        self.order = chronological_order(items)
        self._pos = {idx: i for i, idx in enumerate(self.order)}
        done = set(analyzed)
        completed = 0
        while completed < len(self.order) and self.order[completed] in done:
            completed += 1
        self.completed = completed
        self.analyzed = done

    @property
    def next_index(self):
        """Index of the only intervention currently eligible, or None when all are done."""
        return self.order[self.completed] if self.completed < len(self.order) else None

    def position(self, index):
        return self._pos.get(index)

    def can_analyze(self, index) -> bool:
        return self.next_index is not None and self.next_index == index

    def to_dict(self):
        return {"order": list(self.order), "completed": self.completed, "next_index": self.next_index}
