# rxguard/frequencies.py
#
# Fixed mapping from a prescribed frequency label to the ordered times of day
# a dose is due. Stored medication `times` are never trusted; they are always
# recomputed from this table.

from typing import Dict, List, Tuple

FREQUENCY_TIMES: Dict[str, Tuple[str, ...]] = {
    "Once Daily": ("09:00",),
    "Twice Daily": ("09:00", "21:00"),
    "Three times Daily": ("09:00", "15:00", "21:00"),
    "Four times Daily": ("09:00", "13:00", "17:00", "21:00"),
    "Every Morning": ("08:00",),
    "Every Evening": ("20:00",),
    "Every 4 Hours": ("08:00", "12:00", "16:00", "20:00", "00:00", "04:00"),
    "Every 6 Hours": ("06:00", "12:00", "18:00", "00:00"),
    "Every 8 Hours": ("08:00", "16:00", "00:00"),
    "Every 12 Hours": ("08:00", "20:00"),
    "Weekly": ("09:00",),
    "As Needed": (),
}

# Unknown or empty labels fall back to a single morning dose.
DEFAULT_TIMES: Tuple[str, ...] = ("09:00",)

_BY_NORMALIZED_LABEL = {label.strip().lower(): times for label, times in FREQUENCY_TIMES.items()}


def lookup_times(frequency: str) -> List[str]:
    """Returns a fresh list of dose times for a frequency label (case-insensitive)."""
    key = (frequency or "").strip().lower()
    return list(_BY_NORMALIZED_LABEL.get(key, DEFAULT_TIMES))
