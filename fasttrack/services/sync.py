"""
Last-write-wins reconciliation for offline-first clients.

Records are matched by their client-generated id. For fasts the "write time"
is ``end_time`` when present, otherwise ``start_time``; ties go to the
incoming side.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional

from fasttrack.services.records import field, finite_ms


def _write_time(fast: Any) -> float:
    end = finite_ms(field(fast, "end_time"))
    if end is not None:
        return end
    return finite_ms(field(fast, "start_time")) or 0


def should_replace_fast(stored: Optional[Any], incoming: Any) -> bool:
    if stored is None:
        return True
    return _write_time(incoming) >= _write_time(stored)


def merge_badges(*badge_lists: Iterable[str]) -> list[str]:
    """Union of badge id lists, keeping first-seen order."""
    seen = []
    for badges in badge_lists:
        for badge_id in badges or []:
            if badge_id not in seen:
                seen.append(badge_id)
    return seen
