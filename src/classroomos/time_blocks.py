"""
Government holidays and custom time blocks.

A date is blocked for a branch when it is a government holiday or carries a
Full Day block for that branch (or for all branches). Time Range blocks only
close part of the day.
"""

from typing import Iterable, List, Optional, Set

from . import database
from .models import GovHoliday, TimeBlock, normalize_time

GOVERNMENT_HOLIDAYS = [
    GovHoliday("International Mother Language Day", "2025-02-21"),
    GovHoliday("Independence Day", "2025-03-26"),
    GovHoliday("Eid-ul-Fitr (approx)", "2025-03-31"),
    GovHoliday("Pohela Boishakh", "2025-04-14"),
    GovHoliday("Eid-ul-Adha (approx)", "2025-06-08"),
    GovHoliday("Victory Day", "2025-12-16"),
]


def holiday_on(date_str: str) -> Optional[GovHoliday]:
    return next((h for h in GOVERNMENT_HOLIDAYS if h.date == date_str), None)


def applies_to_branch(block: TimeBlock, branch_id: Optional[str]) -> bool:
    """Whether a block covers ``branch_id``. With no branch given every block applies."""
    return block.all_branches or branch_id is None or block.branch_id == branch_id


def blocks_on(date_str: str, branch_id: Optional[str] = None,
              blocks: Optional[Iterable[TimeBlock]] = None) -> List[TimeBlock]:
    """Custom blocks on a date that apply to the branch."""
    if blocks is None:
        blocks = database.get_all_time_blocks()
    return [b for b in blocks if b.date == date_str and applies_to_branch(b, branch_id)]


def is_blocked(date_str: str, branch_id: Optional[str] = None,
               blocks: Optional[Iterable[TimeBlock]] = None) -> bool:
    """True when the whole day is closed for the branch."""
    if holiday_on(date_str):
        return True
    return any(b.block_type == "Full Day" for b in blocks_on(date_str, branch_id, blocks))


def blocked_dates(branch_id: Optional[str] = None,
                  blocks: Optional[Iterable[TimeBlock]] = None) -> Set[str]:
    """All fully closed dates for a branch, holidays included."""
    if blocks is None:
        blocks = database.get_all_time_blocks()
    dates = {h.date for h in GOVERNMENT_HOLIDAYS}
    dates.update(
        b.date for b in blocks
        if b.block_type == "Full Day" and applies_to_branch(b, branch_id)
    )
    return dates


def overlaps_time_block(date_str: str, start_time: str, end_time: str,
                        branch_id: Optional[str] = None,
                        blocks: Optional[Iterable[TimeBlock]] = None) -> bool:
    """True when a session from start_time to end_time hits any block on that date."""
    if holiday_on(date_str):
        return True
    start_time, end_time = normalize_time(start_time), normalize_time(end_time)
    for block in blocks_on(date_str, branch_id, blocks):
        if block.block_type == "Full Day":
            return True
        if block.start_time and block.end_time:
            if start_time < normalize_time(block.end_time) and normalize_time(block.start_time) < end_time:
                return True
    return False
