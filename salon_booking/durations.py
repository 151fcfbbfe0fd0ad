# salon_booking/durations.py

import logging
from typing import Iterable, List, Mapping

from .schemas import DurationTotals, SelectionLine, ServiceItem

logger = logging.getLogger(__name__)


def aggregate(lines: Iterable[SelectionLine], catalog: Mapping[int, ServiceItem]) -> DurationTotals:
    """Sum working and reserved minutes over the selected lines.

    Lines whose item is not in the catalog contribute nothing, so a partially
    loaded catalog still yields a usable total.
    """
    working = 0
    reserved = 0
    for line in lines:
        item = catalog.get(line.item_id)
        if item is None:
            logger.debug(f"Item {line.item_id} missing from catalog, skipped")
            continue
        working += item.working_minutes * line.quantity
        reserved += item.reserved_minutes * line.quantity

    return DurationTotals(
        working_minutes=working,
        reserved_minutes=reserved,
        diff_minutes=max(0, reserved - working),
    )


def combine(*totals: DurationTotals) -> DurationTotals:
    working = sum(t.working_minutes for t in totals)
    reserved = sum(t.reserved_minutes for t in totals)
    return DurationTotals(
        working_minutes=working,
        reserved_minutes=reserved,
        diff_minutes=max(0, reserved - working),
    )


def count_occurrences(item_ids: Iterable[int]) -> List[SelectionLine]:
    """[3, 5, 3] -> [SelectionLine(3, 2), SelectionLine(5, 1)], first-seen order."""
    counts = {}
    for item_id in item_ids:
        counts[item_id] = counts.get(item_id, 0) + 1
    return [SelectionLine(item_id=item_id, quantity=qty) for item_id, qty in counts.items()]
