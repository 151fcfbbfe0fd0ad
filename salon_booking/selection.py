# salon_booking/selection.py

from typing import Iterable, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict


class SingleCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    category: str
    item_id: int

    @property
    def categories(self) -> Tuple[str, ...]:
        return (self.category,)


class SetItem(BaseModel):
    """A menu bundling several categories (e.g. cut + color)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["set"] = "set"
    categories: Tuple[str, ...]
    item_id: int


Selection = Union[SingleCategory, SetItem]


def selection_for(item) -> Optional[Selection]:
    """Selection for a menu item; uncategorized items never conflict and give None."""
    categories = tuple(dict.fromkeys(item.categories))
    if not categories:
        return None
    if len(categories) == 1:
        return SingleCategory(category=categories[0], item_id=item.id)
    return SetItem(categories=categories, item_id=item.id)


def find_conflicts(selections: Iterable[Selection]) -> List[Tuple[int, int, str]]:
    """Every (earlier_item, later_item, category) pair claiming the same category."""
    holders = {}
    conflicts = []
    for sel in selections:
        for category in sel.categories:
            for holder in holders.get(category, []):
                if holder != sel.item_id:
                    conflicts.append((holder, sel.item_id, category))
            holders.setdefault(category, []).append(sel.item_id)
    return conflicts


def eligible_staff(menu_ids: Iterable[int], staff_ids: Iterable[int], exclusions: Iterable) -> List[int]:
    """Staff who may perform every selected menu.

    `exclusions` are rows carrying `menu_id` and `staff_id`, as stored in MenuExclusionStaff.
    """
    wanted = set(menu_ids)
    blocked = set()
    for ex in exclusions:
        if ex.menu_id in wanted:
            blocked.add(ex.staff_id)
    return [s for s in staff_ids if s not in blocked]
