"""Pre-selection filtering: produces the filtered pool handed to select()."""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import StoreRecord


@dataclass(frozen=True)
class FilterConfig:
    """
    Store filters; an empty tuple means "no restriction" for that dimension.

    retailers match case-insensitively as substrings of the store name,
    revenue_range is inclusive on both ends.
    """
    retailers: Tuple[str, ...] = ()
    store_types: Tuple[str, ...] = ()
    strategies: Tuple[str, ...] = ()
    channels: Tuple[str, ...] = ()
    customer_groups: Tuple[str, ...] = ()
    revenue_range: Tuple[float, float] = (0.0, math.inf)
    included_regions: Tuple[str, ...] = ()
    excluded_regions: Tuple[str, ...] = ()


def _matches(store: StoreRecord, filters: FilterConfig, retailers: List[str]) -> bool:
    if retailers and not any(r in store.name.lower() for r in retailers):
        return False
    if filters.store_types and store.store_type not in filters.store_types:
        return False
    if filters.strategies and store.strategy_tag not in filters.strategies:
        return False
    if filters.channels and store.channel not in filters.channels:
        return False
    if filters.customer_groups and store.customer_group not in filters.customer_groups:
        return False

    low, high = filters.revenue_range
    if store.performance_value < low or store.performance_value > high:
        return False

    if filters.included_regions and store.region not in filters.included_regions:
        return False
    if filters.excluded_regions and store.region in filters.excluded_regions:
        return False
    return True


def apply_filters(stores: Sequence[StoreRecord], filters: FilterConfig) -> List[StoreRecord]:
    """Stores passing every active filter, in input order."""
    if not stores:
        return []
    retailers = [r.lower() for r in filters.retailers]
    return [store for store in stores if _matches(store, filters, retailers)]
