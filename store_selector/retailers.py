"""Retailer brands: name-based brand extraction, the retailer catalogue and
performance-tier selection within one retailer's stores."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .models import StoreRecord


KNOWN_RETAILERS = (
    'Albert Heijn',
    'Jumbo',
    'Plus',
    'Aldi',
    'Coop',
    'Spar',
    'Vomar',
    'Picnic',
    'Dirk',
    'Dekamarkt',
    'Lidl',
    'Nettorama',
    'Boni',
    'Hoogvliet',
    'Jan Linders',
)


def extract_retailer_brand(store_name: str, known_retailers: Sequence[str] = KNOWN_RETAILERS) -> str:
    """
    Map a store name to its retailer brand.

    Known brands are matched as a name prefix; otherwise the first two words
    are used, or the single word when there is only one.

    Examples:
        "Albert Heijn Utrecht Centrum" -> "Albert Heijn"
        "Deen Supermarkt Hoorn"        -> "Deen Supermarkt"
    """
    for retailer in known_retailers:
        if store_name.startswith(retailer):
            return retailer

    words = store_name.split(' ')
    if len(words) >= 2:
        return f"{words[0]} {words[1]}"
    return words[0] or store_name


@dataclass(frozen=True)
class RetailerSummary:
    name: str
    store_count: int
    total_revenue: float
    revenue_share: float


def retailer_catalogue(stores: Sequence[StoreRecord], limit: Optional[int] = 20,
                       brand_extractor: Callable[[str], str] = extract_retailer_brand) -> List[RetailerSummary]:
    """
    Retailers present in the data, largest store count first.

    Args:
        stores: All store records
        limit: Keep only the first `limit` retailers; None keeps all
        brand_extractor: Store name -> retailer brand

    Returns:
        RetailerSummary list; revenue_share is the percentage of total revenue
    """
    counts: Dict[str, int] = {}
    revenue: Dict[str, float] = {}
    for store in stores:
        brand = brand_extractor(store.name)
        counts[brand] = counts.get(brand, 0) + 1
        revenue[brand] = revenue.get(brand, 0.0) + store.performance_value

    total_revenue = sum(revenue.values())
    catalogue = [
        RetailerSummary(brand, counts[brand], revenue[brand],
                        revenue[brand] / total_revenue * 100 if total_revenue else 0.0)
        for brand in counts
    ]
    catalogue.sort(key=lambda r: -r.store_count)
    return catalogue if limit is None else catalogue[:limit]


def stores_for_retailer(stores: Sequence[StoreRecord], retailer: str,
                        brand_extractor: Callable[[str], str] = extract_retailer_brand) -> List[StoreRecord]:
    """Stores whose extracted brand equals `retailer`, in input order."""
    return [store for store in stores if brand_extractor(store.name) == retailer]


def retailer_metrics(retailer_stores: Sequence[StoreRecord],
                     all_stores: Sequence[StoreRecord]) -> Optional[Dict[str, Any]]:
    """
    Headline figures for one retailer's stores.

    Returns:
        Dictionary with total_stores, total_revenue, avg_revenue, regions,
        store_types and revenue_percentage (share of all_stores revenue);
        None when the retailer has no stores
    """
    if not retailer_stores:
        return None
    total_revenue = sum(s.performance_value for s in retailer_stores)
    all_revenue = sum(s.performance_value for s in all_stores)
    return {
        'total_stores': len(retailer_stores),
        'total_revenue': total_revenue,
        'avg_revenue': total_revenue / len(retailer_stores),
        'regions': list(dict.fromkeys(s.region for s in retailer_stores)),
        'store_types': list(dict.fromkeys(s.store_type for s in retailer_stores)),
        'revenue_percentage': total_revenue / all_revenue * 100 if all_revenue else 0.0,
    }


class TierType(Enum):
    PERCENTAGE = "percentage"
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class PerformanceTier:
    """Top `value` percent of stores, or every store at or above `value` revenue."""
    type: TierType = TierType.PERCENTAGE
    value: float = 20.0

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Tier value must be non-negative, got {self.value}")
        if self.type is TierType.PERCENTAGE and self.value > 100:
            raise ValueError(f"Percentage tier must be within [0, 100], got {self.value}")

    @property
    def description(self) -> str:
        if self.type is TierType.PERCENTAGE:
            return f"Top {self.value:g}% Best Performers"
        return f"Stores with revenue >= €{self.value:,.0f}"


def select_performance_tier(stores: Sequence[StoreRecord], tier: PerformanceTier) -> List[StoreRecord]:
    """
    Best performers of a store list according to a tier.

    Percentage tiers take the first floor(value% * n) stores of the
    descending sort; absolute tiers keep every store at or above value.
    Both return stores in descending performance order.
    """
    ranked = sorted(stores, key=lambda s: s.performance_value, reverse=True)
    if tier.type is TierType.PERCENTAGE:
        return ranked[:int(math.floor(tier.value / 100 * len(ranked)))]
    return [s for s in ranked if s.performance_value >= tier.value]
