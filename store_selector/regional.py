"""
Regional Distribution

Population-based projections of how a retailer's stores should spread over
the Dutch provinces, the over-index variant that gives extra focus stores to
chosen regions, and the region weights / targets derived from them.

Usage:

    projection = over_index_distribution(40, ['Utrecht'], over_index_percentage=20)
    weights = region_weights_from_projection(projection)
    targets = region_targets(weights, target_count=25)
    gaps = region_target_gaps(result.selected_stores, targets)
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .grouping import count_by_region, round_half_up
from .models import RegionWeight, StoreRecord

logger = logging.getLogger(__name__)

DUTCH_PROVINCES = (
    'Groningen',
    'Friesland',
    'Drenthe',
    'Overijssel',
    'Flevoland',
    'Gelderland',
    'Utrecht',
    'Noord-Holland',
    'Zuid-Holland',
    'Zeeland',
    'Noord-Brabant',
    'Limburg',
)

# Inhabitants per province, in millions (approximate)
PROVINCE_POPULATION = {
    'Zuid-Holland': 3.7,
    'Noord-Holland': 2.9,
    'Noord-Brabant': 2.6,
    'Gelderland': 2.1,
    'Utrecht': 1.4,
    'Overijssel': 1.2,
    'Limburg': 1.1,
    'Groningen': 0.6,
    'Friesland': 0.7,
    'Drenthe': 0.5,
    'Flevoland': 0.4,
    'Zeeland': 0.4,
}

DEFAULT_OVER_INDEX_PERCENTAGE = 20.0


@dataclass(frozen=True)
class RegionProjection:
    region: str
    count: int
    percentage: float
    is_over_indexed: bool = False


def population_shares(population: Mapping[str, float] = PROVINCE_POPULATION,
                      regions: Sequence[str] = DUTCH_PROVINCES) -> Dict[str, float]:
    """Population share per region in percent; regions without data get 0."""
    total = sum(population.values())
    if total <= 0:
        return {region: 0.0 for region in regions}
    return {region: population.get(region, 0.0) / total * 100 for region in regions}


def current_distribution(records: Sequence[StoreRecord],
                         regions: Sequence[str] = DUTCH_PROVINCES) -> List[RegionProjection]:
    """Actual store count and share per region."""
    counts = count_by_region(records)
    total = len(records)
    return [
        RegionProjection(region, counts.get(region, 0),
                         counts.get(region, 0) / total * 100 if total else 0.0)
        for region in regions
    ]


def national_distribution(total_stores: int,
                          population: Mapping[str, float] = PROVINCE_POPULATION,
                          regions: Sequence[str] = DUTCH_PROVINCES) -> List[RegionProjection]:
    """
    Spread total_stores over the regions in proportion to population.

    Counts are rounded half-up per region, so their sum can differ from
    total_stores by a few stores.
    """
    shares = population_shares(population, regions)
    return [
        RegionProjection(region, round_half_up(shares[region] / 100 * total_stores), shares[region])
        for region in regions
    ]


def over_index_distribution(total_stores: int, over_index_regions: Sequence[str],
                            over_index_percentage: float = DEFAULT_OVER_INDEX_PERCENTAGE,
                            population: Mapping[str, float] = PROVINCE_POPULATION,
                            regions: Sequence[str] = DUTCH_PROVINCES) -> List[RegionProjection]:
    """
    Population projection with extra focus stores for chosen regions.

    `over_index_percentage` of total_stores is reserved as focus stores and
    split evenly over the over-indexed regions; the remainder is spread by
    population share over every region.

    Args:
        total_stores: Stores to distribute
        over_index_regions: Regions receiving focus stores
        over_index_percentage: Share of total_stores reserved for focus (0-100)

    Returns:
        One RegionProjection per region; percentage is relative to total_stores

    Raises:
        ValueError: If over_index_percentage is outside [0, 100]
    """
    if not 0 <= over_index_percentage <= 100:
        raise ValueError(f"over_index_percentage must be within [0, 100], got {over_index_percentage}")

    unknown = [r for r in over_index_regions if r not in regions]
    if unknown:
        logger.warning(f"Over-index regions not in the region list: {unknown}")

    shares = population_shares(population, regions)
    focus_stores = round_half_up(over_index_percentage / 100 * total_stores)
    remaining = total_stores - focus_stores
    focus_per_region = round_half_up(focus_stores / len(over_index_regions)) if over_index_regions else 0

    projection = []
    for region in regions:
        over_indexed = region in over_index_regions
        count = round_half_up(shares[region] / 100 * remaining)
        if over_indexed:
            count += focus_per_region
        percentage = count / total_stores * 100 if total_stores else 0.0
        projection.append(RegionProjection(region, count, percentage, over_indexed))
    return projection


def region_weights_from_projection(projection: Sequence[RegionProjection]) -> Tuple[RegionWeight, ...]:
    """RegionWeight per projected region (weight = target_percentage = share)."""
    return tuple(
        RegionWeight(region=p.region, weight=p.percentage, target_percentage=p.percentage)
        for p in projection
    )


def region_targets(region_weights: Sequence[RegionWeight], target_count: int) -> Dict[str, int]:
    """
    Stores each region should receive out of target_count.

    target_percentage is used when set; otherwise weights are normalised to
    their sum. Rounded half-up per region.
    """
    if not region_weights:
        return {}
    if all(w.target_percentage is not None for w in region_weights):
        shares = {w.region: w.target_percentage / 100 for w in region_weights}
    else:
        total_weight = sum(w.weight for w in region_weights)
        if total_weight <= 0:
            return {w.region: 0 for w in region_weights}
        shares = {w.region: w.weight / total_weight for w in region_weights}
    return {region: round_half_up(share * target_count) for region, share in shares.items()}


def region_target_gaps(selected: Sequence[StoreRecord], targets: Mapping[str, int],
                       regions: Optional[Sequence[str]] = None) -> Dict[str, int]:
    """Selected minus targeted stores per region (negative means under target)."""
    counts = count_by_region(selected)
    regions = list(regions) if regions is not None else list(targets)
    for region in counts:
        if region not in regions:
            regions.append(region)
    return {region: counts.get(region, 0) - targets.get(region, 0) for region in regions}
