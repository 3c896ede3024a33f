"""
Result Analytics

Turns a raw selection into a SelectionResult: revenue totals, region coverage,
self-referential performance tiers and per-region revenue.
"""

from typing import Any, Callable, Dict, Sequence

from .grouping import count_by_region, percentile, round_half_up
from .models import (
    PerformanceDistribution,
    SelectionResult,
    SelectionStatistics,
    StoreRecord,
    TargetConfig,
)
from .retailers import extract_retailer_brand

BrandExtractor = Callable[[str], str]

# Tier boundaries as positions in the descending sort of the selection itself
HIGH_TIER_POSITION = 0.33
MEDIUM_TIER_POSITION = 0.66


def empty_result() -> SelectionResult:
    return SelectionResult()


def performance_distribution(selected: Sequence[StoreRecord]) -> PerformanceDistribution:
    """
    Count high/medium/low stores relative to the selection's own spread.

    high   : value >= value at the 33% position (descending)
    medium : value in [value at the 66% position, high threshold)
    low    : everything below the medium threshold
    """
    if not selected:
        return PerformanceDistribution()

    descending = sorted((r.performance_value for r in selected), reverse=True)
    high_threshold = percentile(descending, HIGH_TIER_POSITION)
    medium_threshold = percentile(descending, MEDIUM_TIER_POSITION)

    high = sum(1 for v in descending if v >= high_threshold)
    medium = sum(1 for v in descending if medium_threshold <= v < high_threshold)
    low = sum(1 for v in descending if v < medium_threshold)
    return PerformanceDistribution(high=high, medium=medium, low=low)


def revenue_per_region(selected: Sequence[StoreRecord]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for record in selected:
        totals[record.region] = totals.get(record.region, 0) + record.performance_value
    return totals


def build_result(selected: Sequence[StoreRecord], working_set: Sequence[StoreRecord],
                 brand_extractor: BrandExtractor = extract_retailer_brand) -> SelectionResult:
    """
    Compute the analytics for a selection.

    Args:
        selected: Stores chosen by a strategy, in selection order
        working_set: Candidate pool the selection was drawn from
        brand_extractor: Maps a store name to its retailer brand

    Returns:
        SelectionResult; all-zero when nothing was selected
    """
    if not selected:
        return empty_result()

    total_revenue = sum(r.performance_value for r in selected)
    average_revenue = total_revenue / len(selected)

    selected_regions = {r.region for r in selected}
    pool_regions = {r.region for r in working_set}
    region_coverage = len(selected_regions) / len(pool_regions) if pool_regions else 0.0

    retailers = {brand_extractor(r.name) for r in selected}

    return SelectionResult(
        selected_stores=list(selected),
        total_revenue=total_revenue,
        average_revenue=average_revenue,
        region_coverage=region_coverage,
        performance_distribution=performance_distribution(selected),
        statistics=SelectionStatistics(
            total_stores=len(selected),
            unique_regions=len(selected_regions),
            unique_retailers=len(retailers),
            revenue_per_region=revenue_per_region(selected),
        ),
    )


def target_metrics(records: Sequence[StoreRecord], target_config: TargetConfig,
                   brand_extractor: BrandExtractor = extract_retailer_brand) -> Dict[str, Any]:
    """
    Pool-level figures shown next to the target-count control.

    Returns:
        Dictionary with coverage_percentage (string, one decimal),
        stores_by_region, total_revenue, avg_stores_per_region, max_stores,
        min_stores and unique_retailers
    """
    max_stores = len(records)
    stores_by_region = count_by_region(records)
    coverage = (target_config.total / max_stores * 100) if max_stores else 0.0
    avg_per_region = (round_half_up(target_config.total / len(stores_by_region))
                      if stores_by_region else 0)
    return {
        'coverage_percentage': f"{coverage:.1f}",
        'stores_by_region': stores_by_region,
        'total_revenue': sum(r.performance_value for r in records),
        'avg_stores_per_region': avg_per_region,
        'max_stores': max_stores,
        'min_stores': 1,
        'unique_retailers': len({brand_extractor(r.name) for r in records}),
    }
