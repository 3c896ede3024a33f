"""
Grouping and statistics helpers shared by every selection strategy.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Sequence

import numpy as np

from .models import PerformanceCategory, StoreRecord


def group_by_key(records: Sequence[StoreRecord],
                 key_fn: Callable[[StoreRecord], Hashable]) -> Dict[Hashable, List[StoreRecord]]:
    """Partition records by key; groups and members keep first-seen order."""
    groups: Dict[Hashable, List[StoreRecord]] = {}
    for record in records:
        groups.setdefault(key_fn(record), []).append(record)
    return groups


def group_by_region(records: Sequence[StoreRecord]) -> Dict[str, List[StoreRecord]]:
    """Partition records by exact region string."""
    return group_by_key(records, lambda r: r.region)


def count_by_region(records: Sequence[StoreRecord]) -> Dict[str, int]:
    return {region: len(members) for region, members in group_by_region(records).items()}


def distinct_regions(records: Sequence[StoreRecord]) -> List[str]:
    """Regions in order of first appearance."""
    return list(group_by_region(records).keys())


def by_performance(records: Sequence[StoreRecord], descending: bool = True) -> List[StoreRecord]:
    """Stable sort on performance_value; equal values keep input order."""
    return sorted(records, key=lambda r: r.performance_value, reverse=descending)


def best_performer(records: Sequence[StoreRecord]) -> StoreRecord:
    """First record holding the maximum performance_value."""
    best = records[0]
    for record in records[1:]:
        if record.performance_value > best.performance_value:
            best = record
    return best


def mean_performance(records: Sequence[StoreRecord]) -> float:
    if not records:
        return 0.0
    return float(np.mean([r.performance_value for r in records]))


def percentile_index(length: int, p: float) -> int:
    """floor(p * length) clamped to a valid index (0 for empty input)."""
    if length <= 0:
        return 0
    return min(max(int(math.floor(p * length)), 0), length - 1)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Value at the floor(p * n) position of an already sorted sequence.

    No interpolation; the sort direction is the caller's choice.
    """
    if not sorted_values:
        raise ValueError("percentile() of an empty sequence")
    return sorted_values[percentile_index(len(sorted_values), p)]


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def ceil_share(count: int, share: float) -> int:
    """ceil(count * share), ignoring float noise such as 10 * 0.3 = 3.0000000000000004."""
    return int(math.ceil(round(count * share, 9)))


# =============================================================================
# HISTOGRAM
# =============================================================================

@dataclass
class HistogramBin:
    label: str
    lower: float
    upper: float
    stores: List[StoreRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.stores)


def _bin_label(lower: float, upper: float) -> str:
    return f"€{round_half_up(lower / 1000)}k - €{round_half_up(upper / 1000)}k"


def histogram(records: Sequence[StoreRecord], bin_count: int = 10,
              field_name: str = "performance_value") -> List[HistogramBin]:
    """
    Equal-width histogram of a numeric record field.

    Bins are [lo, hi) except the last, which is closed on both ends. When
    every value is equal the whole population lands in bin 0.

    Args:
        records: Records to bin
        bin_count: Number of bins (>= 1)
        field_name: Numeric StoreRecord attribute to bin on

    Returns:
        List of HistogramBin, empty when there are no records
    """
    if bin_count < 1:
        raise ValueError(f"bin_count must be >= 1, got {bin_count}")
    if not records:
        return []

    values = np.asarray([float(getattr(r, field_name)) for r in records], dtype=float)
    v_min = float(values.min())
    v_max = float(values.max())
    bin_size = (v_max - v_min) / bin_count

    bins = []
    for i in range(bin_count):
        lower = v_min + i * bin_size
        upper = v_max if i == bin_count - 1 else v_min + (i + 1) * bin_size
        bins.append(HistogramBin(label=_bin_label(lower, upper), lower=lower, upper=upper))

    if bin_size == 0:
        bins[0].stores.extend(records)
        return bins

    for record, value in zip(records, values):
        idx = min(int((value - v_min) // bin_size), bin_count - 1)
        # float floor can land one bin off near an edge
        if idx > 0 and value < bins[idx].lower:
            idx -= 1
        elif idx < bin_count - 1 and value >= bins[idx].upper:
            idx += 1
        bins[idx].stores.append(record)
    return bins


# =============================================================================
# DATASET STATISTICS
# =============================================================================

def revenue_stats(records: Sequence[StoreRecord]) -> Dict[str, float]:
    """
    Summary of performance values: min, max, mean, median, q1, q3.

    Quartiles use floor-index positions on the ascending sort. All zeros for
    an empty input.
    """
    if not records:
        return {'min': 0.0, 'max': 0.0, 'mean': 0.0, 'median': 0.0, 'q1': 0.0, 'q3': 0.0}
    ordered = sorted(r.performance_value for r in records)
    return {
        'min': ordered[0],
        'max': ordered[-1],
        'mean': mean_performance(records),
        'median': percentile(ordered, 0.5),
        'q1': percentile(ordered, 0.25),
        'q3': percentile(ordered, 0.75),
    }


def categorize_by_performance(records: Sequence[StoreRecord]) -> List[tuple]:
    """Pair each record with high (>= q3), medium (>= q1) or low."""
    stats = revenue_stats(records)
    categorized = []
    for record in records:
        if record.performance_value >= stats['q3']:
            category = PerformanceCategory.HIGH
        elif record.performance_value >= stats['q1']:
            category = PerformanceCategory.MEDIUM
        else:
            category = PerformanceCategory.LOW
        categorized.append((record, category))
    return categorized


def unique_values(records: Sequence[StoreRecord], field_name: str) -> List[str]:
    """Distinct stringified values of a field, first-seen order."""
    return list(dict.fromkeys(str(getattr(r, field_name)) for r in records))
