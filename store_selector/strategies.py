"""
Store Selection Strategies

Six independent selection algorithms sharing one signature:

    strategy(candidates, target_count, config) -> List[StoreRecord]

Each returns at most `target_count` unique records drawn from `candidates`,
in selection order. Inputs are never mutated; sorts are stable so equal
performance values keep their original relative order.

Strategies:
    revenue_focus          - top-k by performance
    geographic_coverage    - best store per region, then round-robin fill
    growth_opportunities   - mid-tier (20th-70th percentile) with region spread
    portfolio_balance      - 70/20/10 core / growth / experimental tiers
    market_penetration     - allocations weighted toward dense regions
    demographic_targeting  - best (customer group, channel) segments first
"""

import logging
import math
from typing import Callable, Dict, List, Sequence

from .grouping import (
    best_performer,
    by_performance,
    ceil_share,
    distinct_regions,
    group_by_key,
    group_by_region,
    mean_performance,
    percentile,
    round_half_up,
)
from .models import (
    SelectionStrategy,
    StoreRecord,
    StrategyConfiguration,
    params_for,
)

logger = logging.getLogger(__name__)

StrategyFn = Callable[[Sequence[StoreRecord], int, StrategyConfiguration], List[StoreRecord]]

# Round-robin passes over the region list before geographic coverage gives up
ROUND_ROBIN_CYCLES = 10


def _without(records: Sequence[StoreRecord], chosen: Sequence[StoreRecord]) -> List[StoreRecord]:
    """Records not in `chosen`, by identity, preserving order."""
    taken = {id(r) for r in chosen}
    return [r for r in records if id(r) not in taken]


def revenue_focus(candidates: Sequence[StoreRecord], target_count: int,
                  config: StrategyConfiguration) -> List[StoreRecord]:
    """
    Highest performance_value first; take the first target_count.

    A non-zero `minimum_performance` (a percentage) drops candidates below
    the value at that percentile of the ascending sort before ranking.
    """
    if target_count <= 0 or not candidates:
        return []
    params = params_for(SelectionStrategy.REVENUE_FOCUS, config.parameters)
    pool = list(candidates)
    if params.minimum_performance > 0:
        floor_value = percentile(sorted(r.performance_value for r in pool),
                                 params.minimum_performance / 100.0)
        pool = [r for r in pool if r.performance_value >= floor_value]
    return by_performance(pool)[:target_count]


def geographic_coverage(candidates: Sequence[StoreRecord], target_count: int,
                        config: StrategyConfiguration) -> List[StoreRecord]:
    """
    Maximize distinct regions, then fill by performance.

    Regions are visited strongest first: ordered by their best store's
    performance (descending, ties in first-seen order). Phase 1 takes the
    `minimum_per_region` best stores of every region, one round at a time.
    Phase 2 cycles through the regions in the same order, each visit taking
    that region's next best remaining store. It stops when the target is met
    or after ROUND_ROBIN_CYCLES * region-count visits; visits to an exhausted
    region still count, so an unbalanced pool can return fewer stores than
    requested.
    """
    if target_count <= 0 or not candidates:
        return []

    params = params_for(SelectionStrategy.GEOGRAPHIC_COVERAGE, config.parameters)
    queues = {region: by_performance(members)
              for region, members in group_by_region(candidates).items()}
    regions = sorted(queues, key=lambda region: -queues[region][0].performance_value)
    cursors = {region: 0 for region in regions}

    selected: List[StoreRecord] = []
    for _ in range(params.minimum_per_region):
        for region in regions:
            if len(selected) >= target_count:
                break
            if cursors[region] < len(queues[region]):
                selected.append(queues[region][cursors[region]])
                cursors[region] += 1

    visits = 0
    max_visits = ROUND_ROBIN_CYCLES * len(regions)
    while len(selected) < target_count and visits < max_visits:
        region = regions[visits % len(regions)]
        if cursors[region] < len(queues[region]):
            selected.append(queues[region][cursors[region]])
            cursors[region] += 1
        visits += 1

    if len(selected) < target_count:
        logger.debug(f"Round-robin stopped after {visits} visits with {len(selected)} of {target_count}")
    return selected[:target_count]


def growth_opportunities(candidates: Sequence[StoreRecord], target_count: int,
                         config: StrategyConfiguration) -> List[StoreRecord]:
    """
    Favor underperforming-but-promising stores.

    The pool is the ascending-sorted slice between the lower and upper
    percentile positions (default 20th to 70th). If it is smaller than the
    target the bottom slice is appended. One store per region is taken first,
    then the pool is drained in order.
    """
    if target_count <= 0 or not candidates:
        return []

    params = params_for(SelectionStrategy.GROWTH_OPPORTUNITIES, config.parameters)
    ascending = by_performance(candidates, descending=False)
    n = len(ascending)
    lower = int(math.floor(n * params.lower_percentile))
    upper = int(math.floor(n * params.upper_percentile)) if params.exclude_top_performers else n

    pool = ascending[lower:upper]
    if len(pool) < target_count:
        pool = pool + ascending[:lower]

    selected: List[StoreRecord] = []
    used_regions = set()
    for record in pool:
        if len(selected) >= target_count:
            break
        if record.region not in used_regions:
            selected.append(record)
            used_regions.add(record.region)

    taken = {id(r) for r in selected}
    for record in pool:
        if len(selected) >= target_count:
            break
        if id(record) not in taken:
            selected.append(record)
            taken.add(id(record))

    return selected[:target_count]


def split_portfolio(target_count: int, core_percentage: float = 70.0,
                    growth_percentage: float = 20.0) -> Dict[str, int]:
    """Core/growth/experimental counts; experimental absorbs the rounding."""
    core = round_half_up(target_count * core_percentage / 100.0)
    growth = round_half_up(target_count * growth_percentage / 100.0)
    core = min(core, target_count)
    growth = min(growth, target_count - core)
    return {'core': core, 'growth': growth, 'experimental': target_count - core - growth}


def portfolio_balance(candidates: Sequence[StoreRecord], target_count: int,
                      config: StrategyConfiguration) -> List[StoreRecord]:
    """
    70/20/10 portfolio: core via geographic coverage, growth via growth
    opportunities on what is left, experimental from unrepresented regions
    and then the lowest performers.
    """
    if target_count <= 0 or not candidates:
        return []

    params = params_for(SelectionStrategy.PORTFOLIO_BALANCE, config.parameters)
    split = split_portfolio(target_count, params.core_percentage, params.growth_percentage)
    logger.debug(f"Portfolio split for {target_count}: {split}")

    selected: List[StoreRecord] = list(geographic_coverage(candidates, split['core'], config))
    selected.extend(growth_opportunities(_without(candidates, selected), split['growth'], config))

    remaining = _without(candidates, selected)
    # experimental also absorbs any shortfall of the growth tier
    quota = target_count - len(selected)
    if remaining and quota > 0:
        represented = {r.region for r in selected}
        remaining_by_region = group_by_region(remaining)
        experimental: List[StoreRecord] = []
        for region in distinct_regions(candidates):
            if len(experimental) >= quota:
                break
            if region in represented or region not in remaining_by_region:
                continue
            experimental.append(best_performer(remaining_by_region[region]))

        lowest = by_performance(_without(remaining, experimental), descending=False)
        experimental.extend(lowest[:quota - len(experimental)])
        selected.extend(experimental)

    return selected[:target_count]


def market_penetration(candidates: Sequence[StoreRecord], target_count: int,
                       config: StrategyConfiguration) -> List[StoreRecord]:
    """
    Weight selection toward high-density regions.

    Regions are ranked by store count, then average performance (both
    descending). Each takes max(1, min(remaining, ceil(target * share)))
    of its top performers, where share is the region's fraction of the pool.
    """
    if target_count <= 0 or not candidates:
        return []

    total = len(candidates)
    density = [
        (region, len(members), mean_performance(members), members)
        for region, members in group_by_region(candidates).items()
    ]
    density.sort(key=lambda d: (-d[1], -d[2]))

    selected: List[StoreRecord] = []
    for region, count, avg, members in density:
        if len(selected) >= target_count:
            break
        remaining = target_count - len(selected)
        # integer ceil of target * count / total
        allocation = max(1, min(remaining, -(-target_count * count // total)))
        selected.extend(by_performance(members)[:allocation])

    return selected[:target_count]


def demographic_targeting(candidates: Sequence[StoreRecord], target_count: int,
                          config: StrategyConfiguration) -> List[StoreRecord]:
    """
    Prioritize (customer group, channel) segments with the highest average
    performance, taking ceil(size * quota) (at least one) from each in turn.
    """
    if target_count <= 0 or not candidates:
        return []

    params = params_for(SelectionStrategy.DEMOGRAPHIC_TARGETING, config.parameters)
    pool = list(candidates)
    if params.target_segments:
        wanted = set(params.target_segments)
        pool = [r for r in pool if r.customer_group in wanted]

    segments = [
        (key, mean_performance(members), by_performance(members))
        for key, members in group_by_key(pool, lambda r: r.segment_key).items()
    ]
    segments.sort(key=lambda s: -s[1])

    selected: List[StoreRecord] = []
    for key, avg, members in segments:
        if len(selected) >= target_count:
            break
        remaining = target_count - len(selected)
        take = min(remaining, max(1, ceil_share(len(members), params.group_quota)))
        selected.extend(members[:take])

    return selected[:target_count]


STRATEGY_REGISTRY: Dict[SelectionStrategy, StrategyFn] = {
    SelectionStrategy.REVENUE_FOCUS: revenue_focus,
    SelectionStrategy.GEOGRAPHIC_COVERAGE: geographic_coverage,
    SelectionStrategy.GROWTH_OPPORTUNITIES: growth_opportunities,
    SelectionStrategy.PORTFOLIO_BALANCE: portfolio_balance,
    SelectionStrategy.MARKET_PENETRATION: market_penetration,
    SelectionStrategy.DEMOGRAPHIC_TARGETING: demographic_targeting,
}
