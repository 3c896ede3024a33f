"""
Selection Engine

Routes a strategy id to its implementation over the working set (the
pre-filtered stores when given, otherwise all stores) and pipes the raw
selection through the result analytics.

Usage:

    from store_selector import select, TargetConfig

    result = select(stores, "portfolio-balance", TargetConfig(total=25))
    result.total_revenue, result.statistics.revenue_per_region
"""

import logging
from typing import Mapping, Optional, Sequence, Union

from .analytics import BrandExtractor, build_result, empty_result
from .models import (
    SelectionResult,
    SelectionStrategy,
    StoreRecord,
    StrategyConfiguration,
    TargetConfig,
)
from .retailers import extract_retailer_brand
from .strategies import STRATEGY_REGISTRY, revenue_focus

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = SelectionStrategy.REVENUE_FOCUS


def _target_total(target_config: Union[TargetConfig, Mapping, int]) -> int:
    if isinstance(target_config, TargetConfig):
        return int(target_config.total)
    if isinstance(target_config, Mapping):
        return int(target_config['total'])
    return int(target_config)


def resolve_strategy(strategy: Union[SelectionStrategy, str, None]) -> SelectionStrategy:
    """Parse a strategy id; unknown ids fall back to Revenue Focus with a warning."""
    parsed = SelectionStrategy.parse(strategy) if strategy is not None else None
    if parsed is None:
        logger.warning(f"Unknown strategy '{strategy}', falling back to {DEFAULT_STRATEGY.value}")
        return DEFAULT_STRATEGY
    return parsed


def select(
    all_stores: Sequence[StoreRecord],
    strategy: Union[SelectionStrategy, str],
    target_config: Union[TargetConfig, Mapping, int],
    filtered_stores: Optional[Sequence[StoreRecord]] = None,
    strategy_config: Optional[StrategyConfiguration] = None,
    brand_extractor: BrandExtractor = extract_retailer_brand,
) -> SelectionResult:
    """
    Select stores with the given strategy and compute the result analytics.

    Args:
        all_stores: Every imported store record
        strategy: Strategy id (e.g. "geographic-coverage") or SelectionStrategy
        target_config: TargetConfig, {'total': n} or a plain int
        filtered_stores: Optional pre-filtered pool; used when non-empty
        strategy_config: Column mappings, parameters and region weights
        brand_extractor: Store name -> retailer brand, for unique_retailers

    Returns:
        SelectionResult; zeroed when the working set is empty

    Raises:
        TypeError: If all_stores is None
    """
    if all_stores is None:
        raise TypeError("all_stores must be a sequence of StoreRecord, got None")

    working_set = list(filtered_stores) if filtered_stores else list(all_stores)
    if not working_set:
        logger.debug("Empty working set, returning zeroed result")
        return empty_result()

    resolved = resolve_strategy(strategy)
    config = strategy_config or StrategyConfiguration.default(resolved)
    target = _target_total(target_config)

    implementation = STRATEGY_REGISTRY.get(resolved, revenue_focus)
    selected = implementation(working_set, target, config)
    logger.debug(
        f"{resolved.value}: selected {len(selected)} of {len(working_set)} stores (target {target})"
    )
    return build_result(selected, working_set, brand_extractor=brand_extractor)


class StrategyEngine:
    """
    Thin object wrapper around select() for callers that hold a store list.

    Holds the records and brand extractor only; every call recomputes.
    """

    def __init__(self, stores: Sequence[StoreRecord],
                 brand_extractor: BrandExtractor = extract_retailer_brand):
        self.stores = list(stores)
        self.brand_extractor = brand_extractor

    def select_stores(self, strategy, target_config, filtered_stores=None,
                      strategy_config=None) -> SelectionResult:
        return select(self.stores, strategy, target_config, filtered_stores,
                      strategy_config, brand_extractor=self.brand_extractor)

    def compare_strategies(self, target_config, filtered_stores=None):
        """Run every strategy with default configuration, keyed by strategy id."""
        return {
            strategy.value: self.select_stores(strategy, target_config, filtered_stores)
            for strategy in SelectionStrategy
        }
