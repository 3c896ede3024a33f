"""
Store Selector Package for strategy-driven retail store selection.

This package provides the selection engine (six strategies plus result
analytics), grouping/histogram helpers, pre-filters, the retailer catalogue,
population-based regional projections, YAML strategy schemas and pandas
adapters for store tables.
"""

__version__ = "0.1.0"

# Import data model
from .models import (
    SelectionStrategy,
    PerformanceCategory,
    StoreRecord,
    TargetConfig,
    RegionWeight,
    ColumnMapping,
    StrategyConfiguration,
    SelectionResult,
    PerformanceDistribution,
    SelectionStatistics,
    params_for,
    unknown_parameters
)

# Import the engine and strategies
from .engine import select, resolve_strategy, StrategyEngine
from .strategies import (
    revenue_focus,
    geographic_coverage,
    growth_opportunities,
    portfolio_balance,
    market_penetration,
    demographic_targeting,
    split_portfolio,
    STRATEGY_REGISTRY
)

# Import analytics and grouping helpers
from .analytics import build_result, empty_result, target_metrics
from .grouping import (
    group_by_region,
    group_by_key,
    histogram,
    percentile,
    revenue_stats,
    categorize_by_performance,
    unique_values
)

# Import filtering, config and adapters
from .filters import FilterConfig, apply_filters
from .retailers import (
    extract_retailer_brand,
    retailer_catalogue,
    retailer_metrics,
    stores_for_retailer,
    PerformanceTier,
    TierType,
    select_performance_tier
)
from .regional import (
    national_distribution,
    over_index_distribution,
    population_shares,
    region_weights_from_projection,
    region_targets,
    region_target_gaps
)
from .config import (
    load_config,
    get_all_strategies,
    get_strategy_info,
    get_parameter_defaults,
    get_default_column_mappings,
    resolve_strategy_configuration
)
from .frame import stores_from_frame, stores_to_frame, result_to_frames
from .summary import render_summary

__all__ = [
    # Data model
    'SelectionStrategy',
    'PerformanceCategory',
    'StoreRecord',
    'TargetConfig',
    'RegionWeight',
    'ColumnMapping',
    'StrategyConfiguration',
    'SelectionResult',
    'PerformanceDistribution',
    'SelectionStatistics',
    'params_for',
    'unknown_parameters',

    # Engine and strategies
    'select',
    'resolve_strategy',
    'StrategyEngine',
    'revenue_focus',
    'geographic_coverage',
    'growth_opportunities',
    'portfolio_balance',
    'market_penetration',
    'demographic_targeting',
    'split_portfolio',
    'STRATEGY_REGISTRY',

    # Analytics and grouping
    'build_result',
    'empty_result',
    'target_metrics',
    'group_by_region',
    'group_by_key',
    'histogram',
    'percentile',
    'revenue_stats',
    'categorize_by_performance',
    'unique_values',

    # Filters, config, adapters
    'FilterConfig',
    'apply_filters',
    'extract_retailer_brand',
    'retailer_catalogue',
    'retailer_metrics',
    'stores_for_retailer',
    'PerformanceTier',
    'TierType',
    'select_performance_tier',
    'national_distribution',
    'over_index_distribution',
    'population_shares',
    'region_weights_from_projection',
    'region_targets',
    'region_target_gaps',
    'load_config',
    'get_all_strategies',
    'get_strategy_info',
    'get_parameter_defaults',
    'get_default_column_mappings',
    'resolve_strategy_configuration',
    'stores_from_frame',
    'stores_to_frame',
    'result_to_frames',
    'render_summary'
]
