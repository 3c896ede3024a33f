#!/usr/bin/env python3
"""
Command-line interface for the store selector.

Runs on the bundled synthetic dataset; real imports go through the Python API
(`stores_from_frame` + `select`).

    store-selector strategies
    store-selector retailers --retailer Jumbo --tier-value 30
    store-selector regions --total 40 --over-index Utrecht
    store-selector select --strategy portfolio-balance --total 20
    store-selector select --strategy growth-opportunities --total 10 \
        --param lowerPercentile=0.1 --region Utrecht --region Zuid-Holland
"""

import argparse
import logging
import sys

import pandas as pd

from .config import get_all_strategies, get_strategy_info, load_config, resolve_strategy_configuration
from .engine import resolve_strategy, select
from .filters import FilterConfig, apply_filters
from .frame import result_to_frames
from .models import TargetConfig
from .regional import (
    DEFAULT_OVER_INDEX_PERCENTAGE,
    national_distribution,
    over_index_distribution,
    region_target_gaps,
    region_targets,
    region_weights_from_projection,
)
from .retailers import (
    PerformanceTier,
    TierType,
    retailer_catalogue,
    select_performance_tier,
    stores_for_retailer,
)
from .sample_data import generate_sample_stores
from .summary import render_summary

# Setup logging
logger = logging.getLogger(__name__)


def _parse_params(pairs):
    params = {}
    for pair in pairs or []:
        if '=' not in pair:
            raise ValueError(f"Parameters must look like key=value, got '{pair}'")
        key, value = pair.split('=', 1)
        params[key.strip()] = value.strip()
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='store-selector',
        description="Select a subset of retail stores according to a business strategy"
    )
    parser.add_argument('--version', action='store_true', help='Show version information')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--config', default=None, help='Path to a strategy schema YAML file')

    subparsers = parser.add_subparsers(dest='command')
    subparsers.add_parser('strategies', help='List available strategies')

    select_parser = subparsers.add_parser('select', help='Run a selection on the sample dataset')
    select_parser.add_argument('--strategy', default='revenue-focus', help='Strategy id')
    select_parser.add_argument('--total', type=int, required=True, help='Number of stores to select')
    select_parser.add_argument('--sample-size', type=int, default=120, help='Synthetic dataset size')
    select_parser.add_argument('--seed', type=int, default=42, help='Synthetic dataset seed')
    select_parser.add_argument('--param', action='append', default=[],
                               help='Strategy parameter override, key=value (repeatable)')
    select_parser.add_argument('--region', action='append', default=[],
                               help='Only consider stores in this region (repeatable)')
    select_parser.add_argument('--top', type=int, default=10, help='Rows of the selection to print')
    select_parser.add_argument('--retailer', default=None, help='Only consider stores of this retailer brand')
    select_parser.add_argument('--over-index', action='append', default=[], metavar='REGION',
                               help='Give this region focus stores on top of its population share (repeatable)')
    select_parser.add_argument('--over-index-percentage', type=float, default=DEFAULT_OVER_INDEX_PERCENTAGE,
                               help='Share of the target reserved for over-indexed regions')

    retailers_parser = subparsers.add_parser('retailers', help='List retailers in the sample dataset')
    retailers_parser.add_argument('--sample-size', type=int, default=120, help='Synthetic dataset size')
    retailers_parser.add_argument('--seed', type=int, default=42, help='Synthetic dataset seed')
    retailers_parser.add_argument('--retailer', default=None, help='Show the performance tier of this retailer')
    retailers_parser.add_argument('--tier-type', choices=[t.value for t in TierType],
                                  default=TierType.PERCENTAGE.value, help='Tier by top percentage or revenue')
    retailers_parser.add_argument('--tier-value', type=float, default=20.0,
                                  help='Top percentage, or minimum revenue for absolute tiers')

    regions_parser = subparsers.add_parser('regions', help='Project a store count over the provinces')
    regions_parser.add_argument('--total', type=int, required=True, help='Number of stores to distribute')
    regions_parser.add_argument('--over-index', action='append', default=[], metavar='REGION',
                                help='Region receiving focus stores (repeatable)')
    regions_parser.add_argument('--over-index-percentage', type=float, default=DEFAULT_OVER_INDEX_PERCENTAGE,
                                help='Share of the total reserved for over-indexed regions')
    return parser


def _list_strategies(config):
    for strategy_id in get_all_strategies(config):
        info = get_strategy_info(config, strategy_id)
        print(f"{strategy_id:<24} {info.get('name', '')} - {info.get('description', '')}")
    return 0


def _projection(total, over_index_regions, over_index_percentage):
    if over_index_regions:
        return over_index_distribution(total, over_index_regions, over_index_percentage)
    return national_distribution(total)


def _run_regions(args):
    projection = _projection(args.total, args.over_index, args.over_index_percentage)
    table = pd.DataFrame([vars(p) for p in projection])
    print(table.to_string(index=False, float_format=lambda v: f"{v:.1f}"))
    return 0


def _run_retailers(args, config):
    stores = generate_sample_stores(args.sample_size, args.seed, config=config)
    catalogue = pd.DataFrame([vars(r) for r in retailer_catalogue(stores, limit=None)])
    print(catalogue.to_string(index=False, float_format=lambda v: f"{v:,.1f}"))
    if args.retailer:
        tier = PerformanceTier(TierType(args.tier_type), args.tier_value)
        chosen = select_performance_tier(stores_for_retailer(stores, args.retailer), tier)
        print()
        print(f"{args.retailer}: {tier.description} -> {len(chosen)} stores")
    return 0


def _run_select(args, config):
    strategy = resolve_strategy(args.strategy)
    stores = generate_sample_stores(args.sample_size, args.seed, config=config)
    filtered = apply_filters(stores, FilterConfig(included_regions=tuple(args.region)))
    if args.retailer:
        filtered = stores_for_retailer(filtered, args.retailer)
        if not filtered:
            raise ValueError(f"No stores found for retailer '{args.retailer}'")
    if args.region and not filtered:
        logger.warning(f"No stores found in regions {args.region}")

    pool_size = len(filtered) if filtered else len(stores)
    total = max(1, min(args.total, pool_size))
    if total != args.total:
        logger.info(f"Target clamped from {args.total} to {total}")

    region_weights = None
    if args.over_index:
        projection = over_index_distribution(total, args.over_index, args.over_index_percentage)
        region_weights = region_weights_from_projection(projection)

    strategy_config = resolve_strategy_configuration(
        strategy, parameters=_parse_params(args.param), region_weights=region_weights, config=config
    )
    result = select(stores, strategy, TargetConfig(total=total), filtered, strategy_config)

    print(render_summary(result, strategy, filtered or stores, config))
    frames = result_to_frames(result)
    columns = ['rank', 'name', 'region', 'channel', 'customer_group', 'performance_value']
    with pd.option_context('display.width', 160, 'display.max_columns', 20):
        print()
        print(frames['selected'][columns].head(args.top).to_string(index=False))
        print()
        print(frames['revenue_per_region'].to_string(index=False))
        if strategy_config.region_weights:
            targets = region_targets(strategy_config.region_weights, total)
            gaps = region_target_gaps(result.selected_stores, targets)
            print()
            print(pd.DataFrame({
                'region': list(gaps),
                'target': [targets.get(region, 0) for region in gaps],
                'gap': list(gaps.values()),
            }).to_string(index=False))
    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.version:
        from . import __version__
        print(f"store-selector version: {__version__}")
        return 0

    try:
        config = load_config(args.config)
        if args.command == 'strategies':
            return _list_strategies(config)
        if args.command == 'select':
            return _run_select(args, config)
        if args.command == 'retailers':
            return _run_retailers(args, config)
        if args.command == 'regions':
            return _run_regions(args)
    except (ValueError, KeyError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
