"""
Narrative summary of a selection, rendered from the YAML templates with jinja2.
"""

from typing import Any, Dict, Optional, Sequence

from jinja2 import Template

from .config import get_strategy_info, get_template, load_config
from .models import SelectionResult, SelectionStrategy, StoreRecord


def summary_params(result: SelectionResult, strategy: SelectionStrategy,
                   pool: Sequence[StoreRecord], config: Dict[str, Any]) -> Dict[str, Any]:
    """Template parameters for one selection."""
    revenue = result.statistics.revenue_per_region
    top_region = max(revenue, key=revenue.get) if revenue else "n/a"
    return {
        'strategy_name': get_strategy_info(config, strategy).get('name', strategy.value),
        'total_stores': result.statistics.total_stores,
        'pool_size': len(pool),
        'unique_regions': result.statistics.unique_regions,
        'unique_retailers': result.statistics.unique_retailers,
        'region_coverage': result.region_coverage,
        'total_revenue': result.total_revenue,
        'average_revenue': result.average_revenue,
        'high': result.performance_distribution.high,
        'medium': result.performance_distribution.medium,
        'low': result.performance_distribution.low,
        'top_region': top_region,
    }


def render_summary(result: SelectionResult, strategy: SelectionStrategy,
                   pool: Sequence[StoreRecord], config: Optional[Dict[str, Any]] = None) -> str:
    """
    Render the common sentence plus the strategy's own template.

    Returns:
        Summary text; a short notice when nothing was selected
    """
    if not result.selected_stores:
        return "No stores selected."

    config = config if config is not None else load_config()
    params = summary_params(result, strategy, pool, config)

    parts = []
    for text in (config.get('common_template', ''), get_template(config, strategy)):
        if text:
            parts.append(Template(text).render(**params).strip())
    return " ".join(parts)
