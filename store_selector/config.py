import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import yaml

from .models import (
    ColumnMapping,
    RegionWeight,
    SelectionStrategy,
    StrategyConfiguration,
    params_for,
    unknown_parameters,
)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'configs', 'strategies.yaml')

StrategyId = Union[SelectionStrategy, str]


def _strategy_key(strategy: StrategyId) -> str:
    return strategy.value if isinstance(strategy, SelectionStrategy) else str(strategy)


def load_config(yaml_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and parse the strategy schema YAML file.

    Args:
        yaml_path: Path to a YAML file; the bundled strategies.yaml when None

    Returns:
        Dictionary containing the parsed configuration
    """
    yaml_path = yaml_path or DEFAULT_CONFIG_PATH
    try:
        with open(yaml_path, 'r') as file:
            config = yaml.safe_load(file)
        return config or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Error parsing YAML configuration: {e}")


def get_all_strategies(config: Dict[str, Any]) -> List[str]:
    """Strategy ids in file order."""
    return list(config.get('strategies', {}).keys())


def get_strategy_info(config: Dict[str, Any], strategy: StrategyId) -> Dict[str, Any]:
    """
    Get the schema block for a strategy.

    Returns:
        Dictionary with name, description, columns, parameters, templates;
        empty when the strategy is not configured
    """
    return config.get('strategies', {}).get(_strategy_key(strategy), {})


def get_parameter_defaults(config: Dict[str, Any], strategy: StrategyId) -> Dict[str, Any]:
    """Parameter key -> default value for a strategy."""
    parameters = get_strategy_info(config, strategy).get('parameters', {})
    return {key: spec.get('default') for key, spec in parameters.items()}


def get_required_columns(config: Dict[str, Any], strategy: StrategyId) -> List[str]:
    """Requirement keys a strategy cannot run without."""
    return list(get_strategy_info(config, strategy).get('required_columns', {}).keys())


def get_default_column_mappings(config: Dict[str, Any],
                                strategy: Optional[StrategyId] = None) -> Dict[str, str]:
    """
    Default `requirement key -> column` mapping.

    Base columns come from the top-level `columns` block; a strategy's own
    requirement entries may override them with `default_column`.
    """
    mapping = dict(config.get('columns', {}))
    if strategy is not None:
        info = get_strategy_info(config, strategy)
        for block in ('required_columns', 'optional_columns'):
            for key, spec in (info.get(block) or {}).items():
                if spec and spec.get('default_column'):
                    mapping[key] = spec['default_column']
    return mapping


def get_template(config: Dict[str, Any], strategy: StrategyId,
                 template_type: str = 'summary_template') -> str:
    """Template text for a strategy, '' when absent."""
    return get_strategy_info(config, strategy).get(template_type, '')


def missing_required_columns(config: Dict[str, Any], strategy: StrategyId,
                             available_columns: Iterable[str],
                             column_mappings: Optional[Mapping[str, str]] = None) -> List[str]:
    """Requirement keys whose mapped column is not among available_columns."""
    mapping = get_default_column_mappings(config, strategy)
    mapping.update(column_mappings or {})
    available = set(available_columns)
    return [key for key in get_required_columns(config, strategy)
            if mapping.get(key) not in available]


def resolve_strategy_configuration(
    strategy: StrategyId,
    parameters: Optional[Mapping[str, Any]] = None,
    column_mappings: Optional[Mapping[str, str]] = None,
    region_weights: Optional[Iterable[Union[RegionWeight, Mapping[str, Any]]]] = None,
    config: Optional[Dict[str, Any]] = None,
) -> StrategyConfiguration:
    """
    Merge caller settings over the YAML defaults into a StrategyConfiguration.

    Column mappings and parameters are resolved here once; the result is
    immutable and can be handed to the engine as-is.

    Args:
        strategy: Strategy id or SelectionStrategy
        parameters: Caller parameter overrides (camelCase or snake_case keys)
        column_mappings: Caller requirement key -> column overrides
        region_weights: RegionWeight objects or {'region', 'weight'} dicts
        config: Loaded configuration; the bundled file when None

    Raises:
        ValueError: If the strategy id is unknown, or a parameter is unknown
            to the strategy or invalid
    """
    parsed = SelectionStrategy.parse(strategy)
    if parsed is None:
        raise ValueError(f"Unknown strategy: {strategy}")
    config = config if config is not None else load_config()

    unknown = unknown_parameters(parsed, parameters)
    if unknown:
        raise ValueError(f"Unknown parameters for {parsed.value}: {unknown}")

    merged_parameters = get_parameter_defaults(config, parsed)
    merged_parameters.update(parameters or {})
    # fail fast on bad values rather than inside a strategy
    params_for(parsed, merged_parameters)

    mappings = get_default_column_mappings(config, parsed)
    mappings.update(column_mappings or {})

    weights = []
    for weight in region_weights or ():
        if isinstance(weight, RegionWeight):
            weights.append(weight)
        else:
            weights.append(RegionWeight(
                region=str(weight['region']),
                weight=float(weight['weight']),
                target_percentage=weight.get('targetPercentage', weight.get('target_percentage')),
            ))

    return StrategyConfiguration(
        strategy=parsed,
        column_mappings=ColumnMapping.from_dict(mappings),
        parameters=merged_parameters,
        region_weights=tuple(weights),
    )
