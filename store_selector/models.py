"""
Store Selection Data Model

Canonical value objects shared by every stage of the selection pipeline:
store records, target/strategy configuration, typed per-strategy parameters
and the derived selection result.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class SelectionStrategy(Enum):
    REVENUE_FOCUS = "revenue-focus"
    GEOGRAPHIC_COVERAGE = "geographic-coverage"
    GROWTH_OPPORTUNITIES = "growth-opportunities"
    PORTFOLIO_BALANCE = "portfolio-balance"
    MARKET_PENETRATION = "market-penetration"
    DEMOGRAPHIC_TARGETING = "demographic-targeting"

    @classmethod
    def parse(cls, value) -> Optional["SelectionStrategy"]:
        """Return the matching strategy for an id or member, None when unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class PerformanceCategory(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class StoreRecord:
    """
    One retail location, normalized upstream.

    Attributes:
        name: Display name, e.g. "Albert Heijn Utrecht Centrum"
        crm_id: CRM identifier
        store_id: Store identifier
        city, street, street_number, postal_code: Address parts
        region: Categorical geographic unit (province / field-sales region)
        channel, store_type, customer_group, strategy_tag: Free-form categories
        performance_value: Non-negative ranking metric (revenue)
        store_size: Non-negative floor area, 0 when unknown
    """
    name: str
    crm_id: str
    store_id: str
    region: str
    performance_value: float
    city: str = ""
    street: str = ""
    street_number: str = ""
    postal_code: str = ""
    channel: str = ""
    store_type: str = ""
    customer_group: str = ""
    strategy_tag: str = ""
    store_size: float = 0.0

    @property
    def segment_key(self) -> Tuple[str, str]:
        """(customer_group, channel) composite used by demographic targeting."""
        return (self.customer_group, self.channel)


@dataclass(frozen=True)
class TargetConfig:
    """Number of stores to select; callers clamp to [1, pool size]."""
    total: int


@dataclass(frozen=True)
class RegionWeight:
    region: str
    weight: float
    target_percentage: Optional[float] = None


# Requirement keys understood by the DataFrame adapter, mapped to StoreRecord fields
REQUIREMENT_FIELDS = {
    "name": "name",
    "crmId": "crm_id",
    "storeId": "store_id",
    "city": "city",
    "street": "street",
    "streetNumber": "street_number",
    "postalCode": "postal_code",
    "region": "region",
    "channel": "channel",
    "storeType": "store_type",
    "customerSegment": "customer_group",
    "strategy": "strategy_tag",
    "performance": "performance_value",
    "storeSize": "store_size",
}


@dataclass(frozen=True)
class ColumnMapping:
    """
    Resolved `requirement key -> column name` mapping.

    Produced once by the configuration layer; strategy code never falls back
    to ad hoc column names.
    """
    columns: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def from_dict(cls, mapping: Optional[Mapping[str, str]]) -> "ColumnMapping":
        items = tuple((str(k), str(v)) for k, v in (mapping or {}).items() if v)
        return cls(columns=items)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.columns)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.as_dict().get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self.as_dict()


@dataclass(frozen=True)
class StrategyConfiguration:
    """Caller-owned strategy settings passed through to the strategy functions."""
    strategy: SelectionStrategy = SelectionStrategy.REVENUE_FOCUS
    column_mappings: ColumnMapping = field(default_factory=ColumnMapping)
    parameters: Mapping[str, Any] = field(default_factory=dict)
    region_weights: Tuple[RegionWeight, ...] = ()

    @classmethod
    def default(cls, strategy: SelectionStrategy) -> "StrategyConfiguration":
        return cls(strategy=strategy)


# =============================================================================
# TYPED STRATEGY PARAMETERS
# =============================================================================

def _check_fraction(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")


def _check_percentage(name: str, value: float) -> None:
    if not 0.0 <= value <= 100.0:
        raise ValueError(f"{name} must be within [0, 100], got {value}")


@dataclass(frozen=True)
class RevenueFocusParams:
    minimum_performance: float = 0.0

    def __post_init__(self):
        _check_percentage("minimum_performance", self.minimum_performance)


@dataclass(frozen=True)
class GeographicCoverageParams:
    minimum_per_region: int = 1

    def __post_init__(self):
        if not 0 <= self.minimum_per_region <= 10:
            raise ValueError(f"minimum_per_region must be within [0, 10], got {self.minimum_per_region}")


@dataclass(frozen=True)
class GrowthOpportunitiesParams:
    exclude_top_performers: bool = True
    lower_percentile: float = 0.2
    upper_percentile: float = 0.7

    def __post_init__(self):
        _check_fraction("lower_percentile", self.lower_percentile)
        _check_fraction("upper_percentile", self.upper_percentile)
        if self.lower_percentile > self.upper_percentile:
            raise ValueError(
                f"lower_percentile ({self.lower_percentile}) exceeds "
                f"upper_percentile ({self.upper_percentile})"
            )


@dataclass(frozen=True)
class PortfolioBalanceParams:
    """Experimental share is whatever core and growth leave of 100%."""
    core_percentage: float = 70.0
    growth_percentage: float = 20.0

    def __post_init__(self):
        _check_percentage("core_percentage", self.core_percentage)
        _check_percentage("growth_percentage", self.growth_percentage)
        if self.core_percentage + self.growth_percentage > 100.0:
            raise ValueError("core_percentage + growth_percentage cannot exceed 100")

    @property
    def experimental_percentage(self) -> float:
        return 100.0 - self.core_percentage - self.growth_percentage


@dataclass(frozen=True)
class MarketPenetrationParams:
    """Allocation is driven by region density alone; nothing to tune."""


@dataclass(frozen=True)
class DemographicTargetingParams:
    target_segments: Tuple[str, ...] = ()
    group_quota: float = 0.3

    def __post_init__(self):
        _check_fraction("group_quota", self.group_quota)


PARAMETER_TYPES = {
    SelectionStrategy.REVENUE_FOCUS: RevenueFocusParams,
    SelectionStrategy.GEOGRAPHIC_COVERAGE: GeographicCoverageParams,
    SelectionStrategy.GROWTH_OPPORTUNITIES: GrowthOpportunitiesParams,
    SelectionStrategy.PORTFOLIO_BALANCE: PortfolioBalanceParams,
    SelectionStrategy.MARKET_PENETRATION: MarketPenetrationParams,
    SelectionStrategy.DEMOGRAPHIC_TARGETING: DemographicTargetingParams,
}

# camelCase keys as they arrive from the configurator UI / YAML
_PARAMETER_ALIASES = {
    "minimumPerformance": "minimum_performance",
    "minimumPerRegion": "minimum_per_region",
    "excludeTopPerformers": "exclude_top_performers",
    "lowerPercentile": "lower_percentile",
    "upperPercentile": "upper_percentile",
    "corePercentage": "core_percentage",
    "growthPercentage": "growth_percentage",
    "targetSegments": "target_segments",
    "groupQuota": "group_quota",
}


def unknown_parameters(strategy: SelectionStrategy, parameters: Optional[Mapping[str, Any]]) -> List[str]:
    """Keys of `parameters` that name no field of the strategy's parameter type."""
    known = {f.name for f in fields(PARAMETER_TYPES[strategy])}
    return [key for key in (parameters or {}) if _PARAMETER_ALIASES.get(key, key) not in known]


def params_for(strategy: SelectionStrategy, parameters: Optional[Mapping[str, Any]] = None):
    """
    Build the typed parameter object for a strategy from a loose mapping.

    Keys may be camelCase or snake_case; keys the strategy does not know are
    ignored here (a portfolio configuration also drives the geographic and
    growth steps). Use unknown_parameters() to reject them up front.
    Values are coerced to the field's default type.

    Raises:
        ValueError: If a value is out of range or cannot be coerced
    """
    params_cls = PARAMETER_TYPES[strategy]
    known = {f.name: f for f in fields(params_cls)}
    kwargs = {}
    for key, value in (parameters or {}).items():
        name = _PARAMETER_ALIASES.get(key, key)
        if name not in known or value is None:
            continue
        kwargs[name] = _coerce(name, value, known[name].default)
    return params_cls(**kwargs)


def _coerce(name: str, value: Any, default: Any) -> Any:
    try:
        if isinstance(default, bool):
            if isinstance(value, str):
                return value.strip().lower() in ("true", "1", "yes")
            return bool(value)
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
        if isinstance(default, tuple):
            if isinstance(value, str):
                return tuple(v.strip() for v in value.split(",") if v.strip())
            return tuple(str(v) for v in value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid value for parameter {name}: {value!r}") from e
    return str(value)


# =============================================================================
# SELECTION RESULT
# =============================================================================

@dataclass
class PerformanceDistribution:
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass
class SelectionStatistics:
    total_stores: int = 0
    unique_regions: int = 0
    unique_retailers: int = 0
    revenue_per_region: Dict[str, float] = field(default_factory=dict)


@dataclass
class SelectionResult:
    """Derived analytics for one selection; recomputed on every call."""
    selected_stores: List[StoreRecord] = field(default_factory=list)
    total_revenue: float = 0.0
    average_revenue: float = 0.0
    region_coverage: float = 0.0
    performance_distribution: PerformanceDistribution = field(default_factory=PerformanceDistribution)
    statistics: SelectionStatistics = field(default_factory=SelectionStatistics)
