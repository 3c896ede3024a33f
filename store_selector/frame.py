"""
pandas adapters between tabular store data and StoreRecord objects.

Parsing and validating raw files is the importer's job; these helpers take an
already-loaded DataFrame and a resolved column mapping.
"""

import logging
from dataclasses import asdict, fields
from typing import Dict, List, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from .models import REQUIREMENT_FIELDS, ColumnMapping, SelectionResult, StoreRecord

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ('region', 'performance')
NUMERIC_FIELDS = ('performance_value', 'store_size')

RECORD_COLUMNS = [f.name for f in fields(StoreRecord)]


def _as_text(value) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def stores_from_frame(df: pd.DataFrame,
                      column_mappings: Union[ColumnMapping, Mapping[str, str]],
                      drop_invalid: bool = False) -> List[StoreRecord]:
    """
    Build StoreRecords from a DataFrame using a requirement-key mapping.

    Args:
        df: Loaded store table
        column_mappings: Requirement key (e.g. 'performance') -> column name
        drop_invalid: Skip rows without a region or with a missing/negative
            performance value instead of raising

    Returns:
        List of StoreRecord in row order

    Raises:
        KeyError: If a required key is unmapped or its column is missing
        ValueError: If a row violates the record invariants and drop_invalid is False
    """
    mapping = column_mappings.as_dict() if isinstance(column_mappings, ColumnMapping) else dict(column_mappings)

    missing = [key for key in REQUIRED_KEYS if mapping.get(key) not in df.columns]
    if missing:
        raise KeyError(f"Missing required column mappings: {missing}")

    columns = {
        field_name: mapping[key]
        for key, field_name in REQUIREMENT_FIELDS.items()
        if mapping.get(key) in df.columns
    }

    data = pd.DataFrame(index=df.index)
    for field_name, column in columns.items():
        if field_name in NUMERIC_FIELDS:
            data[field_name] = pd.to_numeric(df[column], errors='coerce')
        else:
            data[field_name] = df[column].map(_as_text)
    if 'store_size' in data.columns:
        data['store_size'] = data['store_size'].fillna(0.0)

    invalid = (
        data['region'].eq("")
        | data['performance_value'].isna()
        | (data['performance_value'] < 0)
    )
    if invalid.any():
        if not drop_invalid:
            rows = df.index[invalid].tolist()
            raise ValueError(f"Rows without region or with invalid performance value: {rows[:10]}")
        logger.warning(f"Dropping {int(invalid.sum())} invalid store rows")
        data = data[~invalid]

    records = []
    for row in data.to_dict(orient='records'):
        kwargs = {name: row[name] for name in columns if name in row}
        kwargs['performance_value'] = float(kwargs['performance_value'])
        if 'store_size' in kwargs:
            kwargs['store_size'] = float(kwargs['store_size'])
        kwargs.setdefault('name', "")
        kwargs.setdefault('crm_id', "")
        kwargs.setdefault('store_id', "")
        records.append(StoreRecord(**kwargs))
    return records


def stores_to_frame(records: Sequence[StoreRecord]) -> pd.DataFrame:
    """One row per record, StoreRecord field names as columns."""
    if not records:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    return pd.DataFrame([asdict(r) for r in records], columns=RECORD_COLUMNS)


def result_to_frames(result: SelectionResult) -> Dict[str, pd.DataFrame]:
    """
    Tables for reporting a selection.

    Returns:
        Dictionary with:
            - selected: ranked stores (rank starts at 1, selection order)
            - revenue_per_region: region, revenue, stores, revenue_share
              sorted by revenue descending
            - performance_distribution: tier, stores
    """
    selected = stores_to_frame(result.selected_stores)
    selected.insert(0, 'rank', np.arange(1, len(selected) + 1))

    revenue = pd.DataFrame(
        list(result.statistics.revenue_per_region.items()),
        columns=['region', 'revenue'],
    )
    store_counts = selected.groupby('region').size() if len(selected) else pd.Series(dtype=int)
    revenue['stores'] = revenue['region'].map(store_counts).fillna(0).astype(int)
    revenue['revenue_share'] = (
        revenue['revenue'] / result.total_revenue if result.total_revenue else 0.0
    )
    revenue = revenue.sort_values('revenue', ascending=False, kind='mergesort').reset_index(drop=True)

    dist = result.performance_distribution
    tiers = pd.DataFrame({
        'tier': ['high', 'medium', 'low'],
        'stores': [dist.high, dist.medium, dist.low],
    })

    return {
        'selected': selected,
        'revenue_per_region': revenue,
        'performance_distribution': tiers,
    }
