"""
Synthetic Dutch grocery store dataset for demos, notebooks and the CLI.

The table uses the same Dutch export headers as real imports, so it goes
through the regular DataFrame adapter and column mapping.
"""

from typing import List, Optional

import numpy as np
import pandas as pd

from .config import get_default_column_mappings, load_config
from .frame import stores_from_frame
from .models import StoreRecord

RETAILERS = ['Albert Heijn', 'Jumbo', 'Lidl', 'Aldi', 'Plus', 'Vomar', 'Coop', 'Spar']

PROVINCES = [
    'Groningen', 'Friesland', 'Drenthe', 'Overijssel', 'Flevoland', 'Gelderland',
    'Utrecht', 'Noord-Holland', 'Zuid-Holland', 'Zeeland', 'Noord-Brabant', 'Limburg',
]

# Relative store density per province (Randstad and Brabant dominate)
PROVINCE_WEIGHTS = [0.04, 0.04, 0.03, 0.07, 0.03, 0.11, 0.08, 0.17, 0.21, 0.02, 0.14, 0.06]

CITIES = {
    'Groningen': ['Groningen', 'Veendam'],
    'Friesland': ['Leeuwarden', 'Sneek'],
    'Drenthe': ['Assen', 'Emmen'],
    'Overijssel': ['Zwolle', 'Enschede'],
    'Flevoland': ['Almere', 'Lelystad'],
    'Gelderland': ['Arnhem', 'Nijmegen'],
    'Utrecht': ['Utrecht', 'Amersfoort'],
    'Noord-Holland': ['Amsterdam', 'Haarlem'],
    'Zuid-Holland': ['Rotterdam', 'Den Haag'],
    'Zeeland': ['Middelburg', 'Vlissingen'],
    'Noord-Brabant': ['Eindhoven', 'Tilburg'],
    'Limburg': ['Maastricht', 'Venlo'],
}

CHANNELS = ['Stedelijk Premium', 'Landelijk Mainstream', 'Stedelijk Basis', 'Landelijk Basis']
STORE_TYPES = ['Filiaal', 'Franchiser']
STRATEGIES = ['Executie', 'Brandbuilding', 'Executie+']
CUSTOMER_GROUPS = ['A', 'B', 'C', 'D']
STREETS = ['Hoofdstraat', 'Kerkstraat', 'Marktplein', 'Stationsweg', 'Dorpsstraat']

# Revenue multiplier per customer group and channel
GROUP_FACTORS = {'A': 1.35, 'B': 1.1, 'C': 0.9, 'D': 0.75}
CHANNEL_FACTORS = {
    'Stedelijk Premium': 1.25,
    'Landelijk Mainstream': 1.0,
    'Stedelijk Basis': 0.95,
    'Landelijk Basis': 0.8,
}


def generate_sample_frame(n_stores: int = 120, seed: int = 42) -> pd.DataFrame:
    """
    Reproducible store table with Dutch column headers.

    Args:
        n_stores: Number of rows
        seed: Random seed; identical seeds give identical tables

    Returns:
        DataFrame with columns naam, crmId, storeId, stad, straat, nummer,
        postcode, kanaal, type, fieldSalesRegio, klantgroep, prodSelect,
        strategie, storeSize
    """
    rng = np.random.RandomState(seed)
    rows = []
    for i in range(n_stores):
        retailer = RETAILERS[rng.randint(len(RETAILERS))]
        province = PROVINCES[rng.choice(len(PROVINCES), p=PROVINCE_WEIGHTS)]
        city = CITIES[province][rng.randint(2)]
        channel = CHANNELS[rng.randint(len(CHANNELS))]
        group = CUSTOMER_GROUPS[rng.randint(len(CUSTOMER_GROUPS))]
        size = int(rng.randint(6, 19) * 100)

        revenue = rng.lognormal(mean=14.2, sigma=0.35) * GROUP_FACTORS[group] * CHANNEL_FACTORS[channel]
        prefix = ''.join(word[0] for word in retailer.split()).upper()

        rows.append({
            'naam': f"{retailer} {city} {STREETS[rng.randint(len(STREETS))]}",
            'crmId': f"{prefix}-{i + 1:03d}",
            'storeId': f"{prefix}-{city[:3].upper()}-{i + 1:03d}",
            'stad': city,
            'straat': STREETS[rng.randint(len(STREETS))],
            'nummer': str(rng.randint(1, 250)),
            'postcode': f"{rng.randint(1000, 9999)} {chr(65 + rng.randint(26))}{chr(65 + rng.randint(26))}",
            'kanaal': channel,
            'type': STORE_TYPES[rng.randint(len(STORE_TYPES))],
            'fieldSalesRegio': province,
            'klantgroep': group,
            'prodSelect': round(float(revenue), -3),
            'strategie': STRATEGIES[rng.randint(len(STRATEGIES))],
            'storeSize': size,
        })
    return pd.DataFrame(rows)


def generate_sample_stores(n_stores: int = 120, seed: int = 42,
                           config: Optional[dict] = None) -> List[StoreRecord]:
    """Sample table converted through the default column mapping."""
    config = config if config is not None else load_config()
    frame = generate_sample_frame(n_stores, seed)
    return stores_from_frame(frame, get_default_column_mappings(config))
