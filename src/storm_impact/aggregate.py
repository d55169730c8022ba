# src/storm_impact/aggregate.py
"""
Module: aggregate.py
Responsibilities:
- Group normalized events by category into per-category totals
- Group normalized events by region, optionally restricted to a category set
"""
import logging
from typing import Iterable, Optional

import pandas as pd

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

SUM_COLUMNS = ['fatalities', 'injuries', 'property_damage', 'crop_damage']
TOTAL_COLUMNS = ['count'] + SUM_COLUMNS + ['harm', 'damage']


def _totals(df: pd.DataFrame, key: str) -> pd.DataFrame:
    missing = [col for col in [key] + SUM_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Cannot aggregate events, missing columns: {', '.join(missing)}")

    grouped = df.groupby(key, sort=True)
    totals = grouped[SUM_COLUMNS].sum()
    totals.insert(0, 'count', grouped.size())
    totals['harm'] = totals['fatalities'] + totals['injuries']
    totals['damage'] = totals['property_damage'] + totals['crop_damage']
    return totals[TOTAL_COLUMNS]


def aggregate_by_category(normalized: pd.DataFrame) -> pd.DataFrame:
    """
    Sum casualties and damage per event category.

    Parameters
    ----------
    normalized : pd.DataFrame
        Output of normalizer.normalize_events

    Returns
    -------
    pd.DataFrame
        Indexed by 'category' with TOTAL_COLUMNS; one row per category that
        has at least one event
    """
    totals = _totals(normalized, 'category')
    logger.info(f"Aggregated {len(normalized)} events into {len(totals)} categories")
    return totals


def aggregate_by_region(
    normalized: pd.DataFrame,
    categories: Optional[Iterable[str]] = None
) -> pd.DataFrame:
    """
    Sum casualties and damage per region.

    Events without a region (unmapped state codes) are left out.

    Parameters
    ----------
    normalized : pd.DataFrame
        Output of normalizer.normalize_events
    categories : Iterable[str], optional
        Only events in these categories are counted

    Returns
    -------
    pd.DataFrame
        Indexed by 'region' with TOTAL_COLUMNS; regions without matching
        events are absent
    """
    if 'region' not in normalized.columns:
        raise ValueError("Cannot aggregate by region, missing column: region")

    df = normalized[normalized['region'].notna()]
    n_unmapped = len(normalized) - len(df)
    if n_unmapped:
        logger.info(f"Excluding {n_unmapped} events without a region")

    if categories is not None:
        selected = set(categories)
        df = df[df['category'].isin(selected)]
        logger.info(f"Restricted to {len(selected)} categories: {len(df)} events remain")

    return _totals(df, 'region')
