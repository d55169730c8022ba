# src/storm_impact/ranking.py
"""
Module: ranking.py
Responsibilities:
- Rank categories by harm or damage and select the top N
- Build the side-by-side comparison table of all categories
"""
import logging
from typing import List, Tuple

import pandas as pd

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

METRICS = ('harm', 'damage')
DEFAULT_TOP_N = 10
BILLION = 1e9

# Column holding the reported value for each metric
VALUE_COLUMNS = {
    'harm': 'harm',
    'damage': 'damage_billions',
}


def check_metric(metric: str) -> None:
    if metric not in METRICS:
        raise ValueError(f"Unknown metric: {metric}. Valid metrics: {', '.join(METRICS)}")


def reported_values(totals: pd.DataFrame, metric: str) -> pd.Series:
    """
    Metric values as shown in the report: harm as-is, damage in billions.

    Scaling is a positive monotonic transform, so ranks are unchanged.
    """
    check_metric(metric)
    values = totals[metric]
    if metric == 'damage':
        values = values / BILLION
    return values.rename(VALUE_COLUMNS[metric])


def rank_categories(totals: pd.DataFrame, metric: str) -> pd.DataFrame:
    """
    Order every category by a metric.

    Sorted descending by the metric; equal values are ordered by category
    label ascending so the result never depends on input order.

    Parameters
    ----------
    totals : pd.DataFrame
        Output of aggregate.aggregate_by_category (indexed by category)
    metric : str
        'harm' or 'damage'

    Returns
    -------
    pd.DataFrame
        Columns 'category' and the reported value column
    """
    check_metric(metric)
    if metric not in totals.columns:
        raise KeyError(f"Totals have no '{metric}' column")

    ranked = pd.DataFrame({
        'category': totals.index.astype(str),
        metric: totals[metric].to_numpy(),
    })
    ranked = ranked.sort_values(
        [metric, 'category'], ascending=[False, True], kind='mergesort'
    ).reset_index(drop=True)

    value_column = VALUE_COLUMNS[metric]
    if metric == 'damage':
        ranked[value_column] = ranked[metric] / BILLION
        ranked = ranked.drop(columns=metric)
    return ranked[['category', value_column]]


def top_n(totals: pd.DataFrame, metric: str, n: int = DEFAULT_TOP_N) -> pd.DataFrame:
    """
    Select the n categories with the highest value of a metric.

    Parameters
    ----------
    totals : pd.DataFrame
        Output of aggregate.aggregate_by_category
    metric : str
        'harm' or 'damage'
    n : int, default=10
        Number of categories to keep; fewer are returned if fewer exist

    Returns
    -------
    pd.DataFrame
        At most n rows with columns 'category' and 'harm' or
        'damage_billions', in non-increasing order of the metric
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    ranked = rank_categories(totals, metric)
    top = ranked.head(n).reset_index(drop=True)

    if len(ranked) > n > 0:
        value_column = VALUE_COLUMNS[metric]
        boundary = ranked[value_column].iloc[n - 1]
        n_tied = int((ranked[value_column].iloc[n:] == boundary).sum())
        if n_tied:
            logger.info(f"{n_tied} categories tie the #{n} {metric} value and were "
                        "left out by label order")

    logger.info(f"Top {len(top)} categories by {metric}: {', '.join(top['category'])}")
    return top


def ranked_pairs(table: pd.DataFrame) -> List[Tuple[str, float]]:
    """Return a ranked table as a list of (category, value) tuples."""
    value_column = [c for c in table.columns if c != 'category'][0]
    return list(zip(table['category'], table[value_column]))


def comparison_table(totals: pd.DataFrame) -> pd.DataFrame:
    """
    Rank all categories by harm and by damage, side by side.

    Each half of the table is sorted independently, so row i holds the
    i-th category by harm next to the i-th category by damage.

    Parameters
    ----------
    totals : pd.DataFrame
        Output of aggregate.aggregate_by_category

    Returns
    -------
    pd.DataFrame
        Columns 'rank', 'harm_category', 'harm', 'damage_category',
        'damage_billions'
    """
    by_harm = rank_categories(totals, 'harm').rename(columns={'category': 'harm_category'})
    by_damage = rank_categories(totals, 'damage').rename(columns={'category': 'damage_category'})
    table = pd.concat([by_harm, by_damage], axis=1)
    table.insert(0, 'rank', range(1, len(table) + 1))
    return table
