# src/storm_impact/state_summary.py
"""
Module: state_summary.py
Responsibilities:
- Restrict events to a top-N category set and total them per region
- Attach state codes so the tables can be drawn on a USA-states map
"""
import logging
from typing import Iterable, Mapping

import pandas as pd

from storm_impact.aggregate import aggregate_by_region
from storm_impact.ranking import VALUE_COLUMNS, check_metric, reported_values
from storm_impact.reference import STATE_REGIONS, region_codes

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def summarize_states(
    normalized: pd.DataFrame,
    categories: Iterable[str],
    metric: str,
    state_regions: Mapping[str, str] = STATE_REGIONS
) -> pd.DataFrame:
    """
    Total one metric per region over the events in a category set.

    Regions with no matching events are absent from the result; consumers
    should treat them as "no data", not as zero.

    Parameters
    ----------
    normalized : pd.DataFrame
        Output of normalizer.normalize_events
    categories : Iterable[str]
        Category set, typically the 'category' column of a top-N table
    metric : str
        'harm' or 'damage' (damage is reported in billions)
    state_regions : Mapping[str, str]
        State abbreviation -> region name lookup

    Returns
    -------
    pd.DataFrame
        Columns 'region', 'state_code', 'count' and 'harm' or
        'damage_billions', sorted descending by the metric then region
    """
    check_metric(metric)
    categories = list(categories)
    by_region = aggregate_by_region(normalized, categories=categories)

    value_column = VALUE_COLUMNS[metric]
    codes = region_codes(state_regions)
    summary = pd.DataFrame({
        'region': by_region.index.astype(str),
        'state_code': [codes.get(region) for region in by_region.index],
        'count': by_region['count'].to_numpy(),
        value_column: reported_values(by_region, metric).to_numpy(),
    })
    summary = summary.sort_values(
        [value_column, 'region'], ascending=[False, True], kind='mergesort'
    ).reset_index(drop=True)

    if not summary.empty:
        leader = summary.iloc[0]
        logger.info(f"{metric} across {len(summary)} regions for {len(categories)} categories; "
                    f"highest: {leader['region']} ({leader[value_column]:,.2f})")
    else:
        logger.warning(f"No regional {metric} data for the selected categories")
    return summary
