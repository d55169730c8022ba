# src/storm_impact/pipeline.py
"""
Module: pipeline.py
Responsibilities:
- Run the batch stages in order: clean -> normalize -> aggregate -> rank
  -> state summaries
- Bundle the tables consumed by the report into ReportTables
- Cross-check that aggregation neither drops nor double counts events
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

import numpy as np
import pandas as pd

from storm_impact.aggregate import aggregate_by_category
from storm_impact.loader import DEFAULT_CUTOFF, DATE_FORMAT, LoadAudit, clean_events
from storm_impact.normalizer import normalize_events
from storm_impact.ranking import DEFAULT_TOP_N, comparison_table, top_n
from storm_impact.reference import ReferenceData, default_reference
from storm_impact.state_summary import summarize_states

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportTables:
    """Finished tables handed to the rendering stage."""
    harm_top: pd.DataFrame
    damage_top: pd.DataFrame
    harm_by_region: pd.DataFrame
    damage_by_region: pd.DataFrame
    comparison: pd.DataFrame
    category_totals: pd.DataFrame
    audit: LoadAudit
    cutoff: pd.Timestamp
    top: int


def check_consistency(normalized: pd.DataFrame, totals: pd.DataFrame) -> None:
    """
    Verify category totals partition the normalized events.

    Parameters
    ----------
    normalized : pd.DataFrame
        Per-event rows
    totals : pd.DataFrame
        Per-category totals built from them

    Raises
    ------
    ValueError
        If counts, harm or damage sums disagree
    """
    if int(totals['count'].sum()) != len(normalized):
        raise ValueError(f"Category counts sum to {int(totals['count'].sum())}, "
                         f"expected {len(normalized)} events")

    if int(totals['harm'].sum()) != int(normalized['harm'].sum()):
        raise ValueError("Category harm totals do not match per-event harm")

    expected = float(normalized['damage'].sum())
    actual = float(totals['damage'].sum())
    if not np.isclose(actual, expected, rtol=1e-9, atol=1e-6):
        raise ValueError(f"Category damage totals ({actual:,.2f}) do not match "
                         f"per-event damage ({expected:,.2f})")


def build_report_tables(
    raw: pd.DataFrame,
    cutoff: Union[str, datetime, pd.Timestamp] = DEFAULT_CUTOFF,
    top: int = DEFAULT_TOP_N,
    reference: Optional[ReferenceData] = None,
    date_format: Optional[str] = DATE_FORMAT
) -> ReportTables:
    """
    Run every analysis stage on a raw storm table.

    Parameters
    ----------
    raw : pd.DataFrame
        Raw table from data_io.load_storm_data
    cutoff : str, datetime or pd.Timestamp
        Inclusive start of the analysis window
    top : int, default=10
        Size of the top-N category sets
    reference : ReferenceData, optional
        Lookup tables; defaults to reference.default_reference()
    date_format : str or None
        strptime format of the raw date columns

    Returns
    -------
    ReportTables
    """
    reference = reference or default_reference()

    events, audit = clean_events(
        raw, cutoff=cutoff, state_regions=reference.state_regions, date_format=date_format
    )
    normalized = normalize_events(events)
    totals = aggregate_by_category(normalized)
    check_consistency(normalized, totals)

    harm_top = top_n(totals, 'harm', n=top)
    damage_top = top_n(totals, 'damage', n=top)

    harm_by_region = summarize_states(
        normalized, harm_top['category'], 'harm', state_regions=reference.state_regions
    )
    damage_by_region = summarize_states(
        normalized, damage_top['category'], 'damage', state_regions=reference.state_regions
    )

    n_uncatalogued = len(set(totals.index) - set(reference.categories))
    if n_uncatalogued:
        logger.info(f"{n_uncatalogued} of {len(totals)} categories are not in the "
                    f"canonical list of {len(reference.categories)}")

    return ReportTables(
        harm_top=harm_top,
        damage_top=damage_top,
        harm_by_region=harm_by_region,
        damage_by_region=damage_by_region,
        comparison=comparison_table(totals),
        category_totals=totals,
        audit=audit,
        cutoff=pd.Timestamp(cutoff),
        top=top,
    )
