# src/storm_impact/loader.py
"""
Module: loader.py
Responsibilities:
- Parse begin/end timestamps and restrict events to the analysis window
- Join state codes against the region lookup
- Normalize event type labels to title case
- Coerce casualty counts and damage amounts (missing -> 0)
- Report how many rows were excluded and why
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from storm_impact import data_io
from storm_impact.reference import STATE_REGIONS

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Constants
DEFAULT_CUTOFF = '2007-01-01'
DATE_FORMAT = '%m/%d/%Y %H:%M:%S'
UNKNOWN_CATEGORY = 'Unknown'

# Clean column names
EVENT_COLUMNS = [
    'begin_time', 'end_time', 'state_code', 'region', 'category',
    'fatalities', 'injuries',
    'property_raw', 'property_scale_code', 'crop_raw', 'crop_scale_code',
]


@dataclass(frozen=True)
class EventRecord:
    """One observed storm event after cleaning."""
    begin_time: pd.Timestamp
    end_time: Optional[pd.Timestamp]
    state_code: str
    region: Optional[str]
    category: str
    fatalities: int = 0
    injuries: int = 0
    property_raw: float = 0.0
    property_scale_code: str = ''
    crop_raw: float = 0.0
    crop_scale_code: str = ''


@dataclass(frozen=True)
class LoadAudit:
    """Counts of rows seen and excluded while cleaning."""
    total_rows: int
    unparseable_dates: int
    before_cutoff: int
    unmapped_states: int
    retained: int

    def summary(self) -> str:
        return (f"{self.retained} of {self.total_rows} rows retained; "
                f"{self.unparseable_dates} unparseable begin dates, "
                f"{self.before_cutoff} before cutoff, "
                f"{self.unmapped_states} retained rows with unmapped state codes")


def parse_timestamps(values: pd.Series, date_format: Optional[str] = DATE_FORMAT) -> pd.Series:
    """
    Parse raw date strings, turning anything unparseable into NaT.

    Parameters
    ----------
    values : pd.Series
        Raw date strings
    date_format : str or None
        strptime format; None lets pandas infer it

    Returns
    -------
    pd.Series
        datetime64 series
    """
    return pd.to_datetime(values, format=date_format, errors='coerce')


def _to_finite(values: pd.Series, what: str) -> pd.Series:
    numbers = pd.to_numeric(values, errors='coerce').astype(float)
    infinite = np.isinf(numbers)
    n_infinite = int(infinite.sum())
    if n_infinite:
        logger.warning(f"Replacing {n_infinite} non-finite {what} with 0")
    return numbers.mask(infinite)


def _to_count(values: pd.Series) -> pd.Series:
    counts = _to_finite(values, 'counts')
    too_large = counts >= np.iinfo(np.int64).max
    if too_large.any():
        logger.warning(f"Replacing {int(too_large.sum())} counts beyond int64 range with 0")
    counts = counts.mask(too_large).fillna(0)
    n_negative = int((counts < 0).sum())
    if n_negative:
        logger.warning(f"Clipping {n_negative} negative counts to 0")
    return counts.clip(lower=0).astype(np.int64)


def _to_amount(values: pd.Series) -> pd.Series:
    amounts = _to_finite(values, 'damage amounts').fillna(0.0)
    n_negative = int((amounts < 0).sum())
    if n_negative:
        logger.warning(f"Clipping {n_negative} negative damage amounts to 0")
    return amounts.clip(lower=0.0)


def _to_code(values: pd.Series) -> pd.Series:
    return values.fillna('').astype(str).str.strip()


def normalize_category(values: pd.Series) -> pd.Series:
    """
    Title-case event type labels so that grouping is insensitive to casing.

    Labels are not checked against the canonical category list.
    """
    labels = values.fillna('').astype(str).str.strip().str.title()
    return labels.where(labels != '', UNKNOWN_CATEGORY)


def clean_events(
    raw: pd.DataFrame,
    cutoff: Union[str, datetime, pd.Timestamp] = DEFAULT_CUTOFF,
    state_regions: Mapping[str, str] = STATE_REGIONS,
    date_format: Optional[str] = DATE_FORMAT
) -> Tuple[pd.DataFrame, LoadAudit]:
    """
    Turn raw storm rows into typed event records inside the analysis window.

    1. Parse begin dates; unparseable rows are excluded (not an error)
    2. Keep rows beginning on or after the cutoff (inclusive)
    3. Parse end dates leniently; invalid values become NaT
    4. Upper-case state codes and join them to region names
    5. Title-case event type labels
    6. Coerce counts and damage amounts, missing -> 0

    Parameters
    ----------
    raw : pd.DataFrame
        Raw table as returned by data_io.load_storm_data
    cutoff : str, datetime or pd.Timestamp
        Inclusive lower bound on the begin date
    state_regions : Mapping[str, str]
        State abbreviation -> region name lookup
    date_format : str or None
        strptime format of the date columns

    Returns
    -------
    Tuple[pd.DataFrame, LoadAudit]
        Clean events (columns EVENT_COLUMNS) and the exclusion counts

    Raises
    ------
    ValueError
        If required raw columns are missing
    """
    if not isinstance(raw, pd.DataFrame):
        raise TypeError("Input must be a pandas DataFrame")

    missing = [col for col in data_io.REQUIRED_COLUMNS if col not in raw.columns]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    cutoff_ts = pd.Timestamp(cutoff)
    total_rows = len(raw)

    begin = parse_timestamps(raw[data_io.BEGIN_DATE], date_format)
    unparseable = begin.isna()
    before = ~unparseable & (begin < cutoff_ts)
    keep = ~unparseable & ~before

    df = raw.loc[keep]
    if data_io.END_DATE in df.columns:
        end = parse_timestamps(df[data_io.END_DATE], date_format)
    else:
        end = pd.Series(pd.NaT, index=df.index, dtype='datetime64[ns]')

    state_code = df[data_io.STATE].fillna('').astype(str).str.strip().str.upper()
    region = state_code.map(dict(state_regions))

    events = pd.DataFrame({
        'begin_time': begin.loc[keep],
        'end_time': end,
        'state_code': state_code,
        'region': region,
        'category': normalize_category(df[data_io.EVENT_TYPE]),
        'fatalities': _to_count(df[data_io.FATALITIES]),
        'injuries': _to_count(df[data_io.INJURIES]),
        'property_raw': _to_amount(df[data_io.PROPERTY_RAW]),
        'property_scale_code': _to_code(df[data_io.PROPERTY_SCALE]),
        'crop_raw': _to_amount(df[data_io.CROP_RAW]),
        'crop_scale_code': _to_code(df[data_io.CROP_SCALE]),
    }, columns=EVENT_COLUMNS).reset_index(drop=True)

    audit = LoadAudit(
        total_rows=total_rows,
        unparseable_dates=int(unparseable.sum()),
        before_cutoff=int(before.sum()),
        unmapped_states=int(events['region'].isna().sum()),
        retained=len(events),
    )

    logger.info(f"Cleaning events from {cutoff_ts.date()}: {audit.summary()}")
    if audit.retained == 0:
        logger.warning("No events fall inside the analysis window")

    return events, audit


def _optional(value):
    return None if pd.isna(value) else value


def iter_event_records(events: pd.DataFrame) -> Iterator[EventRecord]:
    """
    Lazily yield EventRecord objects from a cleaned events frame.

    Parameters
    ----------
    events : pd.DataFrame
        Output of clean_events

    Yields
    ------
    EventRecord
    """
    for row in events.itertuples(index=False):
        yield EventRecord(
            begin_time=row.begin_time,
            end_time=_optional(row.end_time),
            state_code=row.state_code,
            region=_optional(row.region),
            category=row.category,
            fatalities=int(row.fatalities),
            injuries=int(row.injuries),
            property_raw=float(row.property_raw),
            property_scale_code=row.property_scale_code,
            crop_raw=float(row.crop_raw),
            crop_scale_code=row.crop_scale_code,
        )
