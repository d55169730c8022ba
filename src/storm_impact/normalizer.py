# src/storm_impact/normalizer.py
"""
Module: normalizer.py
Responsibilities:
- Resolve damage magnitude codes (h/k/m/b) to multipliers
- Convert raw property and crop amounts to absolute dollars
- Derive per-event harm (fatalities + injuries) and damage (property + crop)
"""
import logging
from dataclasses import dataclass, fields
from typing import Optional

import numpy as np
import pandas as pd

from storm_impact.loader import EventRecord

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

SCALE_MULTIPLIERS = {
    'h': 100,
    'k': 1_000,
    'm': 1_000_000,
    'b': 1_000_000_000,
}
IDENTITY_MULTIPLIER = 1
# Stray characters in the exponent columns turned out to be trailing digits
# of the amount that slipped into the wrong field; x10 approximates them.
FALLBACK_MULTIPLIER = 10

NORMALIZED_COLUMNS = ['property_damage', 'crop_damage', 'harm', 'damage']


@dataclass(frozen=True)
class NormalizedRecord(EventRecord):
    """EventRecord with absolute damage figures and derived totals."""
    property_damage: float = 0.0
    crop_damage: float = 0.0
    harm: int = 0
    damage: float = 0.0


def resolve_scale(code: Optional[str]) -> int:
    """
    Map a damage magnitude code to its multiplier.

    Rules, first match wins:
    missing or blank -> 1; h -> 100; k -> 1e3; m -> 1e6; b -> 1e9
    (case-insensitive); anything else, digits included -> 10.

    Parameters
    ----------
    code : str or None
        Raw magnitude code

    Returns
    -------
    int
        One of 1, 10, 100, 1e3, 1e6, 1e9
    """
    if code is None or (not isinstance(code, str) and pd.isna(code)):
        return IDENTITY_MULTIPLIER
    text = str(code).strip()
    if not text:
        return IDENTITY_MULTIPLIER
    return SCALE_MULTIPLIERS.get(text.lower(), FALLBACK_MULTIPLIER)


def resolve_scales(codes: pd.Series) -> pd.Series:
    """Vectorized resolve_scale over a Series of codes."""
    lookup = {code: resolve_scale(code) for code in pd.unique(codes.dropna())}
    return codes.map(lookup).fillna(IDENTITY_MULTIPLIER).astype(np.int64)


def normalize_events(events: pd.DataFrame) -> pd.DataFrame:
    """
    Add absolute damage figures and harm/damage totals to cleaned events.

    Parameters
    ----------
    events : pd.DataFrame
        Output of loader.clean_events

    Returns
    -------
    pd.DataFrame
        Copy of events with NORMALIZED_COLUMNS appended

    Raises
    ------
    ValueError
        If the damage or casualty columns are missing
    """
    required = ['fatalities', 'injuries', 'property_raw', 'property_scale_code',
                'crop_raw', 'crop_scale_code']
    missing = [col for col in required if col not in events.columns]
    if missing:
        raise ValueError(f"Cannot normalize events, missing columns: {', '.join(missing)}")

    df = events.copy()

    for prefix in ('property', 'crop'):
        codes = df[f'{prefix}_scale_code']
        multipliers = resolve_scales(codes)
        n_fallback = int((multipliers == FALLBACK_MULTIPLIER).sum())
        if n_fallback:
            unknown = sorted(set(codes[multipliers == FALLBACK_MULTIPLIER]))
            logger.info(f"Applying x{FALLBACK_MULTIPLIER} to {n_fallback} {prefix} amounts "
                        f"with non-standard codes {unknown}")
        raw = df[f'{prefix}_raw'].fillna(0.0).astype(float)
        df[f'{prefix}_damage'] = raw * multipliers

    df['harm'] = (df['fatalities'] + df['injuries']).astype(np.int64)
    df['damage'] = df['property_damage'] + df['crop_damage']

    logger.info(f"Normalized {len(df)} events: harm={int(df['harm'].sum())}, "
                f"damage=${df['damage'].sum() / 1e9:.2f}B")
    return df


def normalize_record(record: EventRecord) -> NormalizedRecord:
    """
    Normalize a single event record.

    Only the EventRecord fields of the input are read, so an already
    normalized record is recomputed rather than rejected.
    """
    base = {f.name: getattr(record, f.name) for f in fields(EventRecord)}
    property_damage = (record.property_raw or 0.0) * resolve_scale(record.property_scale_code)
    crop_damage = (record.crop_raw or 0.0) * resolve_scale(record.crop_scale_code)
    return NormalizedRecord(
        **base,
        property_damage=property_damage,
        crop_damage=crop_damage,
        harm=record.fatalities + record.injuries,
        damage=property_damage + crop_damage,
    )
