# src/storm_impact/data_io.py
"""
Module: data_io.py
Responsibilities:
- Validate the storm data source path
- Load the raw NOAA Storm Events table into a pandas DataFrame
- Fail loudly when the source cannot be parsed into rows
"""
import os
import pandas as pd
import logging
from typing import List, Optional

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Raw column names in the NOAA Storm Data extract
BEGIN_DATE = 'BGN_DATE'
END_DATE = 'END_DATE'
STATE = 'STATE'
EVENT_TYPE = 'EVTYPE'
FATALITIES = 'FATALITIES'
INJURIES = 'INJURIES'
PROPERTY_RAW = 'PROPDMG'
PROPERTY_SCALE = 'PROPDMGEXP'
CROP_RAW = 'CROPDMG'
CROP_SCALE = 'CROPDMGEXP'

REQUIRED_COLUMNS = [
    BEGIN_DATE, STATE, EVENT_TYPE, FATALITIES, INJURIES,
    PROPERTY_RAW, PROPERTY_SCALE, CROP_RAW, CROP_SCALE,
]
OPTIONAL_COLUMNS = [END_DATE]


def validate_path(data_path: str) -> bool:
    """
    Ensure the storm data file exists and is readable.

    Parameters
    ----------
    data_path : str
        Path to the storm data CSV (plain or compressed)

    Returns
    -------
    bool
        True if the path is valid, raises appropriate exception otherwise

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist
    IsADirectoryError
        If the path points at a directory
    PermissionError
        If the file exists but isn't readable
    """
    if not os.path.exists(data_path):
        raise FileNotFoundError(f"Storm data file not found: {data_path}")

    if os.path.isdir(data_path):
        raise IsADirectoryError(f"Expected a file, got a directory: {data_path}")

    if not os.access(data_path, os.R_OK):
        raise PermissionError(f"Storm data file is not readable: {data_path}")

    logger.info(f"Verified storm data path: {data_path}")
    return True


def load_storm_data(data_path: str, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Load the raw storm events table.

    Only the columns the analysis needs are read, as strings, so that
    malformed values are left for the cleaning stage to coerce.

    Parameters
    ----------
    data_path : str
        Path to the storm data CSV; compression is inferred from the extension
    columns : List[str], optional
        Columns to read. Defaults to the required plus optional columns.

    Returns
    -------
    pd.DataFrame
        Raw event rows with string-typed columns

    Raises
    ------
    ValueError
        If the file is empty, cannot be parsed, or lacks required columns
    """
    validate_path(data_path)
    wanted = columns or REQUIRED_COLUMNS + OPTIONAL_COLUMNS

    try:
        df = pd.read_csv(
            data_path,
            usecols=lambda c: c.strip() in wanted,
            dtype=str,
            keep_default_na=True,
        )
    except pd.errors.EmptyDataError:
        raise ValueError(f"Storm data file is empty: {data_path}")
    except pd.errors.ParserError as e:
        raise ValueError(f"Error parsing storm data file {data_path}: {e}")
    except (UnicodeDecodeError, OSError, EOFError) as e:
        raise ValueError(f"Error reading storm data file {data_path}: {e}")

    df.columns = [c.strip() for c in df.columns]

    missing = [col for col in REQUIRED_COLUMNS if col in wanted and col not in df.columns]
    if missing:
        raise ValueError(f"Storm data missing required columns: {', '.join(missing)}")

    for col in OPTIONAL_COLUMNS:
        if col in wanted and col not in df.columns:
            logger.warning(f"Storm data has no '{col}' column; filling with missing values")
            df[col] = pd.NA

    logger.info(f"Loaded {len(df)} raw event rows from {os.path.basename(data_path)}")
    return df
