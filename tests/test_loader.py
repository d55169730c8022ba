"""
Unit tests for loader module.
"""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Adjust path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from storm_impact.loader import (
    EVENT_COLUMNS, EventRecord, UNKNOWN_CATEGORY, clean_events, iter_event_records
)


def make_raw(rows):
    """Build a raw storm table (all strings) from partial row dicts."""
    defaults = {
        'BGN_DATE': '1/1/2010 0:00:00',
        'END_DATE': '1/1/2010 0:00:00',
        'STATE': 'AL',
        'EVTYPE': 'TORNADO',
        'FATALITIES': '0',
        'INJURIES': '0',
        'PROPDMG': '0',
        'PROPDMGEXP': '',
        'CROPDMG': '0',
        'CROPDMGEXP': '',
    }
    return pd.DataFrame([{**defaults, **row} for row in rows])


@pytest.fixture
def raw():
    """Raw rows around the 2007-01-01 cutoff with assorted quirks."""
    return make_raw([
        {'BGN_DATE': '12/31/2006 0:00:00', 'EVTYPE': 'HAIL'},
        {'BGN_DATE': '1/1/2007 0:00:00', 'EVTYPE': 'tornado', 'FATALITIES': '2'},
        {'BGN_DATE': '3/1/2008 0:00:00', 'STATE': 'xx', 'EVTYPE': 'Flash Flood',
         'INJURIES': '4'},
        {'BGN_DATE': 'not a date', 'EVTYPE': 'HAIL'},
        {'BGN_DATE': '6/15/2011 0:00:00', 'END_DATE': 'garbage', 'STATE': ' tx ',
         'EVTYPE': '  thunderstorm wind ', 'FATALITIES': None, 'PROPDMG': None,
         'PROPDMGEXP': None},
        {'BGN_DATE': '7/4/2009 0:00:00', 'EVTYPE': None, 'INJURIES': 'n/a'},
    ])


def test_cutoff_is_inclusive(raw):
    """Rows on the cutoff day are kept, rows before it are dropped."""
    events, audit = clean_events(raw, cutoff='2007-01-01')

    assert events['begin_time'].min() == pd.Timestamp('2007-01-01')
    assert (events['begin_time'] >= pd.Timestamp('2007-01-01')).all()
    assert audit.before_cutoff == 1
    assert 'Hail' not in set(events['category'])


def test_unparseable_dates_are_excluded(raw):
    """Unparseable begin dates are dropped and counted, not raised."""
    events, audit = clean_events(raw)

    assert audit.total_rows == 6
    assert audit.unparseable_dates == 1
    assert audit.retained == len(events) == 4
    assert audit.total_rows == audit.unparseable_dates + audit.before_cutoff + audit.retained


def test_invalid_end_date_is_retained(raw):
    """A bad end date becomes NaT but the event stays."""
    events, _ = clean_events(raw)
    row = events[events['state_code'] == 'TX'].iloc[0]
    assert pd.isna(row['end_time'])
    assert row['begin_time'] == pd.Timestamp('2011-06-15')


def test_state_codes_join_regions(raw):
    """Codes are upper-cased and mapped; unknown codes keep no region."""
    events, audit = clean_events(raw)

    assert set(events['state_code']) == {'AL', 'XX', 'TX'}
    assert events.loc[events['state_code'] == 'TX', 'region'].iloc[0] == 'Texas'
    assert events.loc[events['state_code'] == 'XX', 'region'].isna().all()
    assert audit.unmapped_states == 1


def test_categories_are_title_cased(raw):
    """Event labels are stripped and title-cased; blanks become Unknown."""
    events, _ = clean_events(raw)
    assert set(events['category']) == {
        'Tornado', 'Flash Flood', 'Thunderstorm Wind', UNKNOWN_CATEGORY
    }


def test_missing_numbers_become_zero(raw):
    """Missing or invalid counts and amounts default to zero."""
    events, _ = clean_events(raw)

    tx = events[events['state_code'] == 'TX'].iloc[0]
    assert tx['fatalities'] == 0
    assert tx['property_raw'] == 0.0
    assert tx['property_scale_code'] == ''

    unknown = events[events['category'] == UNKNOWN_CATEGORY].iloc[0]
    assert unknown['injuries'] == 0

    assert events['fatalities'].dtype == np.int64
    assert events['property_raw'].dtype == np.float64


def test_custom_state_lookup(raw):
    """The region lookup is passed in, not read from global state."""
    events, audit = clean_events(raw, state_regions={'XX': 'Test Region'})
    assert events.loc[events['state_code'] == 'XX', 'region'].iloc[0] == 'Test Region'
    assert audit.unmapped_states == 3


def test_missing_columns_raise():
    """A table without the raw columns cannot be cleaned."""
    with pytest.raises(ValueError):
        clean_events(pd.DataFrame({'BGN_DATE': ['1/1/2010 0:00:00']}))


def test_empty_window():
    """A window with no events yields an empty, well-formed frame."""
    events, audit = clean_events(make_raw([{'BGN_DATE': '1/1/1999 0:00:00'}]))
    assert events.empty
    assert list(events.columns) == EVENT_COLUMNS
    assert audit.retained == 0


def test_iter_event_records(raw):
    """Records are yielded lazily with missing values as None."""
    events, _ = clean_events(raw)
    records = iter_event_records(events)

    first = next(records)
    assert isinstance(first, EventRecord)
    assert first.category == 'Tornado'
    assert first.fatalities == 2
    assert first.region == 'Alabama'

    rest = list(records)
    assert len(rest) == len(events) - 1
    xx = [r for r in rest if r.state_code == 'XX'][0]
    assert xx.region is None


def test_non_finite_numbers_become_zero():
    """Overflowing or infinite numbers are treated like invalid values."""
    events, audit = clean_events(make_raw([
        {'BGN_DATE': '3/1/2008 0:00:00', 'FATALITIES': '1e400', 'INJURIES': '3',
         'PROPDMG': 'inf', 'PROPDMGEXP': 'K', 'CROPDMG': '-inf'},
        {'BGN_DATE': '3/2/2008 0:00:00', 'FATALITIES': '2', 'INJURIES': '1e30',
         'PROPDMG': '5'},
    ]))

    assert audit.retained == 2
    assert events['fatalities'].tolist() == [0, 2]
    assert events['injuries'].tolist() == [3, 0]
    assert events['property_raw'].tolist() == [0.0, 5.0]
    assert events['crop_raw'].tolist() == [0.0, 0.0]
    assert np.isfinite(events['property_raw']).all()


if __name__ == "__main__":
    # Run tests manually
    pytest.main(["-xvs", __file__])
