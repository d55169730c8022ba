"""
Unit tests for cli module.
"""

import os
import sys
import tempfile
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import pandas as pd
import pytest

# Add src path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from storm_impact.cli import main, setup_parser
from storm_impact.report import REPORT_FILENAME, TABLE_FILES


@pytest.fixture
def sample_data_environment():
    """Create a temporary directory with a small storm data CSV."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        tmp_path = Path(tmp_dir)

        rows = []
        event_types = ['TORNADO', 'FLASH FLOOD', 'HAIL', 'HEAT', 'LIGHTNING',
                       'TSTM WIND', 'RIP CURRENT', 'WILDFIRE', 'FLOOD', 'HIGH WIND',
                       'ICE STORM', 'BLIZZARD']
        states = ['AL', 'MO', 'TX', 'IL', 'FL', 'KS', 'NC', 'CA', 'TN', 'OK', 'NY', 'XX']
        for i, (event_type, state) in enumerate(zip(event_types, states)):
            rows.append({
                'STATE__': i,
                'BGN_DATE': f'{i + 1}/10/2008 0:00:00',
                'END_DATE': f'{i + 1}/11/2008 0:00:00',
                'STATE': state,
                'EVTYPE': event_type,
                'FATALITIES': i,
                'INJURIES': 10 * i,
                'PROPDMG': 100 - i,
                'PROPDMGEXP': 'K',
                'CROPDMG': i,
                'CROPDMGEXP': 'M',
            })
        rows.append({
            'STATE__': 99, 'BGN_DATE': '5/5/1995 0:00:00', 'END_DATE': '',
            'STATE': 'AL', 'EVTYPE': 'TORNADO', 'FATALITIES': 1000, 'INJURIES': 0,
            'PROPDMG': 1, 'PROPDMGEXP': 'B', 'CROPDMG': 0, 'CROPDMGEXP': '',
        })

        input_path = tmp_path / "StormData.csv"
        pd.DataFrame(rows).to_csv(input_path, index=False)

        yield {
            "root_dir": tmp_path,
            "input_path": input_path,
            "output_dir": tmp_path / "outputs",
        }


def test_parser_defaults():
    """Sub-commands share the analysis options."""
    parser = setup_parser()
    args = parser.parse_args(['tables'])
    assert args.command == 'tables'
    assert args.top == 10
    assert args.cutoff == pd.Timestamp('2007-01-01')

    args = parser.parse_args(['report', '--top', '5', '--cutoff', '2008-06-01',
                              '--title', 'Storms'])
    assert args.top == 5
    assert args.cutoff == pd.Timestamp('2008-06-01')
    assert args.title == 'Storms'


def test_parser_rejects_bad_values():
    parser = setup_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(['tables', '--top', '0'])
    with pytest.raises(SystemExit):
        parser.parse_args(['tables', '--cutoff', 'someday'])


def test_tables_command(sample_data_environment, capsys):
    """The tables command writes CSVs and prints the rankings."""
    env = sample_data_environment
    code = main(['tables', '--input', str(env["input_path"]),
                 '--output-dir', str(env["output_dir"]), '--top', '3'])
    assert code == 0

    for filename in TABLE_FILES.values():
        assert (env["output_dir"] / filename).exists()

    harm_top = pd.read_csv(env["output_dir"] / TABLE_FILES['harm_top'])
    assert harm_top['category'].tolist() == ['Blizzard', 'Ice Storm', 'High Wind']

    out = capsys.readouterr().out
    assert "Blizzard" in out
    assert "1 before cutoff" in out


def test_report_command(sample_data_environment):
    """The report command renders the HTML document."""
    env = sample_data_environment
    code = main(['report', '--input', str(env["input_path"]),
                 '--output-dir', str(env["output_dir"])])
    assert code == 0

    report_path = env["output_dir"] / REPORT_FILENAME
    assert report_path.exists()
    assert "Tornado" in report_path.read_text(encoding="utf-8")


def test_missing_input_fails(sample_data_environment):
    """A missing source file exits with status 1."""
    env = sample_data_environment
    code = main(['tables', '--input', str(env["root_dir"] / "nope.csv"),
                 '--output-dir', str(env["output_dir"])])
    assert code == 1
    assert not os.path.exists(env["output_dir"])


if __name__ == "__main__":
    # Run tests manually
    pytest.main(["-xvs", __file__])
