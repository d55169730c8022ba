# src/storm_impact/report.py
"""
Module: report.py
Responsibilities:
- Export the finished tables as CSV
- Draw the two bar charts and the two state maps
- Assemble a single HTML document: data processing summary, results,
  the comparison table and the canonical category list
"""
import os
import html
import logging
from datetime import datetime
from typing import Dict, Optional, Sequence

import matplotlib.pyplot as plt
import pandas as pd

from storm_impact import __version__
from storm_impact.pipeline import ReportTables
from storm_impact.reference import EVENT_CATEGORIES
from storm_impact.viz import (
    plot_state_choropleth, plot_top_categories, save_figure, set_report_style
)

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = 'outputs/report'
DEFAULT_TITLE = 'Most Harmful Weather Events in the United States'
REPORT_FILENAME = 'storm_impact_report.html'

TABLE_FILES = {
    'harm_top': 'top_categories_harm.csv',
    'damage_top': 'top_categories_damage.csv',
    'harm_by_region': 'harm_by_state.csv',
    'damage_by_region': 'damage_by_state.csv',
    'comparison': 'category_comparison.csv',
    'category_totals': 'category_totals.csv',
}

_STYLE = """
body { font-family: Arial, Helvetica, sans-serif; max-width: 960px; margin: 2em auto; color: #222; }
h1 { font-size: 1.8em; } h2 { border-bottom: 1px solid #ccc; padding-bottom: 0.2em; }
table.dataframe { border-collapse: collapse; font-size: 0.9em; }
table.dataframe th, table.dataframe td { border: 1px solid #ddd; padding: 3px 8px; }
table.dataframe td { text-align: right; }
img { max-width: 100%; }
.caption { color: #555; font-size: 0.9em; }
"""


def export_tables(tables: ReportTables, output_dir: str) -> Dict[str, str]:
    """
    Write every report table to CSV.

    Parameters
    ----------
    tables : ReportTables
        Output of pipeline.build_report_tables
    output_dir : str
        Directory for the CSV files

    Returns
    -------
    Dict[str, str]
        Table name -> written path
    """
    os.makedirs(output_dir, exist_ok=True)
    paths = {}
    for name, filename in TABLE_FILES.items():
        table = getattr(tables, name)
        path = os.path.join(output_dir, filename)
        table.to_csv(path, index=(name == 'category_totals'))
        paths[name] = path
    logger.info(f"Exported {len(paths)} tables to {output_dir}")
    return paths


def _table_html(table: pd.DataFrame, float_format: str = '{:,.2f}') -> str:
    return table.to_html(
        index=False,
        border=0,
        float_format=float_format.format,
        na_rep='',
    )


def _audit_html(tables: ReportTables) -> str:
    audit = tables.audit
    rows = [
        ('Rows in source', audit.total_rows),
        ('Unparseable begin dates (excluded)', audit.unparseable_dates),
        (f"Events before {tables.cutoff.date()} (excluded)", audit.before_cutoff),
        ('Events analysed', audit.retained),
        ('Events with unmapped state codes (excluded from maps)', audit.unmapped_states),
        ('Distinct event categories', len(tables.category_totals)),
    ]
    body = ''.join(f"<tr><th>{html.escape(label)}</th><td>{value:,}</td></tr>"
                   for label, value in rows)
    return f'<table class="dataframe">{body}</table>'


def _category_list_html(categories: Sequence[str]) -> str:
    items = ''.join(f"<li>{html.escape(c)}</li>" for c in categories)
    return f'<ol style="columns: 3">{items}</ol>'


def render_report(
    tables: ReportTables,
    output_dir: str = DEFAULT_OUTPUT_DIR,
    title: str = DEFAULT_TITLE,
    source_name: Optional[str] = None,
    categories: Sequence[str] = EVENT_CATEGORIES
) -> str:
    """
    Render the HTML report with charts, maps and tables.

    Parameters
    ----------
    tables : ReportTables
        Output of pipeline.build_report_tables
    output_dir : str
        Directory for the report and its figures
    title : str
        Document title
    source_name : str, optional
        Name of the input file, shown in the processing section
    categories : Sequence[str]
        Canonical category list printed in the appendix

    Returns
    -------
    str
        Path of the written HTML file
    """
    os.makedirs(output_dir, exist_ok=True)
    set_report_style()

    figures = {}
    for metric, table in (('harm', tables.harm_top), ('damage', tables.damage_top)):
        fig, _ = plot_top_categories(table, metric)
        figures[metric] = os.path.basename(
            save_figure(fig, os.path.join(output_dir, f"top_categories_{metric}.png"))
        )
        plt.close(fig)

    maps = {}
    for metric, table in (('harm', tables.harm_by_region), ('damage', tables.damage_by_region)):
        if table.empty:
            maps[metric] = '<p class="caption">No regional data for the selected categories.</p>'
            continue
        fig = plot_state_choropleth(table, metric)
        maps[metric] = fig.to_html(full_html=False, include_plotlyjs='cdn')

    top = tables.top
    window = f"{tables.cutoff.date()} onwards"
    sections = [
        f"<h1>{html.escape(title)}</h1>",
        f'<p class="caption">Generated {datetime.now():%Y-%m-%d %H:%M} '
        f"with storm-impact {__version__}; events from {window}.</p>",

        "<h2>Synopsis</h2>",
        f"<p>Across all event categories, <b>{html.escape(_leader(tables.harm_top))}</b> "
        f"caused the most fatalities and injuries and "
        f"<b>{html.escape(_leader(tables.damage_top))}</b> caused the most property and "
        f"crop damage. The maps show where the top {top} categories of each kind struck.</p>",

        "<h2>Data Processing</h2>",
        f"<p>Source: {html.escape(source_name or 'NOAA Storm Events database')}. "
        "Event types are title-cased but not reconciled with the canonical list. "
        "Damage exponents h, k, m and b scale amounts by 10<sup>2</sup>, 10<sup>3</sup>, "
        "10<sup>6</sup> and 10<sup>9</sup>; any other character is treated as a misplaced "
        "trailing digit and scales by 10.</p>",
        _audit_html(tables),

        "<h2>Results</h2>",
        "<h3>Population health</h3>",
        f'<img src="{figures["harm"]}" alt="Top categories by harm">',
        maps['harm'],
        "<h3>Economic consequences</h3>",
        f'<img src="{figures["damage"]}" alt="Top categories by damage">',
        maps['damage'],

        "<h3>All categories</h3>",
        '<p class="caption">Harm and damage rankings are sorted independently; '
        'damage in billions USD.</p>',
        _table_html(tables.comparison),

        "<h2>Appendix: canonical event categories</h2>",
        _category_list_html(categories),
    ]

    document = (
        "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
        f"<title>{html.escape(title)}</title>\n<style>{_STYLE}</style>\n</head>\n"
        "<body>\n" + "\n".join(sections) + "\n</body>\n</html>\n"
    )

    path = os.path.join(output_dir, REPORT_FILENAME)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(document)
    logger.info(f"Report written to {path}")
    return path


def _leader(table: pd.DataFrame) -> str:
    return str(table['category'].iloc[0]) if not table.empty else 'no category'
