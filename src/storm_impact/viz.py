"""
Visualization utilities for the storm impact report.

Bar charts of the top-N categories are drawn with matplotlib/seaborn and
saved as PNG; the state maps are plotly choropleths embedded in the HTML
report.
"""
import os
import logging
from typing import Optional, Tuple

import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import plotly.express as px
import plotly.graph_objects as go

from storm_impact.ranking import VALUE_COLUMNS

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Standard figure sizes (in inches)
FIG_SIZES = {
    'small': (6, 4),
    'medium': (8, 6),
    'wide': (12, 6),
}

METRIC_LABELS = {
    'harm': 'Fatalities + injuries',
    'damage': 'Property + crop damage (billions USD)',
}

METRIC_PALETTES = {
    'harm': 'Reds_r',
    'damage': 'Blues_r',
}

METRIC_SCALES = {
    'harm': 'Reds',
    'damage': 'Blues',
}


def set_report_style():
    """Set matplotlib parameters for the report figures."""
    sns.set_theme(style='whitegrid')
    plt.rcParams['figure.figsize'] = FIG_SIZES['medium']
    plt.rcParams['figure.dpi'] = 100
    plt.rcParams['savefig.dpi'] = 150
    plt.rcParams['font.size'] = 11
    plt.rcParams['axes.titlesize'] = 13
    plt.rcParams['axes.labelsize'] = 11
    plt.rcParams['grid.linewidth'] = 0.5
    plt.rcParams['grid.alpha'] = 0.3


def plot_top_categories(
    table: pd.DataFrame,
    metric: str,
    title: Optional[str] = None,
    ax: Optional[plt.Axes] = None
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Horizontal bar chart of a ranked category table.

    Parameters
    ----------
    table : pd.DataFrame
        Output of ranking.top_n
    metric : str
        'harm' or 'damage'
    title : str, optional
        Axes title
    ax : plt.Axes, optional
        Axes to draw on; a new figure is created if None

    Returns
    -------
    Tuple[plt.Figure, plt.Axes]
    """
    value_column = VALUE_COLUMNS[metric]
    if ax is None:
        fig, ax = plt.subplots(figsize=FIG_SIZES['wide'])
    else:
        fig = ax.figure

    if table.empty:
        ax.text(0.5, 0.5, "No data", ha='center', va='center', transform=ax.transAxes)
        ax.set_axis_off()
        return fig, ax

    sns.barplot(
        data=table, x=value_column, y='category', hue='category',
        palette=METRIC_PALETTES[metric], legend=False, ax=ax
    )
    fmt = '{:,.0f}' if metric == 'harm' else '{:,.2f}'
    for patch, value in zip(ax.patches, table[value_column]):
        ax.annotate(fmt.format(value),
                    (patch.get_width(), patch.get_y() + patch.get_height() / 2),
                    xytext=(3, 0), textcoords='offset points', va='center', fontsize=9)

    ax.set_xlabel(METRIC_LABELS[metric])
    ax.set_ylabel('')
    ax.set_title(title or f"Top {len(table)} event categories by {metric}")
    fig.tight_layout()
    return fig, ax


def plot_state_choropleth(
    table: pd.DataFrame,
    metric: str,
    title: Optional[str] = None
) -> go.Figure:
    """
    Choropleth of a per-region table on the USA-states map.

    States absent from the table are left unshaded (no data).

    Parameters
    ----------
    table : pd.DataFrame
        Output of state_summary.summarize_states
    metric : str
        'harm' or 'damage'
    title : str, optional
        Figure title

    Returns
    -------
    go.Figure
    """
    value_column = VALUE_COLUMNS[metric]
    data = table.dropna(subset=['state_code'])
    fig = px.choropleth(
        data,
        locations='state_code',
        locationmode='USA-states',
        color=value_column,
        scope='usa',
        hover_name='region',
        hover_data={'state_code': False, 'count': True, value_column: ':,.2f'},
        color_continuous_scale=METRIC_SCALES[metric],
        labels={value_column: METRIC_LABELS[metric], 'count': 'Events'},
    )
    fig.update_layout(
        title_text=title or f"{METRIC_LABELS[metric]} by state",
        margin={'r': 0, 't': 40, 'l': 0, 'b': 0},
    )
    return fig


def save_figure(fig, filename, dpi=150, bbox_inches='tight', **kwargs):
    """
    Save a matplotlib figure, creating the directory if needed.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to save
    filename : str
        Output filename (if no extension, .png is added)
    dpi : int, optional
        Resolution (dots per inch)
    bbox_inches : str, optional
        Bounding box setting
    **kwargs : dict
        Additional parameters to pass to savefig

    Returns
    -------
    str
        Path of the written file
    """
    if not os.path.splitext(filename)[1]:
        filename = f"{filename}.png"

    os.makedirs(os.path.dirname(os.path.abspath(filename)), exist_ok=True)

    fig.savefig(filename, dpi=dpi, bbox_inches=bbox_inches, **kwargs)
    logger.info(f"Figure saved to {filename}")
    return filename
