"""Chart components for CRM insights.

This module provides reusable chart components built on Plotly, plus the
pandas aggregations that feed them.
"""

from typing import Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from frontend.config.settings import config, CONTACT_TYPES, LEAD_STATUSES
from frontend.models.schemas import Contact, Lead


def count_by(values: Sequence[Optional[str]], categories: Sequence[str], column: str) -> pd.DataFrame:
    """Count occurrences per category, keeping empty categories.

    Values outside the known categories (including None) are counted
    under 'other'.

    Args:
        values: One category value per record
        categories: Known categories, in display order
        column: Name of the category column

    Returns:
        DataFrame with columns [column, 'count']
    """
    counts = pd.Series(
        [v if v in categories else 'other' for v in values], dtype='object'
    ).value_counts()
    order = list(categories)
    if counts.get('other', 0):
        order.append('other')
    return pd.DataFrame({
        column: order,
        'count': [int(counts.get(c, 0)) for c in order],
    })


def contacts_by_type(contacts: Sequence[Contact]) -> pd.DataFrame:
    return count_by([c.type for c in contacts], CONTACT_TYPES, 'type')


def leads_by_status(leads: Sequence[Lead]) -> pd.DataFrame:
    return count_by([lead.status for lead in leads], LEAD_STATUSES, 'status')


def amount_by_status(leads: Sequence[Lead]) -> pd.DataFrame:
    """Total lead amount per status (missing amounts count as 0)."""
    df = pd.DataFrame({
        'status': [lead.status for lead in leads],
        'amount': [lead.amount or 0.0 for lead in leads],
    })
    totals = df.groupby('status')['amount'].sum() if not df.empty else pd.Series(dtype=float)
    return pd.DataFrame({
        'status': LEAD_STATUSES,
        'amount': [float(totals.get(s, 0.0)) for s in LEAD_STATUSES],
    })


def create_bar_chart(
    df: pd.DataFrame,
    x_col: str,
    y_col: str,
    title: Optional[str] = None,
    color_col: Optional[str] = None,
    height: Optional[int] = None
) -> go.Figure:
    """Create a bar chart.

    Args:
        df: DataFrame with data
        x_col: Category column
        y_col: Value column
        title: Chart title
        color_col: Optional column for color grouping
        height: Chart height in pixels

    Returns:
        Plotly Figure
    """
    fig = px.bar(
        df,
        x=x_col,
        y=y_col,
        color=color_col,
        title=title or f"{y_col} by {x_col}",
        template="plotly_white",
        height=height or config.DEFAULT_CHART_HEIGHT,
    )

    fig.update_layout(
        xaxis_title=x_col.replace('_', ' ').capitalize(),
        yaxis_title=y_col.replace('_', ' ').capitalize(),
        showlegend=color_col is not None,
    )

    return fig
