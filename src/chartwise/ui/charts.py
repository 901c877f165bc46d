"""Plotly figures from chart points. Presentation only."""
from __future__ import annotations

import plotly.graph_objects as go

from chartwise.models.chart import ChartConfig, ChartData, ChartType

_ACCENT = "#3b82f6"


def build_figure(config: ChartConfig, data: ChartData, dark_mode: bool = False) -> go.Figure | None:
    """Return a figure for valid chart data, or ``None`` when there is nothing to draw."""
    if not data.is_valid or not data.points:
        return None

    points = data.points
    fig = go.Figure()
    if config.chart_type is ChartType.BAR:
        fig.add_trace(go.Bar(
            x=[p.name for p in points],
            y=[p.value for p in points],
            marker_color=_ACCENT,
            customdata=[[p.count, p.min, p.max] for p in points],
            hovertemplate="%{x}<br>value=%{y}<br>rows=%{customdata[0]}<extra></extra>",
        ))
        fig.update_layout(xaxis_title=config.x_column, yaxis_title=f"{config.y_column} ({config.aggregation.value})")
    elif config.chart_type is ChartType.LINE:
        fig.add_trace(go.Scatter(
            x=[p.name for p in points],
            y=[p.value for p in points],
            mode="lines+markers",
            line=dict(color=_ACCENT, width=2),
        ))
        fig.update_layout(xaxis_title=config.x_column, yaxis_title=config.y_column)
    elif config.chart_type is ChartType.PIE:
        fig.add_trace(go.Pie(
            labels=[p.name for p in points],
            values=[p.value for p in points],
            hole=0.3,
        ))
    else:
        fig.add_trace(go.Scatter(
            x=[p.x for p in points],
            y=[p.y for p in points],
            text=[p.name for p in points],
            mode="markers",
            marker=dict(color=_ACCENT, opacity=0.7),
            hovertemplate="%{text}<br>x=%{x}<br>y=%{y}<extra></extra>",
        ))
        fig.update_layout(xaxis_title=config.x_column, yaxis_title=config.y_column)

    fig.update_layout(
        title=config.title or None,
        template="plotly_dark" if dark_mode else "plotly_white",
        margin=dict(l=40, r=20, t=50 if config.title else 20, b=40),
        showlegend=config.chart_type is ChartType.PIE,
    )
    return fig
