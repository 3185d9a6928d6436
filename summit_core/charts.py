from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def horizontal_bar(
    df: pd.DataFrame,
    *,
    value: str,
    label: str,
    value_title: str,
    label_title: str,
    tooltip: List[str],
    domain: Optional[List[float]] = None,
    sort: Optional[str] = "-x",
) -> Dict[str, Any]:
    scale = alt.Scale(domain=domain) if domain else alt.Undefined
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X(f"{value}:Q", title=value_title, scale=scale),
            y=alt.Y(f"{label}:N", title=label_title, sort=sort),
            tooltip=tooltip,
        )
    )
    return to_vega_spec(chart)
