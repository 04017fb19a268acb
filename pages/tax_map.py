import asyncio
import logging

import altair as alt
import pandas as pd
import streamlit as st

from components.choropleth_map import render_choropleth_map
from components.glossary_dialog import render_glossary_button
from components.legend import render_legend
from core.config import (
    ALL_COUNTIES,
    COUNTIES,
    COUNTY_MAP_ZOOM,
    MAP_CENTER,
    MAP_ZOOM,
    county_label,
)
from core.errors import DataUnavailable, LoadSuperseded
from core.layers import LAYER_SPECS, AnalysisLayer
from core.pipeline import build_choropleth, renderer_styles, to_geojson
from core.schemes import FixedSchemeSource
from core.store import RegionStore
from utils.db import DuckDBCountySource, get_data_settings, get_duckdb_connection
from utils.formatters import format_signed_percentage

logger = logging.getLogger(__name__)

SCOPE_OPTIONS = [ALL_COUNTIES] + COUNTIES
LAYER_OPTIONS = list(AnalysisLayer)


@st.cache_resource
def get_fixed_schemes() -> FixedSchemeSource:
    return FixedSchemeSource()


def get_region_store() -> RegionStore:
    """Region store for this session (one current-result slot per user)."""
    if "region_store" not in st.session_state:
        settings = get_data_settings()
        source = DuckDBCountySource(
            get_duckdb_connection(),
            base_path=settings["base_path"],
            file_pattern=settings["file_pattern"],
        )
        st.session_state.region_store = RegionStore(source)
    return st.session_state.region_store


def build_outlier_dataframe(view) -> pd.DataFrame:
    """Top outliers as a table: rank, area, county, change."""
    return pd.DataFrame({
        "Rank": [r.rank for r in view.ranked],
        "Area": [r.record.name for r in view.ranked],
        "County": [county_label(r.record.county) for r in view.ranked],
        "change": [r.value for r in view.ranked],
        "Change": [format_signed_percentage(r.value) for r in view.ranked],
        "color": [view.styles[r.record.geoid].fill_color for r in view.ranked],
    })


def create_outlier_chart(df: pd.DataFrame, metric_label: str) -> alt.Chart:
    """Horizontal bar chart of the top outliers, colored like the map."""
    return alt.Chart(df).mark_bar().encode(
        x=alt.X('change:Q', title=f'{metric_label} (%)'),
        y=alt.Y('Area:N', sort=alt.EncodingSortField(field='Rank', order='ascending'), title=None),
        color=alt.Color('color:N', scale=None),
        tooltip=[
            alt.Tooltip('Rank:O', title='Rank'),
            alt.Tooltip('Area:N', title='Area'),
            alt.Tooltip('County:N', title='County'),
            alt.Tooltip('change:Q', title=metric_label, format='+.1f')
        ]
    ).properties(
        width='container',
        height=300
    ).configure_axis(
        labelFontSize=11,
        titleFontSize=12
    )


# Sidebar
with st.sidebar:
    st.title("Tax Change Map")

    scope = st.selectbox(
        "Select Area",
        options=SCOPE_OPTIONS,
        format_func=lambda x: "All Counties" if x == ALL_COUNTIES else county_label(x),
        index=SCOPE_OPTIONS.index(st.session_state.get("selected_scope", "sussex")),
        key="scope_selector",
    )
    st.session_state.selected_scope = scope

    layer = st.selectbox(
        "Select Layer",
        options=LAYER_OPTIONS,
        format_func=lambda x: LAYER_SPECS[x].label,
        key="layer_selector",
    )

store = get_region_store()

try:
    records = asyncio.run(store.load(scope, layer))
except LoadSuperseded:
    # A newer selection is loading; its run renders the page
    st.stop()
except DataUnavailable as e:
    logger.error("Load failed for scope=%s layer=%s: %s", scope, layer.value, e)
    st.error(f"Could not load data for {county_label(scope)}. {e}")
    if st.button("Retry"):
        st.rerun()
    st.stop()

if not records:
    st.warning("No data available for this selection.")
    st.stop()

view = build_choropleth(records, layer, scope, fixed_source=get_fixed_schemes())

with st.sidebar:
    render_legend(view.legend)

    if view.value_range is not None:
        st.caption(
            f"Range: {format_signed_percentage(view.value_range.min)} to "
            f"{format_signed_percentage(view.value_range.max)}, "
            f"median {format_signed_percentage(view.value_range.median)}"
        )
    st.caption(f"Showing {len(records):,} areas")

    st.markdown("---")
    render_glossary_button(active_term=LAYER_SPECS[layer].label)

center, zoom = COUNTY_MAP_ZOOM.get(scope, (MAP_CENTER, MAP_ZOOM))
component_value = render_choropleth_map(
    geojson_data=to_geojson(view, records),
    center=center,
    zoom=zoom,
    strokes=renderer_styles(),
)

selected_geoid = component_value.get("selected_region") if component_value else None
if selected_geoid in view.tooltips:
    tooltip = view.tooltips[selected_geoid]
    st.subheader(tooltip.title)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric(tooltip.metric_label, tooltip.value)
    col2.metric(tooltip.prior_label, tooltip.prior_value)
    col3.metric(tooltip.current_label, tooltip.current_value)
    col4.metric("Parcels", tooltip.sample_size)
    if tooltip.scope_median_note:
        st.caption(tooltip.scope_median_note)
    for label, share in tooltip.class_shares:
        st.markdown(f"**{label}:** {share}")

if view.ranked:
    st.markdown(f"### Largest {LAYER_SPECS[layer].metric_label.lower()}s")
    outliers = build_outlier_dataframe(view)
    chart_col, table_col = st.columns([3, 2])
    with chart_col:
        st.altair_chart(create_outlier_chart(outliers, LAYER_SPECS[layer].metric_label), use_container_width=True)
    with table_col:
        st.dataframe(outliers[["Rank", "Area", "County", "Change"]], hide_index=True, width='stretch')
