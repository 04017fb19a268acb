"""Sidebar legend widget. Lays out LegendContent; never computes bounds itself."""

import html

import streamlit as st

from core.content import LegendContent


def legend_html(legend: LegendContent) -> str:
    """Build the bucket bar and labeled swatches for a legend."""
    if not legend.entries:
        return ""

    bar = "".join(
        f'<div style="flex:1; height:100%; background:{entry.color};"></div>'
        for entry in legend.entries
    )
    swatches = "".join(
        f"""
        <div style="display:flex; align-items:center; font-size:12px; margin:2px 0;">
            <span style="display:inline-block; width:14px; height:14px; background:{entry.color}; border:1px solid #999; margin-right:6px;"></span>
            {html.escape(entry.label)}
        </div>
        """
        for entry in (*legend.entries, legend.unknown_entry)
    )

    ends = ""
    if legend.low_label or legend.high_label:
        ends = f"""
        <div style="display:flex; justify-content:space-between; font-size:12px; color:#444; margin-bottom:4px;">
            <span>{html.escape(legend.low_label)}</span><span>{html.escape(legend.high_label)}</span>
        </div>
        """

    return f"""
    {ends}
    <div style="display:flex; height:20px; width:100%; border-radius:4px; overflow:hidden; margin-bottom:8px;">{bar}</div>
    {swatches}
    """


def render_legend(legend: LegendContent):
    """Render legend content in the current container."""
    st.markdown("### Legend")
    st.markdown(f"**{legend.title}**")

    markup = legend_html(legend)
    if markup:
        st.markdown(markup, unsafe_allow_html=True)

    st.caption(legend.caption)
    for note in legend.notes:
        st.caption(f"_{note}_")
