"""Glossary dialog explaining map layers, colors and geography."""

import streamlit as st

from components.glossary_definitions import GLOSSARY_TERMS


def render_glossary_button(active_term: str | None = None):
    """
    Render a button that opens the glossary.

    Args:
        active_term: Term to show first and expanded (e.g. the selected layer label)
    """
    if st.button("📚 Glossary", help="How the map is computed", use_container_width=True):
        show_glossary_dialog(active_term)


def _render_term(term_name: str, term_data: dict):
    st.markdown(f"**{term_name}**")
    if "definition" in term_data:
        st.markdown(term_data["definition"])
    if "formula" in term_data:
        st.markdown(term_data["formula"])
    if "interpretation" in term_data:
        st.markdown(term_data["interpretation"])
    if "note" in term_data:
        st.caption(f"_Note: {term_data['note']}_")


@st.dialog("Glossary", width="large")
def show_glossary_dialog(active_term: str | None = None):
    for category_data in GLOSSARY_TERMS.values():
        terms = category_data.get("terms", {})
        expanded = active_term in terms or active_term is None

        with st.expander(f"{category_data['icon']} {category_data['label']}", expanded=expanded):
            # Active term first
            ordered = sorted(terms.items(), key=lambda item: item[0] != active_term)
            for term_name, term_data in ordered:
                _render_term(term_name, term_data)
                st.markdown("")
