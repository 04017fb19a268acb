import streamlit as st

from utils.logging import configure_logging

st.set_page_config(layout="wide", page_title="Delaware Tax Change Map")

configure_logging()

# Define pages
pages = [
    st.Page("pages/home.py", title="Home", icon="🏠", default=True),
    st.Page("pages/tax_map.py", title="Tax Change Map", icon="🗺️"),
]

# Top bar navigation
pg = st.navigation(pages, position="top")
pg.run()
