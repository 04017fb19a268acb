import streamlit as st

st.title("Delaware Tax Change Map")

st.markdown("""
See how the 2025 reassessment changed property taxes and assessed values
across New Castle, Kent and Sussex counties.
""")

st.markdown("### Layers")

col1, col2 = st.columns(2)

with col1:
    st.markdown("""
    **Tax and Assessment Change**

    Percent change in property tax and assessed value between 2024 and 2025,
    colored relative to the median of the area you are viewing.
    """)

with col2:
    st.markdown("""
    **Tax Burden and Property Class**

    Change in taxes as a share of value, and the mix of residential,
    commercial, industrial, agricultural and exempt parcels.
    """)
