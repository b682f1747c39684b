import streamlit as st

from radar_loop.pages import radar as page_radar
from radar_loop.ui.apply_styles import apply_styles

st.set_page_config(
    page_title="Radar Loop",
    layout="wide"
)

apply_styles()

page_radar.render()
