import streamlit as st

COLORS = {
    "bg": "#0f1115",
    "surface": "#161920",
    "border": "#232834",
    "text": "#f4f7ff",
    "text2": "#9aa4b5",
    "accent": "#7be7d9",
}

CSS = f"""
.section-title {{
  text-transform: uppercase;
  letter-spacing: 0.08em;
  font-size: 0.75rem;
  color: {COLORS["text2"]};
  margin: 12px 0 6px;
}}
.card {{
  background: {COLORS["surface"]};
  border: 1px solid {COLORS["border"]};
  border-radius: 16px;
  padding: 12px 16px;
  margin-bottom: 12px;
}}
.chart-label {{
  font-size: 0.8rem;
  color: {COLORS["text2"]};
}}
.status-line {{
  display: flex;
  justify-content: space-between;
  gap: 12px;
  font-size: 0.85rem;
  color: {COLORS["text"]};
}}
"""


def apply_styles():
    st.markdown(f"<style>{CSS}</style>", unsafe_allow_html=True)
