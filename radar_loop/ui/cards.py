import streamlit as st


def chart_card(title: str | None, body_renderer):
    if title and title.strip():
        st.markdown(f"<div class=\"chart-label\">{title}</div>", unsafe_allow_html=True)
    st.markdown(
        """
        <div class="card chart-card">
          <div class="body">
        """,
        unsafe_allow_html=True,
    )
    body_renderer()
    st.markdown("</div></div>", unsafe_allow_html=True)


def status_card(title: str, items: list[tuple[str, str]]):
    lines = "".join(
        f"<div class=\"status-line\"><span>{label}</span><span>{value}</span></div>"
        for label, value in items
    )
    st.markdown(
        f"""
        <div class="card status-card">
          <div class="section-title">{title}</div>
          {lines}
        </div>
        """,
        unsafe_allow_html=True,
    )
