import altair as alt
import pandas as pd
import streamlit as st
import streamlit.components.v1 as components
from streamlit_autorefresh import st_autorefresh

from radar_loop import settings
from radar_loop.animation import ManualTicker
from radar_loop.frames import format_frame_time
from radar_loop.leaflet import loop_html
from radar_loop.session import RadarSession
from radar_loop.ui.cards import chart_card, status_card

SESSION_KEY = "radar_session"
REFRESH_COUNT_KEY = "radar_refresh_count"
MAP_HEIGHT = 460


def get_session() -> RadarSession:
    session = st.session_state.get(SESSION_KEY)
    if session is None:
        session = RadarSession.from_settings(ticker_factory=ManualTicker)
        session.load()
        st.session_state[SESSION_KEY] = session
        st.session_state[REFRESH_COUNT_KEY] = None
    return session


def drive_feed_refresh(session: RadarSession) -> None:
    """Reload the feed every FEED_REFRESH_MINUTES, keeping playback running."""
    count = st_autorefresh(interval=settings.FEED_REFRESH_MINUTES * 60 * 1000, key="radar_feed_autorefresh")
    last = st.session_state.get(REFRESH_COUNT_KEY)
    st.session_state[REFRESH_COUNT_KEY] = count
    if last is None or count == last:
        return
    was_playing = session.playing
    session.reload()
    if was_playing:
        session.start()


def frame_timeline_chart(df: pd.DataFrame, height: int = 90):
    return (
        alt.Chart(df)
        .mark_circle()
        .encode(
            x=alt.X("time:T", title=None),
            y=alt.Y("kind:N", title=None),
            color=alt.Color("kind:N", legend=None, scale=alt.Scale(range=["#61a5ff", "#f2a85b"])),
            size=alt.condition("datum.current", alt.value(220), alt.value(50)),
            tooltip=[alt.Tooltip("time:T", format="%b %d %H:%M"), "kind:N", "path:N"],
        )
        .properties(height=height)
    )


def render_controls(session: RadarSession) -> None:
    prev_col, play_col, next_col, refresh_col = st.columns(4)
    clicked = False
    if prev_col.button("Previous", key="radar_prev", use_container_width=True):
        session.step_back()
        clicked = True
    if play_col.button(session.controls.play_label, key="radar_play", use_container_width=True):
        session.toggle_play()
        clicked = True
    if next_col.button("Next", key="radar_next", use_container_width=True):
        session.step_forward()
        clicked = True
    if refresh_col.button("Refresh frames", key="radar_refresh", use_container_width=True):
        with st.spinner("Loading radar frames..."):
            session.reload()
        clicked = True
    if clicked:
        st.rerun()


def render():
    session = get_session()
    st.markdown("<div class='section-title'>Radar</div>", unsafe_allow_html=True)

    drive_feed_refresh(session)
    render_controls(session)

    components.html(
        loop_html(
            session.view,
            session.loop_frames(),
            start_index=session.store.current_index,
            playing=session.playing,
            interval_ms=session.animation.interval_ms,
            caption=session.controls.frame_text,
            height=MAP_HEIGHT,
        ),
        height=MAP_HEIGHT + 40,
    )

    frames_df = session.store.to_dataframe(settings.LOCAL_TZ)
    if frames_df.empty:
        return

    def timeline_body():
        st.altair_chart(frame_timeline_chart(frames_df), use_container_width=True)

    chart_card("Frames", timeline_body)

    snapshot = session.loader.snapshot
    frame = session.current_frame()
    past_count = int((frames_df["kind"] == "past").sum())
    status_card(
        "Feed",
        [
            ("Frames", f"{len(frames_df)} ({past_count} past, {len(frames_df) - past_count} nowcast)"),
            ("Generated", format_frame_time(snapshot.generated, settings.LOCAL_TZ) if snapshot and snapshot.generated else "--"),
            ("Current", frame.path if frame else "--"),
            ("Tile host", snapshot.host if snapshot and snapshot.host else "--"),
        ],
    )
    with st.expander("Frame list", expanded=False):
        st.dataframe(frames_df, use_container_width=True, hide_index=True)
