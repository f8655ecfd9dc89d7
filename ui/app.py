"""Streamlit UI for the Arcaea chart catalog."""

import asyncio
import json
from html import escape

import streamlit as st
import streamlit.components.v1 as components

from src.catalog.models import (
    CATEGORY_LABELS,
    Song,
    category_abbreviation,
    category_color,
    resolve_image_url,
)
from src.catalog.pipeline import (
    DEFAULT_CONSTANT_MAX,
    DEFAULT_CONSTANT_MIN,
    PAGE_SIZE_OPTIONS,
    FilterCriteria,
    SortKey,
    index_songs,
    run_pipeline,
)
from src.errors import SongStoreError
from src.store.client import SongStore
from src.store.loader import load_session_catalog
from src.utils.config import settings
from src.utils.logging import setup_logging
from src.video.lookup import ChartVideoLookup, ProxyVideoSearch
from src.video.player import IFrameCommandAdapter, VideoOverlay, embed_url

LOAD_ERROR_MESSAGE = "Failed to load songs. Please try again later."
PLAYER_HEIGHT = 480


def load_songs(refresh: bool = False) -> list[Song]:
    """Load the catalog through the summary cache (raises SongStoreError)."""
    store = SongStore.from_settings()
    return asyncio.run(
        load_session_catalog(store, refresh=refresh, ttl=settings.summary_cache_ttl_seconds)
    )


def init_state() -> None:
    """Create per-session objects on the first run."""
    state = st.session_state
    if "songs" not in state:
        state.songs = None
        state.load_error = None
        try:
            state.songs = index_songs(load_songs())
        except SongStoreError as e:
            state.load_error = str(e)
    if "criteria" not in state:
        state.criteria = FilterCriteria()
    if "lookup" not in state:
        state.lookup = ChartVideoLookup(ProxyVideoSearch(settings.api_url, timeout=settings.http_timeout))
        state.adapter = IFrameCommandAdapter()
        state.overlay = VideoOverlay(state.adapter)


def read_filters(current: FilterCriteria) -> FilterCriteria:
    """Render the sidebar and fold widget values into the criteria."""
    with st.sidebar:
        st.header("Filters")
        query = st.text_input(
            "Search",
            key="query",
            placeholder="Search by title, artist, or constant",
        )
        constant_min, constant_max = st.slider(
            "Constant",
            min_value=DEFAULT_CONSTANT_MIN,
            max_value=DEFAULT_CONSTANT_MAX,
            value=(DEFAULT_CONSTANT_MIN, DEFAULT_CONSTANT_MAX),
            step=0.1,
            key="constant_range",
        )
        categories = st.multiselect(
            "Difficulty",
            CATEGORY_LABELS,
            key="categories",
            format_func=category_abbreviation,
        )

        st.header("Sort")
        sort_key = st.selectbox(
            "Sort by",
            list(SortKey),
            index=list(SortKey).index(SortKey.CONSTANT),
            format_func=lambda key: key.value.title(),
            key="sort_key",
        )
        direction = st.radio("Order", ["Descending", "Ascending"], key="direction", horizontal=True)
        page_size = st.selectbox(
            "Show",
            PAGE_SIZE_OPTIONS,
            index=PAGE_SIZE_OPTIONS.index(25),
            key="page_size",
        )

    return current.update(
        query=query,
        constant_min=constant_min,
        constant_max=constant_max,
        categories=categories,
        sort_key=sort_key,
        descending=direction == "Descending",
        page_size=page_size,
    )


def open_chart_video(song: Song) -> None:
    """Look up chart-view videos for a song and open the first one."""
    state = st.session_state
    video_id = state.lookup.first_video_id(song.title, song.difficulty)
    if video_id is None:
        st.toast(f"No chart video found for {song.title}")
        return
    state.overlay.open(video_id)


def render_player_html(overlay: VideoOverlay, messages: list[str]) -> str:
    """Iframe plus a script posting queued player commands once it loads."""
    src = embed_url(overlay.video_id, autoplay=overlay.playing, start=int(overlay.position))
    shield = ""
    if overlay.locked:
        shield = (
            '<div title="Video is locked" style="position:absolute;inset:0;'
            'background:transparent;cursor:not-allowed"></div>'
        )
    return f"""
<div style="position:relative;width:100%;height:{PLAYER_HEIGHT - 20}px;background:#000">
  <iframe id="chart-player" src="{escape(src)}" title="Chart View Video"
    allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"
    allowfullscreen
    style="width:100%;height:100%;border:0;pointer-events:{'none' if overlay.locked else 'auto'}"></iframe>
  {shield}
</div>
<script>
  const messages = {json.dumps(messages)};
  const frame = document.getElementById("chart-player");
  frame.addEventListener("load", () => {{
    for (const message of messages) {{
      frame.contentWindow.postMessage(message, "*");
    }}
  }});
</script>
"""


def render_overlay() -> None:
    """Video preview with playback controls."""
    overlay: VideoOverlay = st.session_state.overlay
    if not overlay.is_open:
        return

    with st.container(border=True):
        status = "🔒 Video is locked" if overlay.locked else "🔓 Video is unlocked"
        st.caption(f"{status} · speed {overlay.rate:g}x · {int(overlay.position)}s")

        cols = st.columns(7)
        if cols[0].button("⏸ Pause" if overlay.playing else "▶ Play", key="player_toggle"):
            overlay.toggle_play()
        if cols[1].button("⏪ 10s", key="player_back"):
            overlay.seek_by(-10)
        if cols[2].button("10s ⏩", key="player_forward"):
            overlay.seek_by(10)
        if cols[3].button("Slower", key="player_slower"):
            overlay.step_rate(-1)
        if cols[4].button("Faster", key="player_faster"):
            overlay.step_rate(1)
        if cols[5].button("🔓 Unlock" if overlay.locked else "🔒 Lock", key="player_lock"):
            overlay.toggle_lock()
        if cols[6].button("✕ Close", key="player_close", type="primary"):
            overlay.close()
            st.session_state.adapter.drain()
            st.rerun()

        messages = st.session_state.adapter.drain()
        if overlay.rate != 1.0:
            messages.append(json.dumps({"event": "command", "func": "setPlaybackRate", "args": [overlay.rate]}))
        components.html(render_player_html(overlay, messages), height=PLAYER_HEIGHT)


def render_song(song: Song, index: int) -> None:
    with st.container(border=True):
        col1, col2, col3 = st.columns([1, 4, 2])

        with col1:
            image = resolve_image_url(song.image_url, settings.supabase_url)
            if image:
                st.image(image, width=80)

        with col2:
            st.subheader(song.title)
            st.write(song.artist)
            color = category_color(song.difficulty)
            st.markdown(
                f"{escape(song.version)} • "
                f"<span style='color:{color};font-weight:600'>{escape(song.difficulty)}</span>",
                unsafe_allow_html=True,
            )

        with col3:
            st.write(f"**Constant:** {song.constant}")
            st.write(f"**Level:** {song.level}")
            if st.button("🎬 Chart view", key=f"video-{song.render_key(index)}"):
                open_chart_video(song)
                st.rerun()


def render_pagination(page) -> None:
    state = st.session_state
    st.write(f"Showing {page.first_index} to {page.last_index} of {page.total_count} songs")

    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        if st.button("Previous", disabled=page.page <= 1):
            state.criteria = state.criteria.go_to_page(page.page - 1)
            st.rerun()
    with col2:
        st.write(f"Page {page.page} of {page.total_pages}")
    with col3:
        if st.button("Next", disabled=page.page >= page.total_pages):
            state.criteria = state.criteria.go_to_page(page.page + 1)
            st.rerun()


def main():
    """Main Streamlit app."""
    st.set_page_config(
        page_title="Arcaea Charts",
        page_icon="🎵",
        layout="wide",
    )
    setup_logging(settings.log_level)

    st.title("🎵 Arcaea Charts")
    st.markdown("Browse Arcaea songs by titles, artists, and difficulty levels.")

    with st.spinner("Loading songs..."):
        init_state()

    state = st.session_state
    if state.load_error is not None:
        st.error(LOAD_ERROR_MESSAGE)
        st.stop()

    state.criteria = read_filters(state.criteria)

    render_overlay()

    page = run_pipeline(state.songs, state.criteria)
    if page.total_count == 0:
        st.info("No songs match your search.")
        return

    offset = (page.page - 1) * page.page_size
    for i, song in enumerate(page.songs):
        render_song(song, offset + i)

    render_pagination(page)


if __name__ == "__main__":
    main()
