import streamlit as st
from streamlit_folium import st_folium

from metwatch import config
from metwatch.aviation import FEED_MODES
from metwatch.map_render import build_map
from metwatch.ui.components.cards import feed_card, feed_message

SLIDER_KEY = "radar_slider"


def focus_station(view: dict, lat, lon):
    if lat is None or lon is None:
        return
    view["center"] = (float(lat), float(lon))
    view["zoom"] = config.STATION_FOCUS_ZOOM


def _on_scrub(radar):
    radar.scrub(int(st.session_state[SLIDER_KEY]))


def render_toolbar(radar):
    radar_col, sat_col, _ = st.columns([1, 1, 4])
    radar_col.button(
        "Radar",
        key="btn_radar",
        type="primary" if radar.visible else "secondary",
        on_click=radar.toggle_radar_visible,
        use_container_width=True,
    )
    sat_col.button(
        "Satellite",
        key="btn_sat",
        type="primary" if radar.satellite_visible else "secondary",
        on_click=radar.toggle_satellite,
        use_container_width=True,
    )


def render_timeline(radar):
    timeline = radar.timeline()
    if not timeline.visible:
        return
    play_col, slider_col, label_col = st.columns([1, 6, 2])
    play_col.button(
        "⏸" if timeline.playing else "▶",
        key="radar_play",
        on_click=radar.toggle_play,
        disabled=not timeline.enabled,
    )
    # a single frame still needs a non-empty slider range
    slider_max = max(timeline.maximum, 1)
    st.session_state[SLIDER_KEY] = min(timeline.position, slider_max)
    slider_col.slider(
        "Radar frame",
        min_value=0,
        max_value=slider_max,
        key=SLIDER_KEY,
        on_change=_on_scrub,
        args=(radar,),
        disabled=not timeline.enabled or timeline.maximum == 0,
        label_visibility="collapsed",
    )
    label_col.markdown(f"<span class='radar-time'>{timeline.label}</span>", unsafe_allow_html=True)


def render_feed(ctx):
    feed = ctx["feed"]
    view = ctx["view"]
    mode = st.radio(
        "Feed",
        list(FEED_MODES),
        index=FEED_MODES.index(st.session_state.get("feed_mode", "METAR")),
        horizontal=True,
        label_visibility="collapsed",
    )
    st.session_state.feed_mode = mode
    st.button("Refresh", key="feed_refresh", on_click=ctx["refresh_feed"])

    if feed.status == "error":
        feed_message("Load Failed", feed.error, error=True)
        return
    if feed.status in ("idle", "loading"):
        feed_message("Contacting NOAA...")
        return

    for entry in feed.entries(mode):
        feed_card(entry)
        st.button(
            f"Show {entry.station_id}",
            key=f"focus_{entry.station_id}",
            on_click=focus_station,
            args=(view, entry.lat, entry.lon),
        )


def render(ctx):
    radar = ctx["radar"]
    view = ctx["view"]
    map_col, feed_col = st.columns([3, 1], gap="large")

    with map_col:
        render_toolbar(radar)
        fmap = build_map(ctx["main_layers"], view["center"], view["zoom"], markers=ctx["feed"].markers())
        st_folium(fmap, key="metwatch_map", height=560, use_container_width=True, returned_objects=[])
        render_timeline(radar)

    with feed_col:
        st.markdown("<div class='section-title'>Observations</div>", unsafe_allow_html=True)
        render_feed(ctx)
