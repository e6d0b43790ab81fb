import sqlite3
from datetime import datetime, timezone

import requests
import streamlit as st
from streamlit_autorefresh import st_autorefresh

from metwatch import config
from metwatch.aviation import AviationFeed
from metwatch.clocks import ClockBar, load_clock_prefs, save_clock_prefs
from metwatch.config_store import connect as config_connect
from metwatch.config_store import get_config, set_config
from metwatch.forecast_tools import ForecastModal
from metwatch.layers import LayerStack
from metwatch.logs import log
from metwatch.pages import data as page_data
from metwatch.pages import forecast as page_forecast
from metwatch.pages import metwatch as page_metwatch
from metwatch.radar import RadarEngine
from metwatch.scheduler import CooperativeScheduler
from metwatch.theme import PAGES, THEME_KEY, THEMES, MapTheme, Navigation
from metwatch.ui.apply_styles import apply_styles
from metwatch.ui.components.cards import clock_bar_html
from metwatch.ui.shell import render_header_strip, render_left_rail

st.set_page_config(page_title="MetWatch", layout="wide")


@st.cache_resource
def get_conn() -> sqlite3.Connection:
    return config_connect(config.DB_PATH)


def load_theme() -> str:
    try:
        saved = get_config(get_conn(), THEME_KEY)
    except sqlite3.Error as exc:
        log(f"theme load failed: {exc}")
        return "dark"
    return saved if saved in THEMES else "dark"


def load_clocks() -> ClockBar:
    bar = ClockBar()
    try:
        load_clock_prefs(get_conn(), bar)
    except sqlite3.Error as exc:
        log(f"clock prefs load failed: {exc}")
    return bar


# ------------------------
# Session state
# ------------------------
if "radar" not in st.session_state:
    session = requests.Session()
    st.session_state.scheduler = CooperativeScheduler()
    st.session_state.main_layers = LayerStack()
    st.session_state.forecast_layers = LayerStack()
    st.session_state.map_theme = MapTheme(
        st.session_state.main_layers,
        st.session_state.forecast_layers,
        theme=load_theme(),
    )
    st.session_state.radar = RadarEngine(
        st.session_state.main_layers,
        st.session_state.scheduler,
        session=session,
    )
    st.session_state.feed = AviationFeed(session=session)
    st.session_state.clocks = load_clocks()
    st.session_state.nav = Navigation()
    st.session_state.modal = ForecastModal()
    st.session_state.view = {"center": config.MAP_CENTER, "zoom": config.MAP_ZOOM}

    query_page = st.query_params.get("page")
    if query_page in PAGES:
        st.session_state.nav.switch_page(query_page)

radar = st.session_state.radar
feed = st.session_state.feed
clocks = st.session_state.clocks
nav = st.session_state.nav
map_theme = st.session_state.map_theme


def refresh_feed():
    with st.spinner("Contacting NOAA..."):
        feed.refresh()


def set_theme(theme: str):
    map_theme.set_theme(theme)
    nav.close_settings()
    try:
        set_config(get_conn(), THEME_KEY, theme)
    except sqlite3.Error as exc:
        log(f"theme save failed: {exc}")


def on_clock_toggle(clock_id: str):
    if not clocks.set_enabled(clock_id, st.session_state[f"clock_{clock_id}"]):
        return
    try:
        save_clock_prefs(get_conn(), clocks)
    except sqlite3.Error as exc:
        log(f"clock prefs save failed: {exc}")


def render_settings():
    st.markdown("<div class='section-title'>Theme</div>", unsafe_allow_html=True)
    light_col, dark_col = st.columns(2)
    light_col.button("Light", key="btn_light", on_click=set_theme, args=("light",), use_container_width=True)
    dark_col.button("Dark", key="btn_dark", on_click=set_theme, args=("dark",), use_container_width=True)
    st.markdown("<div class='section-title'>Clocks</div>", unsafe_allow_html=True)
    for entry in clocks.entries:
        st.checkbox(
            entry.label,
            value=entry.enabled,
            key=f"clock_{entry.id}",
            on_change=on_clock_toggle,
            args=(entry.id,),
        )


# ------------------------
# Timers (radar animation, clock tick)
# ------------------------
st.session_state.scheduler.run_pending()
st_autorefresh(
    interval=config.RADAR_FRAME_INTERVAL_MS if radar.playing else config.CLOCK_REFRESH_MS,
    key="metwatch_autorefresh",
)

apply_styles(map_theme.theme)
render_header_strip(clock_bar_html(clocks.readings(datetime.now(timezone.utc))))
resize_forecast = render_left_rail(nav, render_settings)

if feed.status == "idle":
    refresh_feed()

ctx = {
    "radar": radar,
    "feed": feed,
    "view": st.session_state.view,
    "modal": st.session_state.modal,
    "main_layers": st.session_state.main_layers,
    "forecast_layers": st.session_state.forecast_layers,
    "refresh_feed": refresh_feed,
    "resize_forecast": resize_forecast,
}

if nav.page == "metwatch":
    page_metwatch.render(ctx)
elif nav.page == "forecast":
    page_forecast.render(ctx)
else:
    page_data.render(ctx)
