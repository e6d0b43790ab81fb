import streamlit as st
from streamlit_folium import st_folium

from metwatch import config
from metwatch.forecast_tools import TOOLS
from metwatch.map_render import build_map
from metwatch.theme import RESIZE_DELAY_MS


def _click_point(result) -> tuple[float, float] | None:
    clicked = (result or {}).get("last_clicked")
    if not clicked:
        return None
    try:
        return float(clicked["lat"]), float(clicked["lng"])
    except (KeyError, TypeError, ValueError):
        return None


def render_modal(modal):
    content = modal.content
    if content is None:
        return
    with st.container(border=True):
        st.markdown(f"#### {content.title}")
        if content.icon:
            st.markdown(f"<div style='text-align:center; font-size:3rem;'>{content.icon}</div>", unsafe_allow_html=True)
        st.markdown(f"<div style='text-align:center; padding:1rem;'>{content.message}</div>", unsafe_allow_html=True)
        st.button("Close", key="modal_close", on_click=modal.close)


def render(ctx):
    modal = ctx["modal"]
    tool_col, map_col = st.columns([1, 4], gap="large")

    with tool_col:
        st.markdown("<div class='section-title'>Tools</div>", unsafe_allow_html=True)
        tool = st.radio(
            "fcst-tool",
            list(TOOLS),
            format_func=lambda key: TOOLS[key],
            key="fcst_tool",
            label_visibility="collapsed",
        )

    with map_col:
        fmap = build_map(
            ctx["forecast_layers"],
            config.MAP_CENTER,
            config.MAP_ZOOM,
            resize_delay_ms=RESIZE_DELAY_MS if ctx.get("resize_forecast") else None,
        )
        result = st_folium(
            fmap,
            key="forecast_map",
            height=560,
            use_container_width=True,
            returned_objects=["last_clicked"],
        )
        point = _click_point(result)
        if point is not None and point != modal.last_point:
            modal.open(tool, *point)
        render_modal(modal)
