import streamlit as st

from metwatch.theme import PAGES

PAGE_LABELS = {
    "metwatch": "MetWatch",
    "forecast": "Forecast",
    "data": "Data",
}


def render_left_rail(nav, render_settings):
    with st.sidebar:
        selection = st.radio(
            "Navigation",
            list(PAGES),
            index=PAGES.index(nav.page),
            format_func=lambda opt: PAGE_LABELS.get(opt, opt.title()),
            label_visibility="collapsed",
        )
        resize_needed = False
        if selection != nav.page:
            resize_needed = nav.switch_page(selection)

        if st.button("Settings", key="settings_btn", use_container_width=True):
            nav.toggle_settings()
        if nav.settings_open:
            render_settings()
        return resize_needed


def render_header_strip(content_html: str):
    st.markdown(f"<div class='header-strip'>{content_html}</div>", unsafe_allow_html=True)
