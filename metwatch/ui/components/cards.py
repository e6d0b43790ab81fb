import html

import streamlit as st

from metwatch.aviation import FeedEntry


def clock_bar_html(readings) -> str:
    items = "".join(
        f"""
        <div class="clock-item">
            <span class="clock-label">{html.escape(entry.label)}</span>
            <span class="clock-time" id="time-{entry.id}">{text}</span>
        </div>
        """
        for entry, text in readings
    )
    return f"<div class='clock-bar'>{items}</div>"


def feed_card(entry: FeedEntry):
    text_html = html.escape(entry.text or '').replace("\n", "<br>").replace("  ", "&nbsp;&nbsp;")
    st.markdown(
        f"""
        <div class="obs-card {entry.css_class}">
            <div class="obs-header">
                <span class="station-id">{html.escape(str(entry.station_id or ''))}</span>
                <span class="flight-cat">{html.escape(entry.category or 'N/A')}</span>
            </div>
            <div class="data-label">{entry.label}</div>
            <div class="raw-text">{text_html}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def feed_message(text: str, detail: str | None = None, error: bool = False):
    detail_html = f"<br><small>{html.escape(detail)}</small>" if detail else ""
    css_class = "feed-message error" if error else "feed-message"
    st.markdown(f"<div class='{css_class}'>{html.escape(text)}{detail_html}</div>", unsafe_allow_html=True)


def status_card(title: str, items: list[tuple[str, str]]):
    lines = "".join(
        f"<div class=\"status-line\"><span>{html.escape(label)}</span><span>{html.escape(value)}</span></div>"
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
