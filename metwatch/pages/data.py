import altair as alt
import streamlit as st

from metwatch.aviation import category_counts, stations_frame
from metwatch.ui.components.cards import status_card


def category_chart(counts):
    return (
        alt.Chart(counts)
        .mark_bar()
        .encode(
            x=alt.X("Category:N", sort=["VFR", "MVFR", "IFR", "LIFR", "UNK"], title=None),
            y=alt.Y("Stations:Q", title="Stations"),
            color=alt.Color("Color:N", scale=None, legend=None),
            tooltip=["Category", "Stations"],
        )
        .properties(height=220)
    )


def render(ctx):
    feed = ctx["feed"]
    radar = ctx["radar"]
    st.markdown("<div class='section-title'>Data</div>", unsafe_allow_html=True)
    section = st.radio(
        "Data sections",
        ["Stations", "Categories", "Status"],
        horizontal=True,
        label_visibility="collapsed",
    )

    if section == "Stations":
        if not feed.stations:
            st.info("No station data available.")
            return
        st.dataframe(stations_frame(feed.stations), use_container_width=True, hide_index=True)
        return

    if section == "Categories":
        if not feed.stations:
            st.info("No station data available.")
            return
        st.altair_chart(category_chart(category_counts(feed.stations)), use_container_width=True)
        return

    timeline = radar.timeline()
    status_card(
        "Status",
        [
            ("Aviation feed", feed.status if not feed.error else f"{feed.status}: {feed.error}"),
            ("Stations", str(len(feed.stations))),
            ("Radar frames", str(len(radar.frames))),
            ("Radar cached", str(len(radar.cached_timestamps))),
            ("Radar frame", timeline.label if timeline.visible else "--"),
        ],
    )
