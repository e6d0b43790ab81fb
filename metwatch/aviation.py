import html
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from urllib.parse import quote, urlencode

import pandas as pd
import requests

from metwatch import config
from metwatch.logs import log

TAF_MISSING = "TAF NOT AVAILABLE"
UNKNOWN_CATEGORY = "UNK"
FEED_MODES = ("METAR", "TAF")

CATEGORY_COLORS = {
    "VFR": "#2ecc71",
    "MVFR": "#3498db",
    "IFR": "#e74c3c",
    "LIFR": "#9b59b6",
}
DEFAULT_COLOR = "#7f8c8d"

_TAF_GROUP_RE = re.compile(r"\s(FM|BECMG|TEMPO|PROB)")


class DataUnavailableError(Exception):
    pass


@dataclass(frozen=True)
class StationObservation:
    station_id: str
    name: str
    lat: float | None
    lon: float | None
    category: str
    metar: str
    taf: str


@dataclass(frozen=True)
class FeedEntry:
    station_id: str
    category: str
    css_class: str
    label: str
    text: str
    lat: float | None
    lon: float | None


@dataclass(frozen=True)
class MarkerSpec:
    station_id: str
    lat: float
    lon: float
    color: str
    popup_html: str
    radius: int = 8
    fill_opacity: float = 0.8


def build_feed_url(product: str, stations: str = config.STATION_LIST, proxy: str = config.PROXY_URL) -> str:
    query = urlencode({"ids": stations, "format": "json"}, safe=",")
    target = f"{config.AVWX_BASE}/{product}?{query}"
    if proxy:
        return proxy + quote(target, safe="")
    return target


def category_color(category: str | None) -> str:
    return CATEGORY_COLORS.get(category or "", DEFAULT_COLOR)


def format_taf(text: str | None, line_break: str = "\n", indent: str = "  ") -> str:
    """Start each FM/BECMG/TEMPO/PROB change group on its own indented line."""
    if not text:
        return ""
    return _TAF_GROUP_RE.sub(lambda m: f"{line_break}{indent}{m.group(1)}", text)


def join_observations(metars: list[dict], tafs: list[dict]) -> tuple[StationObservation, ...]:
    """
    Pair every METAR record with the first TAF record for the same station.

    Stations without a TAF get the TAF_MISSING sentinel. Later TAF records for
    an already matched station are ignored.
    """
    first_taf: dict[str, str] = {}
    for taf in tafs:
        station_id = _station_id(taf)
        if station_id is not None and station_id not in first_taf:
            first_taf[station_id] = _text(taf.get("rawTAF"))

    stations = []
    skipped = 0
    for metar in metars:
        station_id = _station_id(metar)
        if station_id is None:
            skipped += 1
            continue
        stations.append(
            StationObservation(
                station_id=station_id,
                name=_text(metar.get("name")) or station_id,
                lat=_coord(metar.get("lat")),
                lon=_coord(metar.get("lon")),
                category=_text(metar.get("fltCat")) or UNKNOWN_CATEGORY,
                metar=_text(metar.get("rawOb")),
                taf=first_taf.get(station_id) or TAF_MISSING,
            )
        )
    if skipped:
        log(f"Skipped {skipped} METAR records without a station id.")
    return tuple(stations)


def _station_id(record) -> str | None:
    if not isinstance(record, dict):
        return None
    station_id = record.get("icaoId")
    if not isinstance(station_id, str) or not station_id.strip():
        return None
    return station_id.strip()


def _text(value) -> str:
    return "" if value is None else str(value)


def _coord(value) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _request(session: requests.Session, url: str) -> requests.Response:
    return session.get(url, headers={"User-Agent": config.USER_AGENT}, timeout=config.HTTP_TIMEOUT)


def _decode(resp) -> list[dict]:
    if not resp.ok:
        raise DataUnavailableError("Network response failed")
    try:
        payload = resp.json()
    except ValueError as exc:
        raise DataUnavailableError(f"Malformed response: {exc}") from exc
    if not isinstance(payload, list):
        raise DataUnavailableError("Malformed response: expected a list of records")
    if not all(isinstance(record, dict) for record in payload):
        raise DataUnavailableError("Malformed response: records must be objects")
    return payload


def fetch_observations(session: requests.Session | None = None, stations: str = config.STATION_LIST) -> tuple[StationObservation, ...]:
    session = session or requests.Session()
    with ThreadPoolExecutor(max_workers=2) as executor:
        metar_future = executor.submit(_request, session, build_feed_url("metar", stations))
        taf_future = executor.submit(_request, session, build_feed_url("taf", stations))
        try:
            metar_resp = metar_future.result()
            taf_resp = taf_future.result()
        except requests.RequestException as exc:
            raise DataUnavailableError(str(exc)) from exc

    metars = _decode(metar_resp)
    tafs = _decode(taf_resp)
    log(f"Received {len(metars)} METARs.")
    return join_observations(metars, tafs)


def sidebar_entries(stations, mode: str = "METAR") -> list[FeedEntry]:
    if mode not in FEED_MODES:
        raise ValueError(f"unknown feed mode: {mode}")
    entries = []
    for station in stations:
        if mode == "METAR":
            text, label = station.metar, "OBS"
        else:
            text, label = format_taf(station.taf), "TAF"
        entries.append(
            FeedEntry(
                station_id=station.station_id,
                category=station.category,
                css_class=station.category.lower(),
                label=label,
                text=text,
                lat=station.lat,
                lon=station.lon,
            )
        )
    return entries


def popup_html(station: StationObservation) -> str:
    color = category_color(station.category)
    taf_html = format_taf(html.escape(_text(station.taf)), line_break="<br>", indent="&nbsp;&nbsp;")
    return f"""
        <div style="font-family: 'Inter', sans-serif; min-width: 280px;">
            <div style="display:flex; justify-content:space-between; margin-bottom:8px;">
                <strong>{html.escape(_text(station.station_id))}</strong>
                <span style="background:{color}; color:#000; padding:2px 6px; font-size:0.7rem; border-radius:2px;">{html.escape(_text(station.category))}</span>
            </div>
            <div style="font-size:0.7rem; color:#888; margin-bottom:2px;">METAR</div>
            <div style="font-family: monospace; margin-bottom:10px; background:rgba(0,0,0,0.05); padding:4px; line-height:1.3;">{html.escape(_text(station.metar))}</div>
            <div style="font-size:0.7rem; color:#888; margin-bottom:2px;">TAF</div>
            <div style="font-family: monospace; background:rgba(0,0,0,0.05); padding:4px; line-height:1.3;">{taf_html}</div>
        </div>
    """


def map_markers(stations) -> list[MarkerSpec]:
    markers = []
    for station in stations:
        if station.lat is None or station.lon is None:
            continue
        markers.append(
            MarkerSpec(
                station_id=station.station_id,
                lat=float(station.lat),
                lon=float(station.lon),
                color=category_color(station.category),
                popup_html=popup_html(station),
            )
        )
    return markers


def stations_frame(stations) -> pd.DataFrame:
    rows = [
        {
            "Station": s.station_id,
            "Name": s.name,
            "Category": s.category,
            "Lat": s.lat,
            "Lon": s.lon,
            "METAR": s.metar,
            "TAF": s.taf,
        }
        for s in stations
    ]
    return pd.DataFrame(rows, columns=["Station", "Name", "Category", "Lat", "Lon", "METAR", "TAF"])


def category_counts(stations) -> pd.DataFrame:
    df = stations_frame(stations)
    counts = df.groupby("Category").size().rename("Stations").reset_index()
    counts["Color"] = counts["Category"].map(category_color)
    return counts


class AviationFeed:
    """Holds the current station collection and the outcome of the last fetch."""

    def __init__(self, session: requests.Session | None = None, stations: str = config.STATION_LIST):
        self._session = session or requests.Session()
        self._station_list = stations
        self.stations: tuple[StationObservation, ...] = ()
        self.status = "idle"
        self.error: str | None = None

    def refresh(self) -> bool:
        self.status = "loading"
        try:
            stations = fetch_observations(self._session, self._station_list)
        except DataUnavailableError as exc:
            log(f"Fetch Error: {exc}")
            self.status = "error"
            self.error = str(exc)
            return False
        self.stations = stations
        self.status = "ok"
        self.error = None
        return True

    def entries(self, mode: str = "METAR") -> list[FeedEntry]:
        return sidebar_entries(self.stations, mode)

    def markers(self) -> list[MarkerSpec]:
        return map_markers(self.stations)

    def find(self, station_id: str) -> StationObservation | None:
        for station in self.stations:
            if station.station_id == station_id:
                return station
        return None
