from dataclasses import dataclass
from datetime import datetime, timezone

import requests

from metwatch import config
from metwatch.layers import LayerStack, TileOverlay
from metwatch.logs import log
from metwatch.scheduler import CooperativeScheduler, PeriodicHandle

SATELLITE_LAYER = TileOverlay(
    name="satellite",
    url=config.SATELLITE_WMS_URL,
    attribution="NOAA/NASA",
    opacity=0.5,
    wms_layers=config.SATELLITE_WMS_LAYER,
    wms_format="image/png",
    transparent=True,
)


class FrameIndexError(IndexError):
    pass


@dataclass(frozen=True)
class Timeline:
    visible: bool
    playing: bool
    label: str
    position: int
    maximum: int
    enabled: bool


def radar_overlay(ts: int) -> TileOverlay:
    return TileOverlay(
        name=f"radar-{ts}",
        url=config.RADAR_TILE_TEMPLATE.format(ts=ts),
        attribution="RainViewer",
        opacity=0.7,
        z_index=100,
    )


def frame_label(ts: int) -> str:
    return datetime.fromtimestamp(int(ts), tz=timezone.utc).strftime("%H:%M") + " Z"


def parse_frames(payload) -> list[int]:
    """Pull past frame timestamps out of a weather-maps.json payload."""
    past = payload["radar"]["past"]
    if not isinstance(past, list):
        raise TypeError("radar.past is not a list")
    return [int(frame["time"]) for frame in past]


class RadarEngine:
    def __init__(
        self,
        layers: LayerStack,
        scheduler: CooperativeScheduler,
        session: requests.Session | None = None,
        frame_interval_ms: int = config.RADAR_FRAME_INTERVAL_MS,
    ):
        self._layers = layers
        self._scheduler = scheduler
        self._session = session or requests.Session()
        self._interval_s = frame_interval_ms / 1000.0
        self._frames: list[int] = []
        self._cache: dict[int, TileOverlay] = {}
        self._cursor = 0
        self._playing = False
        self._visible = False
        self._timer: PeriodicHandle | None = None
        self._label = "--:-- Z"
        self._position = 0

    @property
    def frames(self) -> tuple[int, ...]:
        return tuple(self._frames)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def satellite_visible(self) -> bool:
        return self._layers.has_layer(SATELLITE_LAYER)

    @property
    def cached_timestamps(self) -> tuple[int, ...]:
        return tuple(self._cache)

    def attached_radar_layers(self) -> list[TileOverlay]:
        return [layer for layer in self._cache.values() if self._layers.has_layer(layer)]

    def timeline(self) -> Timeline:
        return Timeline(
            visible=self._visible,
            playing=self._playing,
            label=self._label,
            position=self._position,
            maximum=max(len(self._frames) - 1, 0),
            enabled=bool(self._frames),
        )

    def fetch_frames(self) -> bool:
        try:
            resp = self._session.get(
                config.RAINVIEWER_API,
                headers={"User-Agent": config.USER_AGENT},
                timeout=config.HTTP_TIMEOUT,
            )
            resp.raise_for_status()
            frames = parse_frames(resp.json())
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            log(f"Radar fetch failed: {exc}")
            return False
        self._frames = frames
        self._cursor = max(len(frames) - 1, 0)
        self._position = self._cursor
        log(f"Radar: Loaded {len(frames)} frames.")
        return True

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._frames):
            raise FrameIndexError(f"frame {index} outside 0..{len(self._frames) - 1}")

    def show_frame(self, index: int) -> None:
        if not self._visible:
            return
        self._check_index(index)
        ts = self._frames[index]
        layer = self._cache.get(ts)
        if layer is None:
            layer = radar_overlay(ts)
            self._cache[ts] = layer
        for cached in self._cache.values():
            if cached is not layer:
                self._layers.remove_layer(cached)
        self._layers.add_layer(layer)
        self._layers.bring_markers_to_front()
        self._label = frame_label(ts)
        self._position = index

    def _tick(self) -> None:
        if not self._frames:
            return
        self._cursor += 1
        if self._cursor >= len(self._frames):
            self._cursor = 0
        self.show_frame(self._cursor)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def toggle_play(self) -> bool:
        self._playing = not self._playing
        self._stop_timer()
        if self._playing:
            self._timer = self._scheduler.call_every(self._interval_s, self._tick)
        return self._playing

    def scrub(self, index: int) -> None:
        if self._playing:
            self.toggle_play()
        self._check_index(index)
        self._cursor = index
        self.show_frame(index)

    def toggle_radar_visible(self) -> bool:
        self._visible = not self._visible
        if self._visible:
            if not self._frames:
                self.fetch_frames()
            if self._frames:
                self.show_frame(self._cursor)
        else:
            if self._playing:
                self.toggle_play()
            for layer in self._cache.values():
                self._layers.remove_layer(layer)
        return self._visible

    def toggle_satellite(self) -> bool:
        if self._layers.has_layer(SATELLITE_LAYER):
            self._layers.remove_layer(SATELLITE_LAYER)
            return False
        self._layers.add_layer(SATELLITE_LAYER)
        self._layers.bring_to_front(SATELLITE_LAYER)
        self._layers.bring_markers_to_front()
        return True
