from dataclasses import dataclass

from metwatch.layers import LayerStack, TileOverlay

PAGES = ("metwatch", "forecast", "data")
THEMES = ("dark", "light")
THEME_KEY = "theme"

DARK_TILES = TileOverlay(
    name="basemap-dark",
    url="https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png",
    attribution="&copy; CARTO",
    max_zoom=19,
)
LIGHT_TILES = TileOverlay(
    name="basemap-light",
    url="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
    attribution="&copy; OSM",
)
BASEMAPS = {"dark": DARK_TILES, "light": LIGHT_TILES}

# Layout needs a moment to settle before the map measures its container.
RESIZE_DELAY_MS = 100


@dataclass
class Navigation:
    page: str = "metwatch"
    settings_open: bool = False

    def switch_page(self, page: str) -> bool:
        """Returns True when the forecast map needs a size recalculation."""
        if page not in PAGES:
            raise ValueError(f"unknown page: {page}")
        self.page = page
        return page == "forecast"

    def toggle_settings(self) -> bool:
        self.settings_open = not self.settings_open
        return self.settings_open

    def close_settings(self) -> None:
        self.settings_open = False


class MapTheme:
    def __init__(self, *maps: LayerStack, theme: str = "dark"):
        self.maps = maps
        self.theme = None
        self.set_theme(theme)

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"unknown theme: {theme}")
        self.theme = theme
        for layer_stack in self.maps:
            layer_stack.set_base(BASEMAPS[theme])
