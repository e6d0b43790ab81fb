"""
In-memory model of the layers attached to one map.

Engines attach and detach overlays here; the dashboard turns the stack into a
folium map when it draws. Later entries render above earlier ones.
"""
from dataclasses import dataclass, field

MARKERS_LAYER = "markers"


@dataclass(frozen=True)
class TileOverlay:
    name: str
    url: str
    attribution: str = ""
    opacity: float = 1.0
    z_index: int | None = None
    max_zoom: int | None = None
    wms_layers: str | None = None
    wms_format: str = "image/png"
    transparent: bool = True

    @property
    def is_wms(self) -> bool:
        return self.wms_layers is not None


@dataclass
class LayerStack:
    base: TileOverlay | None = None
    overlays: list[TileOverlay] = field(default_factory=list)
    markers_on_top: bool = True

    def has_layer(self, layer: TileOverlay) -> bool:
        return layer in self.overlays

    def add_layer(self, layer: TileOverlay) -> None:
        if layer not in self.overlays:
            self.overlays.append(layer)
        self.markers_on_top = False

    def remove_layer(self, layer: TileOverlay) -> None:
        if layer in self.overlays:
            self.overlays.remove(layer)

    def bring_to_front(self, layer: TileOverlay) -> None:
        if layer in self.overlays:
            self.overlays.remove(layer)
            self.overlays.append(layer)
            self.markers_on_top = False

    def bring_markers_to_front(self) -> None:
        self.markers_on_top = True

    def set_base(self, layer: TileOverlay) -> None:
        self.base = layer

    def draw_order(self) -> list[str]:
        names = [self.base.name] if self.base else []
        names.extend(layer.name for layer in self.overlays)
        if self.markers_on_top:
            names.append(MARKERS_LAYER)
        else:
            names.insert(1 if self.base else 0, MARKERS_LAYER)
        return names
