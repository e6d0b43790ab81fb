import folium
from branca.element import MacroElement
from jinja2 import Template

from metwatch.aviation import MarkerSpec
from metwatch.layers import MARKERS_LAYER, LayerStack, TileOverlay


class InvalidateSize(MacroElement):
    """Recompute the map size once the surrounding layout has settled."""

    _template = Template(
        """
        {% macro script(this, kwargs) %}
            setTimeout(function() {
                {{ this._parent.get_name() }}.invalidateSize();
            }, {{ this.delay_ms }});
        {% endmacro %}
        """
    )

    def __init__(self, delay_ms: int = 100):
        super().__init__()
        self._name = "InvalidateSize"
        self.delay_ms = int(delay_ms)


def tile_layer(layer: TileOverlay, overlay: bool = True):
    if layer.is_wms:
        return folium.WmsTileLayer(
            url=layer.url,
            layers=layer.wms_layers,
            fmt=layer.wms_format,
            transparent=layer.transparent,
            attr=layer.attribution,
            name=layer.name,
            overlay=overlay,
            control=False,
            opacity=layer.opacity,
        )
    options = {}
    if layer.z_index is not None:
        options["z_index"] = layer.z_index
    if layer.max_zoom is not None:
        options["max_zoom"] = layer.max_zoom
    return folium.TileLayer(
        tiles=layer.url,
        attr=layer.attribution or layer.name,
        name=layer.name,
        overlay=overlay,
        control=False,
        opacity=layer.opacity,
        **options,
    )


def markers_group(markers: list[MarkerSpec]) -> folium.FeatureGroup:
    group = folium.FeatureGroup(name="Stations", control=False)
    for marker in markers:
        folium.CircleMarker(
            location=[marker.lat, marker.lon],
            radius=marker.radius,
            color=marker.color,
            fill=True,
            fill_color=marker.color,
            fill_opacity=marker.fill_opacity,
            tooltip=marker.station_id,
            popup=folium.Popup(marker.popup_html, max_width=340),
        ).add_to(group)
    return group


def build_map(
    layers: LayerStack,
    center: tuple[float, float],
    zoom: int,
    markers: list[MarkerSpec] | None = None,
    resize_delay_ms: int | None = None,
) -> folium.Map:
    fmap = folium.Map(location=list(center), zoom_start=zoom, tiles=None, control_scale=True)
    overlays = {layer.name: layer for layer in layers.overlays}
    for name in layers.draw_order():
        if layers.base is not None and name == layers.base.name:
            tile_layer(layers.base, overlay=False).add_to(fmap)
        elif name == MARKERS_LAYER:
            if markers:
                markers_group(markers).add_to(fmap)
        else:
            tile_layer(overlays[name]).add_to(fmap)
    if resize_delay_ms is not None:
        fmap.add_child(InvalidateSize(resize_delay_ms))
    return fmap
