"""
Placeholder views for the forecast page tools.

Nothing is computed yet; the modal echoes the tool and the clicked point.
"""
from dataclasses import dataclass

TOOLS = {
    "skewt": "Skew-T Log-P",
    "meteogram": "Meteogram",
    "xsection": "Cross Section",
}


@dataclass(frozen=True)
class ModalContent:
    tool: str
    title: str
    icon: str | None
    message: str


def format_point(lat: float, lon: float) -> str:
    return f"{lat:.2f}, {lon:.2f}"


def build_modal(tool: str, lat: float, lon: float) -> ModalContent:
    point = format_point(lat, lon)
    if tool == "skewt":
        return ModalContent(tool, f"Sounding @ {point}", "📈", "Generating Skew-T Log-P...")
    if tool == "meteogram":
        return ModalContent(tool, f"Meteogram @ {point}", "📊", "Generating Meteogram...")
    return ModalContent(tool, f"Cross Section @ {point}", None, "Cross Section Data...")


class ForecastModal:
    def __init__(self):
        self.content: ModalContent | None = None
        self.last_point: tuple[float, float] | None = None

    @property
    def is_open(self) -> bool:
        return self.content is not None

    def open(self, tool: str, lat: float, lon: float) -> ModalContent:
        self.last_point = (lat, lon)
        self.content = build_modal(tool, lat, lon)
        return self.content

    def close(self) -> None:
        self.content = None
