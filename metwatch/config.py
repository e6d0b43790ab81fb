import os

DB_PATH = os.getenv("METWATCH_DB_PATH", "data/metwatch.db")

STATION_LIST = os.getenv(
    "METWATCH_STATIONS",
    "KJFK,EGLL,KORD,KMCO,KSEA,KATL,KLAX,EGKK,EDDF,RJTT,OMDB,KDEN,KDFW,KSFO",
)

# Optional relay prefix, e.g. "https://api.allorigins.win/raw?url="
PROXY_URL = os.getenv("METWATCH_PROXY_URL", "")

AVWX_BASE = "https://aviationweather.gov/api/data"
RAINVIEWER_API = "https://api.rainviewer.com/public/weather-maps.json"
RADAR_TILE_TEMPLATE = "https://tile.rainviewer.com/{ts}/256/{{z}}/{{x}}/{{y}}/6/1_1.png"
SATELLITE_WMS_URL = "https://mesonet.agron.iastate.edu/cgi-bin/wms/goes/east04.cgi?"
SATELLITE_WMS_LAYER = "band13"

HTTP_TIMEOUT = float(os.getenv("METWATCH_HTTP_TIMEOUT", "10"))
USER_AGENT = os.getenv("METWATCH_USER_AGENT", "MetWatch/1.0 (contact: unknown)")

RADAR_FRAME_INTERVAL_MS = int(os.getenv("RADAR_FRAME_INTERVAL_MS", "500"))
CLOCK_REFRESH_MS = int(os.getenv("CLOCK_REFRESH_MS", "1000"))

MAP_CENTER = (38.0, -95.0)
MAP_ZOOM = 4
STATION_FOCUS_ZOOM = 10
