import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from metwatch.config_store import get_json, set_json
from metwatch.logs import log

CLOCK_PREFS_KEY = "wh_clocks"


@dataclass
class ClockEntry:
    id: str
    label: str
    zone: str
    enabled: bool


DEFAULT_CLOCKS = (
    ("utc", "ZULU (UTC)", "UTC", True),
    ("est", "NYC (EST)", "America/New_York", True),
    ("lon", "LON (GMT)", "Europe/London", False),
    ("tok", "TOK (JST)", "Asia/Tokyo", False),
    ("lax", "LAX (PST)", "America/Los_Angeles", False),
    ("dxb", "DXB (GST)", "Asia/Dubai", False),
)


def format_clock_time(instant: datetime, zone: str) -> str:
    """24-hour HH:MM:SS of ``instant`` in ``zone``. Naive instants are UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(ZoneInfo(zone)).strftime("%H:%M:%S")


class ClockBar:
    def __init__(self, entries=DEFAULT_CLOCKS):
        self.entries = [ClockEntry(*entry) for entry in entries]

    def get(self, clock_id: str) -> ClockEntry | None:
        for entry in self.entries:
            if entry.id == clock_id:
                return entry
        return None

    def enabled(self) -> list[ClockEntry]:
        return [entry for entry in self.entries if entry.enabled]

    def set_enabled(self, clock_id: str, enabled: bool) -> bool:
        entry = self.get(clock_id)
        if entry is None or entry.enabled == bool(enabled):
            return False
        entry.enabled = bool(enabled)
        return True

    def load_prefs(self, saved) -> None:
        if not isinstance(saved, dict):
            return
        for entry in self.entries:
            value = saved.get(entry.id)
            if isinstance(value, bool):
                entry.enabled = value

    def prefs(self) -> dict[str, bool]:
        return {entry.id: entry.enabled for entry in self.entries}

    def readings(self, now: datetime | None = None) -> list[tuple[ClockEntry, str]]:
        now = now or datetime.now(timezone.utc)
        return [(entry, format_clock_time(now, entry.zone)) for entry in self.enabled()]


def load_clock_prefs(conn: sqlite3.Connection, bar: ClockBar) -> ClockBar:
    saved = get_json(conn, CLOCK_PREFS_KEY)
    if saved is not None and not isinstance(saved, dict):
        log(f"config {CLOCK_PREFS_KEY}: expected an object, got {type(saved).__name__}")
    bar.load_prefs(saved)
    return bar


def save_clock_prefs(conn: sqlite3.Connection, bar: ClockBar) -> None:
    set_json(conn, CLOCK_PREFS_KEY, bar.prefs())
