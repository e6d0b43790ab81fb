FONTS = {
    "base": '"Inter", "Segoe UI", sans-serif',
    "mono": '"IBM Plex Mono", "Consolas", monospace',
}

COLORS = {
    "dark": {
        "bg": "#0f1115",
        "surface": "#161920",
        "border": "#232834",
        "text": "#f4f7ff",
        "muted": "#888888",
        "accent": "#7be7d9",
        "bad": "#e74c3c",
    },
    "light": {
        "bg": "#f5f7fa",
        "surface": "#ffffff",
        "border": "#d9dee7",
        "text": "#1b1f27",
        "muted": "#6b7380",
        "accent": "#1f7a70",
        "bad": "#c0392b",
    },
}


def css_vars(theme: str) -> str:
    colors = COLORS.get(theme, COLORS["dark"])
    lines = [f"--mw-{key}: {value};" for key, value in colors.items()]
    lines.append(f"--mw-font: {FONTS['base']};")
    lines.append(f"--mw-mono: {FONTS['mono']};")
    return ":root { " + " ".join(lines) + " }"
