"""Reference cities shown as global highlights before any search."""

DEFAULT_HIGHLIGHT_CITIES: list[str] = [
    "New York",
    "London",
    "Tokyo",
    "Sydney",
    "Rio de Janeiro",
    "Dubai",
]
