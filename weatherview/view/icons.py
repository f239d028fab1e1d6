"""Provider icon identifiers to CDN URLs."""


def icon_url(icon: str, base_url: str, large: bool = False) -> str:
    suffix = "@2x" if large else ""
    return f"{base_url.rstrip('/')}/{icon}{suffix}.png"
