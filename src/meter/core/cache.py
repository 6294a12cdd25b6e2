"""Process-wide caches for meter rendering.

Colors and fonts are resolved once per process and reused by every meter.
"""

color_cache: dict[str, tuple] = {}
font_cache: dict[str, object] = {}
