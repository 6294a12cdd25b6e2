"""Common meter constants used across modules."""

# Geometry defaults
width: int = 300
height: int = 150
margin: int = 5
bar_slot: int = 50
border: int = 2
label_area: int = 40
top_padding: int = 25
peak_thickness: int = 2

# Scale: bar values arrive shifted by level_offset (e.g. -23 LUFS -> 77)
default_scale: float = 120.0
level_offset: float = 100.0

# Animation defaults
interval_ms: float = 100.0
steps: int = 10

# Colors
colors: tuple[str, ...] = ("green", "blue")
background: str = "#fff"
peak_color: str = "#FF0000"
text_color: str = "#333"
font_size: int = 12
