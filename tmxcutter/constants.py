"""
Constants for the Tiled map format and the cutter's defaults.

Keeps the magic numbers used by the reader, planner and exporters in one place.
"""

# Cell identifiers
EMPTY_GID = 0  # gid 0 marks an empty cell

# World placement
DEFAULT_WORLD_SCALE = 0.01  # world units per pixel (tiles spaced at tile_size / 100)

# Map document
SUPPORTED_ORIENTATION = "orthogonal"
SUPPORTED_ENCODINGS = (None, "csv")  # None = one <tile gid="..."/> per cell

# Output layout
TILES_DIRNAME = "tiles"
TILE_IMAGE_FORMAT = "PNG"
TILE_IMAGE_SUFFIX = ".png"
SCENE_SUFFIX = ".scene.json"

# Asset lookup
ASSET_EXTENSIONS = (".png", ".gif", ".bmp", ".jpg", ".jpeg", ".tga")
