"""
Region resolver - converts a global tile id into its source rectangle.

Tiled numbers tiles left to right, top to bottom, starting at the top-left of
the atlas. Rows here are counted from the *bottom* of the image instead, so the
resulting rectangle is in bottom-left-origin pixel space. Keep the row formula
as it is: changing it moves every extracted tile to a different row.
"""

from typing import Tuple
from .errors import RegionOutOfBoundsError
from .models import AtlasDef, Rectangle


def local_tile_id(gid: int, atlas: AtlasDef) -> int:
    """1-based index of ``gid`` within ``atlas``."""
    return gid - (atlas.first_gid - 1)


def tile_index(gid: int, atlas: AtlasDef) -> Tuple[int, int]:
    """
    Return the 1-based (column, row) of a tile, rows counted from the bottom.
    
    Args:
        gid: Global tile id owned by ``atlas``
        atlas: The owning tileset
    
    Returns:
        Tuple of (column, row)
    """
    local_id = local_tile_id(gid, atlas)
    columns = atlas.image_width // atlas.tile_width
    rows = atlas.image_height // atlas.tile_height
    
    column = local_id % columns
    if column != 0:
        row = rows - ((local_id + (columns - column)) // columns) + 1
    else:
        column = columns
        row = rows - (local_id // columns) + 1
    return column, row


def resolve_region(gid: int, atlas: AtlasDef) -> Rectangle:
    """
    Compute the pixel rectangle of ``gid`` inside ``atlas``.
    
    Args:
        gid: Global tile id owned by ``atlas``
        atlas: The owning tileset
    
    Returns:
        Rectangle (x, y, tile_width, tile_height) with a bottom-left origin
    
    Raises:
        RegionOutOfBoundsError: If the id precedes the tileset or the rectangle
            does not fit inside the atlas image
    """
    local_id = local_tile_id(gid, atlas)
    if local_id <= 0:
        raise RegionOutOfBoundsError(atlas.name, gid, None)
    
    column, row = tile_index(gid, atlas)
    rect = Rectangle(
        x=(column - 1) * atlas.tile_width,
        y=(row - 1) * atlas.tile_height,
        width=atlas.tile_width,
        height=atlas.tile_height,
    )
    
    if (rect.x < 0 or rect.y < 0
            or rect.right > atlas.image_width
            or rect.top > atlas.image_height):
        raise RegionOutOfBoundsError(atlas.name, gid, rect)
    return rect
