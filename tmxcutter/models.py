"""
Immutable records describing a parsed map and the placements derived from it.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple
from PIL import Image
from .constants import EMPTY_GID
from .errors import MalformedMapError


@dataclass(frozen=True)
class Rectangle:
    """
    A tile's source rectangle inside an atlas image.
    
    Coordinates use a bottom-left origin: ``y`` counts pixels up from the
    bottom edge of the atlas image.
    """
    x: int
    y: int
    width: int
    height: int
    
    @property
    def right(self) -> int:
        return self.x + self.width
    
    @property
    def top(self) -> int:
        return self.y + self.height
    
    def to_box(self, image_height: int) -> Tuple[int, int, int, int]:
        """
        Convert to a Pillow crop box (left, upper, right, lower).
        
        Pillow images have a top-left origin, so the vertical axis is flipped
        against the full image height.
        """
        upper = image_height - self.top
        return (self.x, upper, self.right, upper + self.height)
    
    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class AtlasDef:
    """One tileset: a grid of equally sized tiles in a single image."""
    first_gid: int
    name: str
    tile_width: int
    tile_height: int
    image_width: int
    image_height: int
    image_source: str = ""
    
    @property
    def columns(self) -> int:
        return self.image_width // self.tile_width
    
    @property
    def rows(self) -> int:
        return self.image_height // self.tile_height
    
    @property
    def tile_count(self) -> int:
        return self.columns * self.rows


@dataclass(frozen=True)
class MapDocument:
    """
    A single-layer orthogonal map.
    
    ``gids`` is the flat, row-major cell grid; its length always equals
    ``width * height``. Row 0 is the top row of the map.
    """
    width: int
    height: int
    cell_width: int
    cell_height: int
    atlases: Tuple[AtlasDef, ...]
    gids: Tuple[int, ...]
    
    def __post_init__(self):
        for name in ("width", "height", "cell_width", "cell_height"):
            if getattr(self, name) <= 0:
                raise MalformedMapError(f"Map {name} must be positive, got {getattr(self, name)}")
        if len(self.gids) != self.width * self.height:
            raise MalformedMapError(
                f"Map has {len(self.gids)} cells, expected {self.width * self.height}"
            )
        negative = [gid for gid in self.gids if gid < 0]
        if negative:
            raise MalformedMapError(f"Cell gid {negative[0]} is negative")
    
    @property
    def cell_count(self) -> int:
        return len(self.gids)
    
    def cell_coordinate(self, index: int) -> Tuple[int, int]:
        """Return (row, column) for a flat cell index."""
        if index < 0 or index >= self.cell_count:
            raise IndexError(f"Cell index {index} out of range 0..{self.cell_count - 1}")
        return divmod(index, self.width)
    
    def gid_at(self, row: int, column: int) -> int:
        if not (0 <= row < self.height and 0 <= column < self.width):
            raise IndexError(f"Cell ({row}, {column}) outside {self.width}x{self.height} map")
        return self.gids[row * self.width + column]
    
    def rows(self) -> Iterator[Tuple[int, ...]]:
        """Yield the grid one row at a time, top row first."""
        for start in range(0, self.cell_count, self.width):
            yield self.gids[start:start + self.width]
    
    def used_gids(self) -> Tuple[int, ...]:
        """Sorted distinct non-empty gids."""
        return tuple(sorted({gid for gid in self.gids if gid != EMPTY_GID}))


@dataclass(frozen=True)
class Placement:
    """A resolved non-empty cell, ready to be rendered or exported."""
    index: int
    row: int
    column: int
    gid: int
    position: Tuple[float, float]
    atlas_name: str
    source: Rectangle
    image: Optional[Image.Image] = field(default=None, compare=False, repr=False)
