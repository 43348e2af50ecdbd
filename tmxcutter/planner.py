"""
Placement planner - walks the cell grid and resolves every non-empty cell.

Cells are visited in row-major order starting at the top-left. World
positions start at (0, 0); x grows to the right and each new map row moves the
cursor down (negative y).
"""

from dataclasses import dataclass
from typing import Iterator, Mapping, Optional
from PIL import Image
from .atlas_registry import AtlasRegistry
from .constants import DEFAULT_WORLD_SCALE, EMPTY_GID
from .errors import ConfigurationError, UnresolvedIdentifierError
from .models import AtlasDef, MapDocument, Placement, Rectangle
from .region import resolve_region
from .logging_config import get_logger

logger = get_logger('planner')


@dataclass(frozen=True)
class PlannerConfig:
    """
    World placement settings.
    
    Attributes:
        tile_size: Pixel size used for spacing; None uses the map's cell width
        world_scale: World units per pixel
    """
    tile_size: Optional[int] = None
    world_scale: float = DEFAULT_WORLD_SCALE
    
    def spacing(self, document: MapDocument) -> float:
        tile_size = self.tile_size if self.tile_size is not None else document.cell_width
        if tile_size <= 0:
            raise ConfigurationError(f"Tile size must be positive, got {tile_size}")
        return tile_size * self.world_scale


def extract_tile(image: Image.Image, rect: Rectangle) -> Image.Image:
    """Crop the tile described by a bottom-left-origin rectangle."""
    return image.crop(rect.to_box(image.height))


def plan(
    document: MapDocument,
    registry: AtlasRegistry,
    atlas_images: Mapping[str, Image.Image],
    config: Optional[PlannerConfig] = None,
    exporter=None
) -> Iterator[Placement]:
    """
    Lazily resolve every non-empty cell into a Placement.
    
    Each call starts again from the first cell. Every non-empty cell is
    extracted, passed to ``exporter.export(index, image)`` (if given) and
    yielded exactly once, in grid order.
    
    Args:
        document: Parsed map
        registry: Tilesets of the map
        atlas_images: Tileset name -> full atlas image
        config: World placement settings
        exporter: Optional object with ``export(index, image)``
    
    Yields:
        Placement for each non-empty cell
    
    Raises:
        UnresolvedIdentifierError: A gid precedes every tileset
        RegionOutOfBoundsError: A gid lies past the end of its tileset
        MissingTextureAssetError: No image was supplied for a needed tileset
        ConfigurationError: A supplied image does not match its declared size
    """
    config = config or PlannerConfig()
    spacing = config.spacing(document)
    checked = set()
    
    x_pos = 0.0
    y_pos = 0.0
    for index, gid in enumerate(document.gids):
        if gid != EMPTY_GID:
            row, column = divmod(index, document.width)
            try:
                atlas = registry.resolve_atlas(gid)
            except UnresolvedIdentifierError as e:
                raise UnresolvedIdentifierError(gid, row, column, e.first_gid) from e
            
            rect = resolve_region(gid, atlas)
            image = registry.require_image(atlas.name, atlas_images)
            if atlas.first_gid not in checked:
                _check_image_size(atlas, image)
                checked.add(atlas.first_gid)
            
            tile = extract_tile(image, rect)
            if exporter is not None:
                exporter.export(index, tile)
            
            logger.debug(f"Cell ({row}, {column}) gid {gid} -> {atlas.name} {rect.as_tuple()}")
            yield Placement(
                index=index,
                row=row,
                column=column,
                gid=gid,
                position=(x_pos, y_pos),
                atlas_name=atlas.name,
                source=rect,
                image=tile,
            )
        
        x_pos += spacing
        if (index + 1) % document.width == 0:
            x_pos = 0.0
            y_pos -= spacing


def _check_image_size(atlas: AtlasDef, image: Image.Image) -> None:
    if image.size != (atlas.image_width, atlas.image_height):
        raise ConfigurationError(
            f"Texture for tileset '{atlas.name}' is {image.width}x{image.height}, "
            f"map declares {atlas.image_width}x{atlas.image_height}"
        )


class PlacementPlanner:
    """Holds the immutable inputs of a run and produces placement streams."""
    
    def __init__(
        self,
        document: MapDocument,
        atlas_images: Mapping[str, Image.Image],
        config: Optional[PlannerConfig] = None,
        registry: Optional[AtlasRegistry] = None
    ):
        self.document = document
        self.registry = registry if registry is not None else AtlasRegistry(document.atlases)
        self.atlas_images = atlas_images
        self.config = config or PlannerConfig()
    
    def plan(self, exporter=None) -> Iterator[Placement]:
        return plan(self.document, self.registry, self.atlas_images, self.config, exporter)
    
    def __iter__(self) -> Iterator[Placement]:
        return self.plan()
