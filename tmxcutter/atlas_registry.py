"""
Atlas registry - maps global tile ids to the tileset that owns them.

Tilesets partition the gid space into consecutive ranges: tileset k owns
[first_gid_k, first_gid_k+1), and the last tileset owns everything from its
first_gid upwards.
"""

from bisect import bisect_right
from typing import Dict, Iterable, List, Mapping, Optional, TypeVar
from .constants import EMPTY_GID
from .errors import ConfigurationError, MissingTextureAssetError, UnresolvedIdentifierError
from .models import AtlasDef
from .logging_config import get_logger

logger = get_logger('atlas_registry')

T = TypeVar('T')


class AtlasRegistry:
    """Ordered, read-only collection of tilesets keyed by first gid."""
    
    def __init__(self, atlases: Iterable[AtlasDef]):
        """
        Initialize AtlasRegistry.
        
        Args:
            atlases: Tilesets in document order
        
        Raises:
            ConfigurationError: If the list is empty, first gids are not strictly
                increasing, or a tileset's image is not a whole number of tiles
        """
        self._atlases: List[AtlasDef] = list(atlases)
        if not self._atlases:
            raise ConfigurationError("Map defines no tilesets")
        
        previous: Optional[AtlasDef] = None
        for atlas in self._atlases:
            _validate_atlas(atlas)
            if previous is not None and atlas.first_gid <= previous.first_gid:
                raise ConfigurationError(
                    f"Tileset '{atlas.name}' firstgid {atlas.first_gid} does not follow "
                    f"'{previous.name}' firstgid {previous.first_gid}"
                )
            previous = atlas
        
        self._first_gids = [atlas.first_gid for atlas in self._atlases]
        self._by_name: Dict[str, AtlasDef] = {}
        for atlas in self._atlases:
            if atlas.name in self._by_name:
                logger.warning(f"Duplicate tileset name '{atlas.name}'; textures are shared")
            self._by_name.setdefault(atlas.name, atlas)
        
        logger.debug(f"Registered tilesets: {[(a.name, a.first_gid) for a in self._atlases]}")
    
    def __len__(self) -> int:
        return len(self._atlases)
    
    def __iter__(self):
        return iter(self._atlases)
    
    @property
    def names(self) -> List[str]:
        return list(self._by_name)
    
    def resolve_atlas(self, gid: int) -> AtlasDef:
        """
        Find the tileset whose gid range contains ``gid``.
        
        Args:
            gid: Global tile id, must be >= 1 (callers skip empty cells)
        
        Returns:
            The owning AtlasDef
        
        Raises:
            ValueError: If gid is the empty id or negative
            UnresolvedIdentifierError: If gid precedes the first tileset
        """
        if gid <= EMPTY_GID:
            raise ValueError(f"gid {gid} does not reference a tile")
        
        position = bisect_right(self._first_gids, gid)
        if position == 0:
            raise UnresolvedIdentifierError(gid, first_gid=self._first_gids[0])
        return self._atlases[position - 1]
    
    def require_image(self, name: str, images: Mapping[str, T]) -> T:
        """
        Look up the supplied image for a tileset name.
        
        Raises:
            MissingTextureAssetError: If no image is registered under ``name``
        """
        image = images.get(name)
        if image is None:
            raise MissingTextureAssetError(name, list(images))
        return image


def _validate_atlas(atlas: AtlasDef) -> None:
    if atlas.first_gid < 1:
        raise ConfigurationError(f"Tileset '{atlas.name}' has firstgid {atlas.first_gid} < 1")
    if atlas.tile_width <= 0 or atlas.tile_height <= 0:
        raise ConfigurationError(
            f"Tileset '{atlas.name}' has invalid tile size {atlas.tile_width}x{atlas.tile_height}"
        )
    if atlas.image_width <= 0 or atlas.image_height <= 0:
        raise ConfigurationError(f"Tileset '{atlas.name}' has an empty image")
    if atlas.image_width % atlas.tile_width or atlas.image_height % atlas.tile_height:
        raise ConfigurationError(
            f"Tileset '{atlas.name}' image {atlas.image_width}x{atlas.image_height} is not a "
            f"whole number of {atlas.tile_width}x{atlas.tile_height} tiles"
        )
