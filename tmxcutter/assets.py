"""
Atlas images in, tile images out.

AssetProvider supplies the full atlas image for each tileset name; TileExporter
writes one PNG per placed tile.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union
from PIL import Image
from .constants import ASSET_EXTENSIONS, TILE_IMAGE_FORMAT, TILE_IMAGE_SUFFIX, TILES_DIRNAME
from .errors import ConfigurationError
from .models import AtlasDef
from .logging_config import get_logger

logger = get_logger('assets')


def load_image(image_path: Union[str, Path]) -> Image.Image:
    """
    Load an image fully into memory as RGBA.
    
    The file is closed before returning.
    """
    image_path = Path(image_path)
    try:
        with Image.open(image_path) as img:
            img.load()
            return img.convert('RGBA')
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read texture {image_path}: {e}") from e


class AssetProvider(Mapping):
    """Read-only mapping of tileset name -> atlas image."""
    
    def __init__(self, images: Optional[Dict[str, Image.Image]] = None):
        self._images: Dict[str, Image.Image] = dict(images or {})
    
    def __getitem__(self, name: str) -> Image.Image:
        return self._images[name]
    
    def __iter__(self) -> Iterator[str]:
        return iter(self._images)
    
    def __len__(self) -> int:
        return len(self._images)
    
    @classmethod
    def from_files(cls, associations: Dict[str, Union[str, Path]]) -> 'AssetProvider':
        """Load images from explicit name -> path associations."""
        images = {}
        for name, path in associations.items():
            path = Path(path)
            if not path.exists():
                raise ConfigurationError(f"Texture for tileset '{name}' not found: {path}")
            images[name] = load_image(path)
            logger.debug(f"Loaded texture '{name}' from {path}")
        return cls(images)
    
    @classmethod
    def discover(
        cls,
        atlases: Iterable[AtlasDef],
        asset_dir: Optional[Union[str, Path]] = None,
        map_dir: Optional[Union[str, Path]] = None,
        associations: Optional[Dict[str, Union[str, Path]]] = None
    ) -> 'AssetProvider':
        """
        Find a texture for every tileset.
        
        Lookup order per tileset:
        1. An explicit association for the tileset name
        2. ``<asset_dir>/<name><ext>`` for each known image extension
        3. ``<asset_dir>/<basename of the tileset image source>``
        4. The tileset image source resolved against ``map_dir``
        
        Tilesets without a texture are logged and left out; the planner
        raises MissingTextureAssetError if a cell actually needs one.
        
        Args:
            atlases: Tilesets from the map
            asset_dir: Folder holding the textures
            map_dir: Folder of the map file, for relative image sources
            associations: Explicit tileset name -> image path overrides
        
        Returns:
            AssetProvider with every texture that could be found
        """
        associations = dict(associations or {})
        paths: Dict[str, Path] = {}
        missing: List[str] = []
        
        for atlas in atlases:
            if atlas.name in paths:
                continue
            if atlas.name in associations:
                paths[atlas.name] = Path(associations.pop(atlas.name))
                continue
            found = _find_texture(atlas, asset_dir, map_dir)
            if found is None:
                missing.append(atlas.name)
            else:
                paths[atlas.name] = found
        
        for name in associations:
            logger.warning(f"Texture association '{name}' matches no tileset in the map")
        for name in missing:
            logger.warning(f"No texture found for tileset '{name}'")
        
        return cls.from_files(paths)


def _find_texture(
    atlas: AtlasDef,
    asset_dir: Optional[Union[str, Path]],
    map_dir: Optional[Union[str, Path]]
) -> Optional[Path]:
    candidates: List[Path] = []
    source = Path(atlas.image_source) if atlas.image_source else None
    
    if asset_dir is not None:
        asset_dir = Path(asset_dir)
        candidates.extend(asset_dir / f"{atlas.name}{ext}" for ext in ASSET_EXTENSIONS)
        if source is not None:
            candidates.append(asset_dir / source.name)
    if map_dir is not None and source is not None:
        candidates.append(Path(map_dir) / source)
    
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


class TileExporter:
    """Writes one PNG per exported tile, named by flat cell index."""
    
    def __init__(self, output_dir: Union[str, Path]):
        """
        Initialize TileExporter.
        
        Args:
            output_dir: Root output directory; tiles go to ``<output_dir>/tiles``
        """
        self.output_dir = Path(output_dir)
        self.tiles_dir = self.output_dir / TILES_DIRNAME
        self.exported: int = 0
    
    def tile_path(self, index: int) -> Path:
        return self.tiles_dir / f"{index}{TILE_IMAGE_SUFFIX}"
    
    def export(self, index: int, image: Image.Image) -> Path:
        """Save ``image`` as the tile for cell ``index``."""
        self.tiles_dir.mkdir(parents=True, exist_ok=True)
        path = self.tile_path(index)
        image.save(path, TILE_IMAGE_FORMAT)
        self.exported += 1
        logger.debug(f"Exported tile {index} -> {path}")
        return path
