"""
Scene manifest writer - records placements so a host scene can rebuild the map.

The manifest lists each placed tile with its world position, source rectangle
and the exported tile image.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
from .constants import SCENE_SUFFIX
from .models import MapDocument, Placement
from .utils import sanitize_filename, save_json
from .logging_config import get_logger

logger = get_logger('scene_writer')


def placement_to_dict(placement: Placement, texture: Optional[str] = None) -> Dict[str, Any]:
    entry = {
        "index": placement.index,
        "row": placement.row,
        "column": placement.column,
        "gid": placement.gid,
        "tileset": placement.atlas_name,
        "position": [placement.position[0], placement.position[1], 0.0],
        "source": list(placement.source.as_tuple()),
    }
    if texture is not None:
        entry["texture"] = texture
    return entry


class SceneManifestWriter:
    """Consumes a placement stream and writes ``<name>.scene.json``."""
    
    def __init__(self, output_dir: Union[str, Path], scene_name: str, exporter=None):
        """
        Initialize SceneManifestWriter.
        
        Args:
            output_dir: Directory for the manifest
            scene_name: Base name of the manifest file
            exporter: TileExporter whose tile paths are referenced, if any
        """
        self.output_dir = Path(output_dir)
        self.scene_name = sanitize_filename(scene_name)
        self.exporter = exporter
    
    @property
    def path(self) -> Path:
        return self.output_dir / f"{self.scene_name}{SCENE_SUFFIX}"
    
    def _texture_for(self, placement: Placement) -> Optional[str]:
        if self.exporter is None:
            return None
        tile_path = self.exporter.tile_path(placement.index)
        try:
            return tile_path.relative_to(self.output_dir).as_posix()
        except ValueError:
            return str(tile_path)
    
    def write(self, document: MapDocument, placements: Iterable[Placement]) -> int:
        """
        Drain ``placements`` and save the manifest.
        
        Returns:
            Number of placements written
        """
        tiles: List[Dict[str, Any]] = [
            placement_to_dict(placement, self._texture_for(placement))
            for placement in placements
        ]
        manifest = {
            "name": self.scene_name,
            "width": document.width,
            "height": document.height,
            "tileWidth": document.cell_width,
            "tileHeight": document.cell_height,
            "tilesets": [
                {"name": atlas.name, "firstGid": atlas.first_gid, "image": atlas.image_source}
                for atlas in document.atlases
            ],
            "tiles": tiles,
        }
        save_json(manifest, str(self.path))
        logger.info(f"Wrote scene manifest with {len(tiles)} tiles to {self.path}")
        return len(tiles)
