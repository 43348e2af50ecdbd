"""
Map cutter - runs the whole pipeline for one map.

parse -> tileset registry -> placement plan -> tile export -> scene manifest
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union
from .assets import AssetProvider, TileExporter
from .atlas_registry import AtlasRegistry
from .constants import DEFAULT_WORLD_SCALE
from .map_reader import read_map
from .models import MapDocument
from .planner import PlacementPlanner, PlannerConfig
from .scene_writer import SceneManifestWriter
from .logging_config import get_logger

logger = get_logger('converter')


@dataclass
class CutterOptions:
    """Settings for a single run."""
    map_path: Path
    output_dir: Path
    asset_dir: Optional[Path] = None
    tile_size: Optional[int] = None
    world_scale: float = DEFAULT_WORLD_SCALE
    textures: Dict[str, Path] = field(default_factory=dict)
    export_tiles: bool = True
    write_scene: bool = True


@dataclass
class CutResult:
    """Summary of a finished run."""
    cells: int
    placed: int
    exported: int
    scene_path: Optional[Path] = None
    
    @property
    def empty(self) -> int:
        return self.cells - self.placed


class MapCutter:
    """Cuts a Tiled map into per-cell tiles and a placement manifest."""
    
    def __init__(self, options: CutterOptions):
        self.options = options
        self.output_dir = Path(options.output_dir)
    
    def load_document(self) -> MapDocument:
        return read_map(self.options.map_path)
    
    def load_assets(self, document: MapDocument) -> AssetProvider:
        return AssetProvider.discover(
            document.atlases,
            asset_dir=self.options.asset_dir,
            map_dir=Path(self.options.map_path).parent,
            associations=self.options.textures,
        )
    
    def run(self) -> CutResult:
        """
        Run the pipeline to completion.
        
        Returns:
            CutResult with tile counts and the manifest path
        
        Raises:
            FileNotFoundError: If the map file does not exist
            TmxCutterError: On the first invalid map, tileset or texture
        """
        options = self.options
        document = self.load_document()
        used = document.used_gids()
        if used:
            logger.info(f"{len(used)} distinct tile ids in use (gids {used[0]}..{used[-1]})")
        else:
            logger.warning("Map has no non-empty cells")
        registry = AtlasRegistry(document.atlases)
        images = self.load_assets(document)
        
        planner = PlacementPlanner(
            document,
            images,
            PlannerConfig(tile_size=options.tile_size, world_scale=options.world_scale),
            registry=registry,
        )
        exporter = TileExporter(self.output_dir) if options.export_tiles else None
        placements = planner.plan(exporter)
        
        scene_path = None
        if options.write_scene:
            writer = SceneManifestWriter(self.output_dir, Path(options.map_path).stem, exporter)
            placed = writer.write(document, placements)
            scene_path = writer.path
        else:
            placed = sum(1 for _ in placements)
        
        result = CutResult(
            cells=document.cell_count,
            placed=placed,
            exported=exporter.exported if exporter is not None else 0,
            scene_path=scene_path,
        )
        logger.info(
            f"Placed {result.placed} of {result.cells} cells "
            f"({result.empty} empty, {result.exported} tiles exported)"
        )
        return result


def cut_map(
    map_path: Union[str, Path],
    output_dir: Union[str, Path],
    **kwargs
) -> CutResult:
    """Convenience wrapper around MapCutter for a single map."""
    options = CutterOptions(map_path=Path(map_path), output_dir=Path(output_dir), **kwargs)
    return MapCutter(options).run()
