"""
tmxcutter - Tiled map to tile placement converter

Reads orthogonal Tiled (.tmx) maps, resolves each cell's global tile id to a
rectangle of the right tileset image, exports one image per placed tile and
writes a placement manifest for a host scene.
"""

__version__ = "0.1.0"

from .errors import (
    TmxCutterError,
    MalformedMapError,
    ConfigurationError,
    MissingTextureAssetError,
    UnresolvedIdentifierError,
    RegionOutOfBoundsError,
)
from .models import AtlasDef, MapDocument, Placement, Rectangle
from .map_reader import read_map, parse_map, parse_map_string
from .atlas_registry import AtlasRegistry
from .region import resolve_region, tile_index
from .planner import PlacementPlanner, PlannerConfig, plan
from .assets import AssetProvider, TileExporter
from .converter import CutterOptions, CutResult, MapCutter, cut_map
