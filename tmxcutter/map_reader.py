"""
Map reader - parses Tiled TMX (XML) documents into a MapDocument.

Only orthogonal maps with a single tile layer are supported. Layer data may be
stored as one <tile gid="..."/> element per cell or as CSV text.
"""

import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Tuple, Union
from .constants import SUPPORTED_ENCODINGS, SUPPORTED_ORIENTATION
from .errors import MalformedMapError
from .models import AtlasDef, MapDocument
from .logging_config import get_logger

logger = get_logger('map_reader')


def read_map(map_path: Union[str, Path]) -> MapDocument:
    """
    Read and parse a TMX file.
    
    The file handle is held only while the XML tree is built.
    
    Args:
        map_path: Path to the .tmx file
    
    Returns:
        Parsed MapDocument
    
    Raises:
        FileNotFoundError: If the file does not exist
        MalformedMapError: If the XML is invalid or the map fails validation
    """
    map_path = Path(map_path)
    if not map_path.exists():
        raise FileNotFoundError(f"Map file not found: {map_path}")
    
    with open(map_path, 'rb') as f:
        try:
            tree = ET.parse(f)
        except ET.ParseError as e:
            raise MalformedMapError(f"{map_path} is not valid XML: {e}") from e
    
    document = parse_map(tree.getroot())
    logger.info(
        f"Read {map_path.name}: {document.width}x{document.height} cells, "
        f"{len(document.atlases)} tileset(s)"
    )
    return document


def parse_map_string(text: str) -> MapDocument:
    """Parse TMX content held in memory."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedMapError(f"Map is not valid XML: {e}") from e
    return parse_map(root)


def parse_map(root: ET.Element) -> MapDocument:
    """
    Build a MapDocument from the root <map> element.
    
    Args:
        root: Root element of a parsed TMX tree
    
    Returns:
        MapDocument with validated dimensions, tilesets and cell grid
    
    Raises:
        MalformedMapError: On any missing, non-numeric or inconsistent data
    """
    if root.tag != "map":
        raise MalformedMapError(f"Expected <map> root element, got <{root.tag}>")
    
    orientation = root.get("orientation")
    if orientation is not None and orientation != SUPPORTED_ORIENTATION:
        raise MalformedMapError(f"Unsupported map orientation '{orientation}'")
    
    width = _int_attr(root, "width", "map", positive=True)
    height = _int_attr(root, "height", "map", positive=True)
    cell_width = _int_attr(root, "tilewidth", "map", positive=True)
    cell_height = _int_attr(root, "tileheight", "map", positive=True)
    
    atlases = tuple(_parse_tileset(element) for element in root.findall("tileset"))
    gids = _parse_layer(root, width * height)
    
    for atlas in atlases:
        if atlas.tile_width != cell_width or atlas.tile_height != cell_height:
            logger.debug(
                f"Tileset '{atlas.name}' uses {atlas.tile_width}x{atlas.tile_height} tiles "
                f"on a {cell_width}x{cell_height} grid"
            )
    
    return MapDocument(
        width=width,
        height=height,
        cell_width=cell_width,
        cell_height=cell_height,
        atlases=atlases,
        gids=gids,
    )


def _parse_tileset(element: ET.Element) -> AtlasDef:
    """Convert a <tileset> element with an embedded <image> into an AtlasDef."""
    if element.get("source") is not None and element.find("image") is None:
        raise MalformedMapError(
            f"External tileset '{element.get('source')}' is not supported; embed it in the map"
        )
    
    name = element.get("name")
    if not name:
        raise MalformedMapError("Tileset is missing required attribute 'name'")
    context = f"tileset '{name}'"
    
    first_gid = _int_attr(element, "firstgid", context, positive=True)
    tile_width = _int_attr(element, "tilewidth", context, positive=True)
    tile_height = _int_attr(element, "tileheight", context, positive=True)
    
    image = element.find("image")
    if image is None:
        raise MalformedMapError(f"{context} has no <image> element")
    source = image.get("source")
    if not source:
        raise MalformedMapError(f"{context} image is missing required attribute 'source'")
    image_width = _int_attr(image, "width", f"{context} image", positive=True)
    image_height = _int_attr(image, "height", f"{context} image", positive=True)
    
    return AtlasDef(
        first_gid=first_gid,
        name=name,
        tile_width=tile_width,
        tile_height=tile_height,
        image_width=image_width,
        image_height=image_height,
        image_source=source,
    )


def _parse_layer(root: ET.Element, expected: int) -> Tuple[int, ...]:
    """Read the cell gids of the first <layer>."""
    layers = root.findall("layer")
    if not layers:
        raise MalformedMapError("Map has no <layer> element")
    if len(layers) > 1:
        logger.warning(f"Map has {len(layers)} layers; only the first is used")
    layer = layers[0]
    
    data = layer.find("data")
    if data is None:
        raise MalformedMapError(f"Layer '{layer.get('name', '')}' has no <data> element")
    
    encoding = data.get("encoding")
    if data.get("compression") is not None or encoding not in SUPPORTED_ENCODINGS:
        raise MalformedMapError(
            f"Unsupported layer encoding '{encoding}' "
            f"(compression={data.get('compression')}); save the map as XML or CSV"
        )
    
    if encoding == "csv":
        gids = _parse_csv_data(data.text or "")
    else:
        gids = [_parse_gid(tile.get("gid", "0")) for tile in data.findall("tile")]
    
    if len(gids) != expected:
        raise MalformedMapError(f"Layer has {len(gids)} cells, expected {expected}")
    return tuple(gids)


def _parse_csv_data(text: str) -> List[int]:
    return [_parse_gid(token) for token in re.split(r"[\s,]+", text.strip()) if token]


def _parse_gid(value: str) -> int:
    try:
        gid = int(value)
    except ValueError as e:
        raise MalformedMapError(f"Cell gid '{value}' is not an integer") from e
    if gid < 0:
        raise MalformedMapError(f"Cell gid {gid} is negative")
    return gid


def _int_attr(element: ET.Element, name: str, context: str, positive: bool = False) -> int:
    """Read a required integer attribute."""
    raw: Optional[str] = element.get(name)
    if raw is None:
        raise MalformedMapError(f"{context} is missing required attribute '{name}'")
    try:
        value = int(raw)
    except ValueError as e:
        raise MalformedMapError(f"{context} attribute '{name}' is not an integer: '{raw}'") from e
    if positive and value <= 0:
        raise MalformedMapError(f"{context} attribute '{name}' must be positive, got {value}")
    return value
