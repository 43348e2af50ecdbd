"""Shared pytest fixtures for tmxcutter tests."""

import tempfile
from pathlib import Path

import pytest
from PIL import Image

from tmxcutter.models import AtlasDef


def tile_color(local_id):
    """Colour painted on tile ``local_id`` (1-based, Tiled order)."""
    return (local_id * 10 % 256, local_id * 3 % 256, 200, 255)


@pytest.fixture(name="tile_color")
def tile_color_fixture():
    """Expose the tile colour scheme used by make_atlas_image."""
    return tile_color


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def quad_atlas():
    """A 32x32 tileset of four 16x16 tiles starting at gid 1."""
    return AtlasDef(
        first_gid=1,
        name="terrain",
        tile_width=16,
        tile_height=16,
        image_width=32,
        image_height=32,
        image_source="terrain.png",
    )


@pytest.fixture
def make_atlas_image():
    """
    Build an atlas image whose tiles are filled with ``tile_color``.
    
    Tiles are numbered left to right, top to bottom, as Tiled numbers them.
    """
    def _make(columns, rows, tile_width=16, tile_height=16):
        image = Image.new("RGBA", (columns * tile_width, rows * tile_height))
        local_id = 1
        for row in range(rows):
            for column in range(columns):
                box = (
                    column * tile_width,
                    row * tile_height,
                    (column + 1) * tile_width,
                    (row + 1) * tile_height,
                )
                image.paste(tile_color(local_id), box)
                local_id += 1
        return image
    return _make


@pytest.fixture
def make_tmx():
    """Build TMX text for a single-layer orthogonal map."""
    def _make(width, height, gids, tilesets=None, tile_size=16, encoding=None, layers=1):
        if tilesets is None:
            tilesets = [{
                "firstgid": 1, "name": "terrain", "tilewidth": tile_size,
                "tileheight": tile_size, "source": "terrain.png",
                "width": 2 * tile_size, "height": 2 * tile_size,
            }]
        parts = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<map version="1.0" orientation="orthogonal" width="{width}" height="{height}" '
            f'tilewidth="{tile_size}" tileheight="{tile_size}">',
        ]
        for ts in tilesets:
            parts.append(
                f' <tileset firstgid="{ts["firstgid"]}" name="{ts["name"]}" '
                f'tilewidth="{ts["tilewidth"]}" tileheight="{ts["tileheight"]}">'
            )
            parts.append(
                f'  <image source="{ts["source"]}" width="{ts["width"]}" height="{ts["height"]}"/>'
            )
            parts.append(' </tileset>')
        for number in range(layers):
            parts.append(f' <layer name="Layer {number + 1}" width="{width}" height="{height}">')
            if encoding == "csv":
                parts.append('  <data encoding="csv">')
                parts.append(",".join(str(gid) for gid in gids))
                parts.append('  </data>')
            else:
                parts.append('  <data>')
                parts.extend(f'   <tile gid="{gid}"/>' for gid in gids)
                parts.append('  </data>')
            parts.append(' </layer>')
        parts.append('</map>')
        return "\n".join(parts)
    return _make


@pytest.fixture
def quad_map_files(temp_dir, make_tmx, make_atlas_image):
    """Write a 2x2 map using gids 1-4 and its 32x32 texture to disk."""
    map_path = temp_dir / "level.tmx"
    map_path.write_text(make_tmx(2, 2, [1, 2, 3, 4]), encoding="utf-8")
    make_atlas_image(2, 2).save(temp_dir / "terrain.png")
    return map_path
