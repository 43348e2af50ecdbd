"""Tests for the tmxcutter command line and pipeline."""

import json

import pytest
from PIL import Image

from tmxcutter.__main__ import main
from tmxcutter.converter import cut_map
from tmxcutter.errors import MissingTextureAssetError


class TestCutMap:
    """Tests for the full pipeline."""

    def test_exports_tiles_and_manifest(self, quad_map_files, temp_dir, tile_color):
        """Every non-empty cell gets a tile image and a manifest entry."""
        output = temp_dir / "out"

        result = cut_map(quad_map_files, output)

        assert (result.cells, result.placed, result.exported, result.empty) == (4, 4, 4, 0)
        for index in range(4):
            with Image.open(output / "tiles" / f"{index}.png") as tile:
                assert tile.convert("RGBA").getpixel((0, 0)) == tile_color(index + 1)
        manifest = json.loads(result.scene_path.read_text(encoding="utf-8"))
        assert [t["source"] for t in manifest["tiles"]] == [
            [0, 16, 16, 16], [16, 16, 16, 16], [0, 0, 16, 16], [16, 0, 16, 16],
        ]

    def test_without_tiles_or_scene(self, quad_map_files, temp_dir):
        """Tile export and the manifest can both be turned off."""
        output = temp_dir / "out"

        result = cut_map(quad_map_files, output, export_tiles=False, write_scene=False)

        assert result.placed == 4
        assert result.exported == 0
        assert result.scene_path is None
        assert not (output / "tiles").exists()

    def test_missing_texture(self, quad_map_files, temp_dir):
        """A map whose texture cannot be found fails with MissingTextureAssetError."""
        (temp_dir / "terrain.png").unlink()

        with pytest.raises(MissingTextureAssetError):
            cut_map(quad_map_files, temp_dir / "out")


class TestMain:
    """Tests for the argparse entry point."""

    def test_success(self, quad_map_files, temp_dir, capsys):
        """A valid run exits with 0 and reports the placed tiles."""
        code = main([str(quad_map_files), "--output", str(temp_dir / "out")])

        assert code == 0
        assert "Placed 4 tiles" in capsys.readouterr().out
        assert (temp_dir / "out" / "level.scene.json").exists()

    def test_texture_association(self, quad_map_files, temp_dir, make_atlas_image):
        """--texture maps a tileset name to an explicit file."""
        (temp_dir / "terrain.png").unlink()
        make_atlas_image(2, 2).save(temp_dir / "custom.png")

        code = main([
            str(quad_map_files),
            "--output", str(temp_dir / "out"),
            "--texture", f"terrain={temp_dir / 'custom.png'}",
            "--no-scene",
        ])

        assert code == 0
        assert (temp_dir / "out" / "tiles" / "3.png").exists()

    def test_missing_map(self, temp_dir):
        """A missing map file exits with 1."""
        assert main([str(temp_dir / "absent.tmx"), "--output", str(temp_dir / "out")]) == 1

    def test_domain_error_exit_code(self, temp_dir, make_tmx, make_atlas_image):
        """Cutting errors are reported with exit code 1."""
        map_path = temp_dir / "bad.tmx"
        map_path.write_text(make_tmx(2, 1, [1, 9]), encoding="utf-8")
        make_atlas_image(2, 2).save(temp_dir / "terrain.png")

        assert main([str(map_path), "--output", str(temp_dir / "out")]) == 1

    def test_bad_texture_argument(self, quad_map_files, temp_dir):
        """A malformed --texture value is a usage error."""
        with pytest.raises(SystemExit):
            main([str(quad_map_files), "--output", str(temp_dir), "--texture", "nopath"])

    def test_unwritable_output_exit_code(self, quad_map_files, temp_dir):
        """An output path that cannot be created is reported with exit code 1."""
        blocker = temp_dir / "occupied"
        blocker.write_text("not a directory")

        assert main([str(quad_map_files), "--output", str(blocker)]) == 1

    def test_log_file_option(self, quad_map_files, temp_dir):
        """--log-file receives the run's log messages."""
        log_path = temp_dir / "run.log"

        code = main([
            str(quad_map_files), "--output", str(temp_dir / "out"),
            "--verbose", "--log-file", str(log_path),
        ])

        assert code == 0
        assert "distinct tile ids in use (gids 1..4)" in log_path.read_text(encoding="utf-8")
