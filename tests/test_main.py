"""Tests for the command line driver."""

from PIL import Image

import main


class TestMain:
    """Test main() end to end on tiny images."""

    def test_render_named_scene(self, tmp_path):
        out = tmp_path / "sample.png"
        code = main.main([
            '--scene', 'sample', '--width', '4', '--height', '3',
            '--samples', '1', '--threads', '2', '--output', str(out)
        ])
        assert code == 0
        with Image.open(out) as image:
            assert image.size == (4, 3)

    def test_render_scene_file(self, tmp_path):
        scene_file = tmp_path / "tiny.yaml"
        scene_file.write_text(
            "render: {width: 3, height: 2, samples: 1, threads: 1}\n"
            "materials: {m: {type: lambertian}}\n"
            "objects: [{center: [0, 0, -1], radius: 0.5, material: m}]\n"
        )
        out = tmp_path / "tiny.png"
        assert main.main(['--scene', str(scene_file), '--output', str(out)]) == 0
        with Image.open(out) as image:
            assert image.size == (3, 2)

    def test_unknown_scene(self, tmp_path, capsys):
        code = main.main(['--scene', 'nope', '--output', str(tmp_path / "x.png")])
        assert code == 1
        assert "Unknown scene" in capsys.readouterr().err
        assert not (tmp_path / "x.png").exists()

    def test_bad_scene_file(self, tmp_path, capsys):
        code = main.main(['--scene', str(tmp_path / "missing.yaml")])
        assert code == 1
        assert "not found" in capsys.readouterr().err

    def test_scene_file_with_bad_value(self, tmp_path, capsys):
        scene_file = tmp_path / "bad.yaml"
        scene_file.write_text("render: {width: abc}\n")
        out = tmp_path / "bad.png"
        assert main.main(['--scene', str(scene_file), '--output', str(out)]) == 1
        assert "width" in capsys.readouterr().err
        assert not out.exists()

    def test_invalid_size(self, capsys):
        assert main.main(['--width', '0']) == 2
