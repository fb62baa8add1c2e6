"""Tests for PNG discovery, decoding and encoding."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import torch
import pytest
from pathlib import Path
from PIL import Image
from image_alg.image_io import find_images, load_image, save_image, save_gray16, output_path


class TestFindImages:
    def test_single_file(self, tmp_path):
        png = tmp_path / 'a.png'
        Image.new('RGB', (4, 4)).save(png)
        assert find_images(png) == [png]

    def test_directory_lists_pngs_sorted(self, tmp_path):
        for name in ['b.png', 'a.PNG', 'notes.txt']:
            (tmp_path / name).write_bytes(b'')
        (tmp_path / 'output').mkdir()
        assert [p.name for p in find_images(tmp_path)] == ['a.PNG', 'b.png']

    def test_missing_target(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_images(tmp_path / 'nope.png')

    def test_rejects_other_file_types(self, tmp_path):
        txt = tmp_path / 'a.txt'
        txt.write_text('x')
        with pytest.raises(ValueError):
            find_images(txt)


class TestLoadSave:
    def test_round_trip(self, tmp_path, random_image):
        path = tmp_path / 'nested' / 'img.png'
        save_image(random_image, path, verbose=False)
        loaded = load_image(path, verbose=False)
        assert loaded.dtype == torch.uint8
        assert torch.equal(loaded, random_image)

    def test_load_converts_to_rgb(self, tmp_path):
        path = tmp_path / 'gray.png'
        Image.new('L', (5, 3), color=40).save(path)
        loaded = load_image(path, verbose=False)
        assert loaded.shape == (3, 3, 5)
        assert (loaded == 40).all()

    def test_messages(self, tmp_path, random_image, capsys):
        path = tmp_path / 'img.png'
        save_image(random_image, path)
        load_image(path)
        out = capsys.readouterr().out
        assert f"saved: `{path}`" in out
        assert "size `30x20`" in out

    def test_save_rejects_float(self, tmp_path):
        with pytest.raises(ValueError):
            save_image(torch.rand(3, 4, 4), tmp_path / 'x.png', verbose=False)

    def test_gray16_saturates(self, tmp_path):
        path = tmp_path / 'grad.png'
        grid = torch.tensor([[0, 1000], [65535, 400000]], dtype=torch.int64)
        save_gray16(grid, path, verbose=False)
        values = np.array(Image.open(path))
        assert values.tolist() == [[0, 1000], [65535, 65535]]


class TestOutputPath:
    def test_default_next_to_source(self):
        assert output_path('/data/photo.png', 'resized') == Path('/data/output/photo_resized.png')

    def test_explicit_directory(self):
        assert output_path('/data/photo.png', 'gradient', '/tmp/out') == Path('/tmp/out/photo_gradient.png')
