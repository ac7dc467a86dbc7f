"""Tests for texture size lookup."""

import logging

import pytest
from PIL import Image

from valvemap.preview.texture_manager import (
    FileTextureProvider,
    StaticTextureProvider,
    TextureProvider,
)
from valvemap.settings import EMPTY_TEXTURE, GeometrySettings


@pytest.fixture
def texture_root(tmp_path):
    folder = tmp_path / "textures" / "map"
    folder.mkdir(parents=True)
    Image.new("RGB", (128, 32)).save(folder / "grass.png")
    Image.new("RGB", (16, 256)).save(folder / "wall.tga")
    return tmp_path


def test_base_provider_default():
    provider = TextureProvider((32, 32))
    assert provider.texture_size("anything") == (32, 32)
    assert provider.texture_sizes(["a", "b"]) == {"a": (32, 32), "b": (32, 32)}


def test_static_provider():
    provider = StaticTextureProvider({"map/grass": (128, 32)}, default_size=(8, 8))
    assert provider.texture_size("map/grass") == (128, 32)
    assert provider.texture_size("map/missing") == (8, 8)


def test_reads_image_size(texture_root):
    provider = FileTextureProvider(texture_root, ["textures"])
    assert provider.texture_size("map/grass") == (128, 32)
    assert provider.texture_size("map/wall") == (16, 256)
    assert provider.find_texture("map/grass") == texture_root / "textures" / "map" / "grass.png"


def test_collection_directory_layout(texture_root):
    provider = FileTextureProvider(texture_root, ["textures/map"])
    assert provider.texture_size("map/grass") == (128, 32)
    assert provider.find_texture("map/wall") == texture_root / "textures" / "map" / "wall.tga"


def test_nested_name_preferred_over_basename(texture_root):
    Image.new("RGB", (2, 2)).save(texture_root / "textures" / "grass.png")
    provider = FileTextureProvider(texture_root, ["textures"])
    assert provider.texture_size("map/grass") == (128, 32)


def test_later_collection_used_when_first_lacks_texture(texture_root):
    other = texture_root / "other" / "map"
    other.mkdir(parents=True)
    Image.new("RGB", (8, 8)).save(other / "dirt.png")
    provider = FileTextureProvider(texture_root, ["textures", "other"])
    assert provider.texture_size("map/dirt") == (8, 8)
    assert provider.texture_size("map/grass") == (128, 32)


def test_clear_cache_resets_warnings(texture_root, caplog):
    provider = FileTextureProvider(texture_root, ["textures"])
    with caplog.at_level(logging.WARNING, logger="valvemap"):
        assert provider.texture_size("map/missing") == (64, 64)
        provider.clear_cache()
        assert provider.texture_size("map/missing") == (64, 64)
    assert caplog.text.count("not found") == 2


def test_missing_texture_logged_once_while_cached(texture_root, caplog):
    provider = FileTextureProvider(texture_root, ["textures"])
    with caplog.at_level(logging.WARNING, logger="valvemap"):
        provider.texture_size("map/missing")
        provider.texture_size("map/missing")
    assert caplog.text.count("not found") == 1


def test_empty_texture_uses_default(texture_root):
    folder = texture_root / "textures"
    Image.new("RGB", (4, 4)).save(folder / f"{EMPTY_TEXTURE}.png")
    settings = GeometrySettings(default_texture_size=(32, 16))
    provider = FileTextureProvider(texture_root, ["textures"], settings)
    assert provider.texture_size(EMPTY_TEXTURE) == (32, 16)


def test_no_collections(texture_root):
    provider = FileTextureProvider(texture_root, [])
    assert provider.find_texture("map/grass") is None
    assert provider.texture_size("map/grass") == (64, 64)


def test_sizes_are_cached(texture_root):
    provider = FileTextureProvider(texture_root, ["textures"])
    assert provider.texture_size("map/grass") == (128, 32)
    (texture_root / "textures" / "map" / "grass.png").unlink()
    assert provider.texture_size("map/grass") == (128, 32)
    provider.clear_cache()
    assert provider.texture_size("map/grass") == (64, 64)


def test_unreadable_image(texture_root, caplog):
    (texture_root / "textures" / "map" / "broken.png").write_bytes(b"not an image")
    provider = FileTextureProvider(texture_root, ["textures"])
    with caplog.at_level(logging.WARNING, logger="valvemap"):
        assert provider.texture_size("map/broken") == (64, 64)
    assert "Failed to read texture" in caplog.text


def test_extension_filter(texture_root):
    (texture_root / "textures" / "map" / "notes.txt").write_text("grass")
    settings = GeometrySettings(texture_extensions=(".tga",))
    provider = FileTextureProvider(texture_root, ["textures"], settings)
    assert provider.find_texture("map/grass") is None
    assert provider.find_texture("map/wall").suffix == ".tga"
    assert provider.find_texture("map/notes") is None
