"""
Texture lookup for UV normalization.

UVs come out of the projector in pixels; turning them into 0..1 texture
coordinates needs each texture's pixel size.  Providers answer exactly that
question and nothing else.  Uses PIL/Pillow to read image headers and
supports any format Pillow can open (TGA, PNG, JPG, BMP, ...).
"""

from __future__ import annotations
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Sequence, Set, Tuple

from PIL import Image, UnidentifiedImageError

from valvemap.settings import GeometrySettings

logger = logging.getLogger(__name__)

TextureSize = Tuple[int, int]


class TextureProvider:
    """Base provider: returns a pixel size for every texture name."""

    def __init__(self, default_size: TextureSize = (64, 64)):
        self.default_size = default_size

    def texture_size(self, name: str) -> TextureSize:
        return self.default_size

    def texture_sizes(self, names: Iterable[str]) -> Dict[str, TextureSize]:
        """Look up several names at once."""
        return {name: self.texture_size(name) for name in names}


class StaticTextureProvider(TextureProvider):
    """Provider backed by a fixed name -> size table."""

    def __init__(self, sizes: Optional[Mapping[str, TextureSize]] = None,
                 default_size: TextureSize = (64, 64)):
        super().__init__(default_size)
        self._sizes = dict(sizes or {})

    def texture_size(self, name: str) -> TextureSize:
        return self._sizes.get(name, self.default_size)


class FileTextureProvider(TextureProvider):
    """Resolve textures from image files on disk.

    Collections are searched in order.  Inside each, a texture name such as
    ``map/grass`` is tried as ``<collection>/map/grass.<ext>`` and then as
    ``<collection>/grass.<ext>``, so both a texture root (``textures``) and a
    TrenchBroom collection directory (``textures/map``) resolve it.  Each
    name is resolved once and cached.  The empty-texture name and
    unresolvable names fall back to the default size.
    """

    def __init__(self, root, collections: Sequence[str] = (),
                 settings: Optional[GeometrySettings] = None):
        settings = settings or GeometrySettings()
        super().__init__(settings.default_texture_size)
        self.root = Path(root)
        self.collections = list(collections)
        self.empty_texture = settings.empty_texture
        self.extensions = tuple(ext.lower() for ext in settings.texture_extensions)
        self._cache: Dict[str, TextureSize] = {}
        self._warned_textures: Set[str] = set()
        self._lock = threading.Lock()

    def texture_size(self, name: str) -> TextureSize:
        with self._lock:
            if name in self._cache:
                return self._cache[name]

            if name == self.empty_texture:
                size = self.default_size
            else:
                size = self._load_size(name)
            self._cache[name] = size
            return size

    def find_texture(self, name: str) -> Optional[Path]:
        """Locate the image file for a texture name, or None."""
        if not self.collections:
            return None

        basename = Path(name).name
        for collection in self.collections:
            base = self.root / collection
            for candidate in (base / name, base / basename):
                found = self._match_stem(candidate)
                if found is not None:
                    return found
        return None

    def _match_stem(self, candidate: Path) -> Optional[Path]:
        directory = candidate.parent
        if not directory.is_dir():
            return None
        for path in sorted(directory.iterdir()):
            if path.stem == candidate.name and path.suffix.lower() in self.extensions:
                return path
        return None

    def _load_size(self, name: str) -> TextureSize:
        path = self.find_texture(name)
        if path is None:
            self._warn_once(name, "Texture '%s' not found; using default size", name)
            return self.default_size

        try:
            with Image.open(path) as image:
                width, height = image.size
        except (OSError, UnidentifiedImageError) as e:
            self._warn_once(name, "Failed to read texture %s: %s", path, e)
            return self.default_size

        if width <= 0 or height <= 0:
            self._warn_once(name, "Texture %s has invalid size %dx%d", path, width, height)
            return self.default_size

        logger.debug("Texture '%s' -> %s (%dx%d)", name, path, width, height)
        return (width, height)

    def _warn_once(self, name: str, msg: str, *args) -> None:
        if name not in self._warned_textures:
            logger.warning(msg, *args)
            self._warned_textures.add(name)

    def clear_cache(self) -> None:
        """Forget all resolved sizes."""
        with self._lock:
            self._cache.clear()
            self._warned_textures.clear()
