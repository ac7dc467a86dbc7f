"""
Map loading pipeline.

Orchestrates UTF-8 decoding, parsing, structural checks and per-brush mesh
building.  Every brush depends only on its own faces, so brushes can be
built on a thread pool; results keep their input order.
"""

from __future__ import annotations
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Union

from valvemap.conversion.map_data import Map
from valvemap.conversion.map_parser import MapParser, decode_source
from valvemap.preview.mesh_builder import BrushMesh, MeshBuilder
from valvemap.preview.texture_manager import FileTextureProvider, TextureProvider
from valvemap.settings import GeometrySettings
from valvemap.validation.checks import check_map, format_location
from valvemap.validation.core import (
    Severity, ValidationError, ValidationResult, ValidationStage,
)

logger = logging.getLogger(__name__)


@dataclass
class EntityAsset:
    """An entity with its brushes converted to meshes."""
    properties: Mapping[str, str]
    brushes: List[BrushMesh] = field(default_factory=list)

    @property
    def classname(self) -> Optional[str]:
        return self.properties.get("classname")


@dataclass
class MapAsset:
    """Result of loading a map.

    Attributes:
        map: The parsed tree
        entities: Per-entity mesh data, parallel to ``map.entities``
        validation: Every non-fatal issue found while loading
    """
    map: Map
    entities: List[EntityAsset]
    validation: ValidationResult

    @property
    def brush_count(self) -> int:
        return sum(len(e.brushes) for e in self.entities)

    @property
    def triangle_count(self) -> int:
        return sum(b.triangle_count for e in self.entities for b in e.brushes)

    @property
    def textures(self) -> List[str]:
        """Distinct texture names used by any built mesh."""
        seen: Dict[str, None] = {}
        for entity in self.entities:
            for brush in entity.brushes:
                for texture in brush.meshes:
                    seen.setdefault(texture, None)
        return list(seen)

    def summary(self) -> dict:
        return {
            'entities': len(self.entities),
            'brushes': self.brush_count,
            'faces': self.map.face_count,
            'triangles': self.triangle_count,
            'textures': self.textures,
            'validation': self.validation.to_dict(),
        }


def _build_brushes(map_data: Map, builder: MeshBuilder, max_workers: int) -> List[List[BrushMesh]]:
    jobs = [(format_location(ei, bi), brush) for ei, bi, brush in map_data.iter_brushes()]

    def build(job):
        location, brush = job
        return builder.build_brush(brush, location)

    if max_workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            built = list(pool.map(build, jobs))
    else:
        built = [build(job) for job in jobs]

    # Regroup flat results per entity
    grouped: List[List[BrushMesh]] = []
    it = iter(built)
    for entity in map_data.entities:
        grouped.append([next(it) for _ in entity.brushes])
    return grouped


ProviderFactory = Callable[[Map], TextureProvider]


def _load_text(text: str, provider_factory: ProviderFactory,
               settings: GeometrySettings) -> MapAsset:
    start = time.perf_counter()
    parser = MapParser(text, settings.epsilon)
    map_data = parser.parse()

    validation = ValidationResult(stage=ValidationStage.GEOMETRY)
    validation.extend(parser.issues)
    validation.merge(check_map(map_data))

    builder = MeshBuilder(provider_factory(map_data), settings)
    grouped = _build_brushes(map_data, builder, settings.max_workers)

    entities = []
    for entity, brushes in zip(map_data.entities, grouped):
        for brush_mesh in brushes:
            validation.extend(brush_mesh.issues)
        entities.append(EntityAsset(properties=entity.properties, brushes=brushes))

    asset = MapAsset(map=map_data, entities=entities, validation=validation)
    logger.info("Loaded map: %d entities, %d brushes, %d triangles in %.3fs",
                len(entities), asset.brush_count, asset.triangle_count,
                time.perf_counter() - start)
    for issue in validation.issues:
        logger.debug("%s", issue)

    if settings.strict and validation.worst in (Severity.WARN, Severity.FAIL):
        raise ValidationError(validation)
    return asset


def load_map(data: Union[bytes, str],
             texture_provider: Optional[TextureProvider] = None,
             settings: Optional[GeometrySettings] = None) -> MapAsset:
    """
    Load a map from bytes or text.

    Args:
        data: Raw file contents (bytes are decoded as UTF-8) or text
        texture_provider: Source of texture pixel sizes; defaults to the
            configured default size for every texture
        settings: Geometry settings

    Returns:
        MapAsset with meshes for every brush

    Raises:
        MapEncodingError: If bytes are not valid UTF-8
        MapSyntaxError: If the text does not match the grammar
        ValidationError: In strict mode, if any WARN or FAIL issue was found
    """
    settings = settings or GeometrySettings()
    text = decode_source(bytes(data)) if isinstance(data, (bytes, bytearray)) else data
    provider = texture_provider or TextureProvider(settings.default_texture_size)
    return _load_text(text, lambda _map: provider, settings)


def load_map_file(path,
                  texture_provider: Optional[TextureProvider] = None,
                  settings: Optional[GeometrySettings] = None) -> MapAsset:
    """
    Load a map from disk.

    When no provider is given, textures are resolved from the directories
    listed on the worldspawn, relative to the map file's directory.
    """
    settings = settings or GeometrySettings()
    path = Path(path)
    logger.info("Loading %s", path)
    text = decode_source(path.read_bytes())

    def provider_factory(map_data: Map) -> TextureProvider:
        if texture_provider is not None:
            return texture_provider
        collections = map_data.texture_collections(settings.texture_property)
        return FileTextureProvider(path.parent, collections, settings)

    return _load_text(text, provider_factory, settings)
