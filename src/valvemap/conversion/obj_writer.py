"""
Wavefront OBJ export for loaded map geometry.

Every brush becomes one OBJ group and every texture one material, so the
export can be eyeballed in any model viewer.  Buffers are written exactly as
the mesh builder produced them, so ``y_up`` and ``scale`` carry through;
recentred brushes are moved back by their ``position``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, TextIO

import numpy as np

from valvemap.preview.mesh_builder import BrushMesh, RenderMesh

logger = logging.getLogger(__name__)


@dataclass
class _Chunk:
    group: str
    material: str
    positions: np.ndarray
    uvs: np.ndarray
    normals: np.ndarray
    indices: np.ndarray


class ObjWriter:
    """Collect brush meshes, then write them as .obj plus an optional .mtl."""

    def __init__(self, texture_paths: Optional[Dict[str, str]] = None):
        # texture name -> image path written as map_Kd; defaults to the name
        self.texture_paths = dict(texture_paths or {})
        self._chunks: List[_Chunk] = []

    def add_mesh(self, mesh: RenderMesh, group: str, offset=(0.0, 0.0, 0.0)) -> None:
        if mesh.is_empty:
            return
        self._chunks.append(_Chunk(
            group=group,
            material=mesh.texture,
            positions=mesh.positions.astype(np.float64) + np.asarray(offset, dtype=np.float64),
            # OBJ texture space has V pointing up
            uvs=np.column_stack([mesh.uvs[:, 0], 1.0 - mesh.uvs[:, 1]]),
            normals=mesh.normals,
            indices=mesh.indices,
        ))

    def add_brush(self, brush: BrushMesh, group: str = "brush") -> None:
        for mesh in brush.meshes.values():
            self.add_mesh(mesh, group, brush.position)

    def add_asset(self, asset) -> None:
        """Add every brush of a loaded MapAsset, grouped as ``classname_entity_brush``."""
        for ei, entity in enumerate(asset.entities):
            name = entity.classname or "entity"
            for bi, brush in enumerate(entity.brushes):
                self.add_brush(brush, f"{name}_{ei}_{bi}")

    def write(self, obj_path, write_mtl: bool = True) -> Path:
        obj_path = Path(obj_path)
        mtl_path = obj_path.with_suffix(".mtl")

        with open(obj_path, "w", encoding="utf-8") as f:
            f.write(f"# valvemap: {self.vertex_count} vertices, {self.face_count} triangles\n")
            if write_mtl:
                f.write(f"mtllib {mtl_path.name}\n")
            self._write_chunks(f)

        logger.info("Wrote %s (%d vertices, %d triangles)", obj_path, self.vertex_count, self.face_count)
        if write_mtl:
            self._write_mtl(mtl_path)
        return obj_path

    def _write_chunks(self, f: TextIO) -> None:
        base = 1
        group = None
        for chunk in self._chunks:
            if chunk.group != group:
                f.write(f"\ng {chunk.group}\n")
                group = chunk.group
            f.write(f"usemtl {chunk.material}\n")
            for x, y, z in chunk.positions:
                f.write(f"v {x:.4f} {y:.4f} {z:.4f}\n")
            for u, v in chunk.uvs:
                f.write(f"vt {u:.6f} {v:.6f}\n")
            for x, y, z in chunk.normals:
                f.write(f"vn {x:.6f} {y:.6f} {z:.6f}\n")
            for tri in chunk.indices:
                a, b, c = (int(i) + base for i in tri)
                f.write(f"f {a}/{a}/{a} {b}/{b}/{b} {c}/{c}/{c}\n")
            base += len(chunk.positions)

    def _write_mtl(self, mtl_path: Path) -> None:
        with open(mtl_path, "w", encoding="utf-8") as f:
            for material in self.materials:
                f.write(f"newmtl {material}\n")
                f.write("Kd 1.0 1.0 1.0\n")
                f.write(f"map_Kd {self.texture_paths.get(material, material)}\n\n")

    @property
    def vertex_count(self) -> int:
        return sum(len(c.positions) for c in self._chunks)

    @property
    def face_count(self) -> int:
        return sum(len(c.indices) for c in self._chunks)

    @property
    def materials(self) -> List[str]:
        return sorted({c.material for c in self._chunks})
