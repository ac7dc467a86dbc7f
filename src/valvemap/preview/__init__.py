"""
Render-ready mesh data for brush geometry.
"""

from .mesh_builder import (
    BrushMesh,
    BrushMeshInfo,
    MeshBuilder,
    RenderMesh,
    build_brush_mesh,
    compute_uvs,
    project_uv,
)
from .texture_manager import FileTextureProvider, StaticTextureProvider, TextureProvider

__all__ = [
    'BrushMesh',
    'BrushMeshInfo',
    'MeshBuilder',
    'RenderMesh',
    'build_brush_mesh',
    'compute_uvs',
    'project_uv',
    'TextureProvider',
    'StaticTextureProvider',
    'FileTextureProvider',
]
