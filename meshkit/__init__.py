"""Vectors, ray-triangle tests, transforms, bounds, triangle meshes, a torus, parametric surfaces and tangent-space generation."""

__version__ = "0.1.0"

__all__ = [
    "bounds",
    "mesh",
    "surfaces",
    "tangent_space",
    "tangent_tris",
    "tangent_weld",
    "torus",
    "transform",
    "triangles",
]