# meshkit

Pure-Python geometry for triangle meshes, with no runtime dependencies.

## What is in it

- `meshkit.triangles`: `Vec3` is an immutable vector that supports `+`, `-`,
  scalar `*` and `/`, unary `-`, `dot`, `cross`, `length`, `length_squared`
  and `normalized`. `normalized` raises `ValueError` for a zero vector.
  Two triangle classes test rays against a triangle with different methods:
  - `MollerTrumboreTriangle` uses the Möller–Trumbore method.
  - `BaldwinWeberTriangle` uses a precomputed global-to-barycentric
    transformation. A degenerate triangle never reports a hit.

  `intersects_with_ray(ray_pos, ray_dir)` returns the hit point as a `Vec3`,
  or `None` on a miss. `normal()` returns the unnormalised face normal.
- `meshkit.transform`: `Matrix4` is an immutable row-major 4x4 matrix.
  `translate`, `rotate` (an angle in degrees about an axis) and `scale` each
  return a new matrix, post-multiplied, so the newest operation acts on a
  point first. Matrices can be multiplied with `a @ b`. The class also has
  `map_point`, `map_vector` and `without_translation`.
- `meshkit.bounds`: `compute_bounding_box(points)` returns a `BoundingBox`
  (with `center()`). `compute_bounding_sphere(points)` uses Ritter's
  algorithm and returns a `BoundingSphere`. An empty point set raises
  `ValueError`.
- `meshkit.mesh`: `TriangleMesh` takes a name, an index list and flat arrays
  of points, normals and, optionally, texture coordinates, tangents and
  bitangents.
  - `set_translation`, `set_rotation` (degrees about x, y, z) and
    `set_scaling` accumulate into `transformation()`.
  - After each change the mesh recomputes `transformed_points()`,
    `transformed_normals()`, `triangles()`, `bounding_box()` and
    `bounding_sphere()`. `reset_transformations()` restores the original
    data.
  - `is_mirrored()` reports whether the scaling flips orientation.
  - `intersects_with_ray` returns the hit on the first triangle, in index
    order, that the ray meets. This is not necessarily the nearest hit.
- `meshkit.torus`: `build_torus(...)` returns a plain `TriangleMesh`, and
  `Torus(...)` is a `TriangleMesh` subclass with `clone()`. Both take the
  outer radius, inner radius, side count, ring count and the texture scale
  factors `s_max` and `t_max`. They produce normals, tangents, bitangents and
  texture coordinates.
- `meshkit.surfaces`: parametric shapes derived from `ParametricShape`. Each
  reports its parameter domain through `u_range()` and `v_range()` and
  evaluates points with `point_at_parameter(u, v)`. The shapes are:
  - `TopShell(center, radius)`
  - `TurretShell(radius)`
  - `WrinkledPeriwinkle(radius)`
  - `TriaxialTritorus(radius)`
  - `TriaxialHexatorus(radius)`
  - `TwistedTriaxial(radius)`
  - `TwistedPseudoSphere(radius)`
  - `VerrillMinimal(radius)`
- Tangent space is computed for a `FaceMesh` of triangles and quads.
  `meshkit.tangent_space.gen_tang_space(mesh, angular_threshold=180.0)`
  first welds identical vertices, so the result does not depend on face
  order. It returns one list per face, holding a `TangentSpace` for each
  corner. Each `TangentSpace` has these fields:
  - `tangent` and `bitangent`
  - `mag_s` and `mag_t`
  - `orient` and `sign`

  Faces that are neither triangles nor quads get an empty list. A mesh
  without any triangle or quad raises `ValueError`. The building blocks are
  public in `meshkit.tangent_weld`, `meshkit.tangent_tris` and
  `meshkit.tangent_space`.

## Installation

```
pip install .
```

To run the tests, install with `pip install .[test]` and run `pytest`.

## Examples

```python
from meshkit.triangles import Vec3, MollerTrumboreTriangle
from meshkit.torus import Torus

tri = MollerTrumboreTriangle(Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(0, 1, 0))
print(tri.intersects_with_ray(Vec3(0.2, 0.2, 1), Vec3(0, 0, -1)))
# Vec3(x=0.2, y=0.2, z=0.0)

torus = Torus(2.0, 0.5, 16, 32, 1, 1)
torus.set_translation(Vec3(1, 0, 0))
print(torus.bounding_box())
```

```python
from meshkit.tangent_weld import FaceMesh
from meshkit.tangent_space import gen_tang_space

quad = FaceMesh(
    positions=[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)],
    normals=[(0, 0, 1)] * 4,
    tex_coords=[(0, 0), (1, 0), (1, 1), (0, 1)],
    faces=[(0, 1, 2, 3)],
)
for space in gen_tang_space(quad)[0]:
    print(space.tangent, space.bitangent, space.sign)
```

## What it does not do

meshkit does geometry only. It has no rendering, materials or textures, and
it cannot read or write mesh files. It has no viewer or command-line tool.
The parametric shapes evaluate points but do not triangulate themselves into
a `TriangleMesh`.