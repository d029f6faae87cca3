"""Monte Carlo path tracer built on Taichi.

Renders scenes of analytic spheres through a look-at camera, with support for:
- Lambert (diffuse), metallic (fuzzy mirror) and dielectric (glass) materials
- Hollow shells through negative sphere radii
- Jittered multi-sample anti-aliasing with gamma-2 output
- Deterministic per-pixel random streams for reproducible renders

Subpackages:
    core: Ray utilities, random streams, path integrator and render API
    geometry: Sphere intersection and hit records
    materials: Material registries and scatter functions
    scene: Scene container, serialization and GPU upload
    camera: Look-at pinhole camera
    output: Image export
"""

__version__ = "0.1.0"
