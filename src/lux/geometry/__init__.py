"""Geometry module for shape primitives.

Components:
    sphere: Sphere intersection and the shared HitRecord structure

Intersection routines are Taichi functions (@ti.func) called from the
scene-level closest-hit query. New primitives add a hit_* function here and a
storage/dispatch branch in scene.intersection; the integrator is unaffected.
"""

from .sphere import HIT_EPSILON, HitRecord, hit_sphere, make_miss_record

__all__ = [
    "HIT_EPSILON",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
]
