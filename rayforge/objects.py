"""
Scene objects: a shape paired with the material that shades it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .ray import Ray
from .shapes import Shape, HitRecord
from .materials import Material


@dataclass(frozen=True)
class SceneObject:
    """One renderable object. Immutable and shared by all render threads."""
    shape: Shape
    material: Material


def hit_objects(
    objects: Iterable[SceneObject],
    ray: Ray,
    t_min: float,
    t_max: float
) -> Optional[Tuple[SceneObject, HitRecord]]:
    """Find the closest intersection among all objects.

    The search range is tightened to the best hit so far, so the result
    does not depend on iteration order.

    Returns:
        (object, hit) for the nearest hit, or None if the ray misses
    """
    nearest: Optional[Tuple[SceneObject, HitRecord]] = None
    closest_t = t_max

    for obj in objects:
        hit_record = obj.shape.hit(ray, t_min, closest_t)
        if hit_record is not None:
            nearest = (obj, hit_record)
            closest_t = hit_record.t

    return nearest
