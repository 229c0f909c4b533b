"""Vector maths, rays, bounding boxes and camera data for the dungeon scene."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import reduce
from typing import Iterator, Tuple

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720

PROPS_RENDER_SCALE = 0.25

# Minimum distance the camera must move before line of sight is rechecked.
LOS_MIN_CAMERA_MOVE = 0.5
# Props further away than this are never considered visible.
LOS_MAX_PROP_DISTANCE = 9.0

Matrix = Tuple[Tuple[float, float, float, float], ...]


@dataclass(frozen=True)
class Vector3:
    """An immutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scale: float) -> Vector3:
        if not isinstance(scale, (int, float)):
            return NotImplemented
        return Vector3(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vector3:
        """Unit vector in the same direction; the zero vector stays zero."""
        size = self.length()
        if size == 0:
            return self
        return Vector3(self.x / size, self.y / size, self.z / size)

    def distance_to(self, other: Vector3) -> float:
        """Euclidean distance to another point."""
        return (self - other).length()


def _dot(a: Vector3, b: Vector3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def _cross(a: Vector3, b: Vector3) -> Vector3:
    return Vector3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned box given by its two opposite corners."""

    min: Vector3
    max: Vector3


@dataclass(frozen=True)
class Ray:
    """A ray starting at ``position`` and heading along ``direction``."""

    position: Vector3
    direction: Vector3


@dataclass(frozen=True)
class RayCollision:
    """Result of casting a ray against a shape."""

    hit: bool
    distance: float
    point: Vector3
    normal: Vector3


@dataclass
class Camera:
    """A perspective camera."""

    position: Vector3
    target: Vector3
    up: Vector3 = field(default_factory=lambda: Vector3(0.0, 1.0, 0.0))
    fovy: float = 60.0


def _fmin(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a < b else b


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a > b else b


def _reciprocal(value: float) -> float:
    if value == 0:
        return math.copysign(math.inf, value)
    return 1.0 / value


def _normal_component(offset: float, extent: float) -> float:
    if extent == 0:
        return 0.0
    ratio = offset / extent
    if not math.isfinite(ratio):
        return 0.0
    return float(math.trunc(ratio))


def ray_box_collision(ray: Ray, box: BoundingBox) -> RayCollision:
    """Cast a ray against an axis-aligned box using the slab method.

    A ray starting inside the box reports the distance to where it leaves.
    """
    origin = ray.position
    direction = ray.direction
    inside = all(low < o < high for o, low, high in zip(origin, box.min, box.max))
    if inside:
        direction = -direction

    nears = []
    fars = []
    for o, d, low, high in zip(origin, direction, box.min, box.max):
        inverse = _reciprocal(d)
        t0 = (low - o) * inverse
        t1 = (high - o) * inverse
        nears.append(_fmin(t0, t1))
        fars.append(_fmax(t0, t1))

    t_near = reduce(_fmax, nears)
    t_far = reduce(_fmin, fars)
    hit = not (t_far < 0 or t_near > t_far)

    point = origin + direction * t_near
    center = (box.min + box.max) * 0.5
    extent = box.max - box.min
    raw = (point - center) * 2.01
    normal = Vector3(
        *(_normal_component(r, e) for r, e in zip(raw, extent))
    ).normalized()

    distance = t_near
    if inside:
        distance = -distance
        normal = -normal
    return RayCollision(hit=hit, distance=distance, point=point, normal=normal)


def look_at(eye: Vector3, target: Vector3, up: Vector3) -> Matrix:
    """View matrix (row major) for a camera at ``eye`` looking at ``target``."""
    vz = (eye - target).normalized()
    vx = _cross(up, vz).normalized()
    vy = _cross(vz, vx)
    return (
        (vx.x, vx.y, vx.z, -_dot(vx, eye)),
        (vy.x, vy.y, vy.z, -_dot(vy, eye)),
        (vz.x, vz.y, vz.z, -_dot(vz, eye)),
        (0.0, 0.0, 0.0, 1.0),
    )


def transform_point(point: Vector3, matrix: Matrix) -> Vector3:
    """Apply an affine matrix to a point."""
    x, y, z = point
    rows = [row[0] * x + row[1] * y + row[2] * z + row[3] for row in matrix[:3]]
    return Vector3(*rows)