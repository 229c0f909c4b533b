"""Billboard and model props with line-of-sight and frustum culling."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, auto

from dungeonprops.geometry import (
    LOS_MAX_PROP_DISTANCE,
    LOS_MIN_CAMERA_MOVE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    Camera,
    Ray,
    Vector3,
    look_at,
    ray_box_collision,
    transform_point,
)
from dungeonprops.scene import Scene

logger = logging.getLogger(__name__)

_DEFAULT_ASPECT = SCREEN_WIDTH / SCREEN_HEIGHT
_FRUSTUM_MARGIN = 1.0
_ORIGIN = Vector3()


class PropType(Enum):
    """How a prop is drawn."""

    BILLBOARD = auto()
    MODEL = auto()


@dataclass
class Prop:
    """A single placed prop."""

    position: Vector3 = field(default_factory=Vector3)
    visible: bool = False
    type: PropType = PropType.BILLBOARD


def _is_active(prop: Prop) -> bool:
    # Props left at the origin have never been placed.
    return prop.position != _ORIGIN


def model_rotation(index: int) -> float:
    """Rotation in degrees about the Y axis that gives each model prop its own look."""
    return float((index * 37) % 360)


def is_point_in_frustum(
    point: Vector3,
    camera: Camera,
    margin: float = _FRUSTUM_MARGIN,
    aspect: float = _DEFAULT_ASPECT,
) -> bool:
    """Whether ``point`` lies inside the camera's view frustum widened by ``margin``."""
    view = look_at(camera.position, camera.target, camera.up)
    local = transform_point(point, view)
    if local.z > 0:
        return False
    height = 2.0 * abs(local.z) * math.tan(math.radians(camera.fovy * 0.5))
    width = height * aspect
    width += margin
    height += margin
    return abs(local.x) < width * 0.5 and abs(local.y) < height * 0.5


class Props:
    """A fixed-size collection of props sharing one billboard texture and one model."""

    def __init__(
        self,
        billboard_count: int,
        model_count: int,
        billboard_texture_path: str = "",
        model_path: str = "",
        model_texture_path: str = "",
    ) -> None:
        if billboard_count < 0 or model_count < 0:
            raise ValueError("prop counts must not be negative")
        self.props = [Prop() for _ in range(billboard_count + model_count)]
        self.billboard_texture_path = billboard_texture_path
        self.model_path = model_path
        self.model_texture_path = model_texture_path
        self.billboard_size = (1.0, 1.0)
        self.last_camera_position = Vector3()
        self.needs_los_update = True
        self.visible_count = 0
        self.rendered_count = 0

    def __len__(self) -> int:
        return len(self.props)

    def _place(self, position: Vector3, index: int, kind: PropType) -> None:
        if 0 <= index < len(self.props):
            prop = self.props[index]
            prop.position = position
            prop.type = kind
            prop.visible = True

    def add_billboard(self, position: Vector3, index: int) -> None:
        """Place a billboard prop in slot ``index``; out-of-range slots are ignored."""
        self._place(position, index, PropType.BILLBOARD)

    def add_model(self, position: Vector3, index: int) -> None:
        """Place a model prop in slot ``index``; out-of-range slots are ignored."""
        self._place(position, index, PropType.MODEL)

    def update_visibility(self, scene: Scene, camera: Camera) -> bool:
        """Recheck line of sight to every prop if the camera moved far enough.

        Returns whether a recheck took place.
        """
        moved = camera.position.distance_to(self.last_camera_position)
        if not (self.needs_los_update or moved >= LOS_MIN_CAMERA_MOVE):
            return False

        self.last_camera_position = camera.position
        self.needs_los_update = False

        visible_count = 0
        total_count = 0
        for index, prop in enumerate(self.props):
            if not _is_active(prop):
                continue
            total_count += 1

            offset = prop.position - camera.position
            distance = offset.length()
            if distance > LOS_MAX_PROP_DISTANCE:
                prop.visible = False
                continue

            ray = Ray(camera.position, offset.normalized())
            prop.visible = not any(
                collision.hit and collision.distance < distance
                for collision in (
                    ray_box_collision(ray, box) for box in scene.wall_boxes
                )
            )
            if prop.visible:
                visible_count += 1

            if index == 0:
                logger.debug(
                    "Camera: (%.2f, %.2f, %.2f) -> Prop: (%.2f, %.2f, %.2f), Visible: %s",
                    *camera.position,
                    *prop.position,
                    "Yes" if prop.visible else "No",
                )

        self.visible_count = visible_count
        share = visible_count / total_count * 100.0 if total_count > 0 else 0.0
        logger.debug("LOS Update: Camera moved %.2f units", moved)
        logger.debug("Props visible: %d/%d (%.1f%%)", visible_count, total_count, share)
        return True

    def renderable(
        self, camera: Camera, aspect: float = _DEFAULT_ASPECT
    ) -> list[tuple[int, Prop]]:
        """Visible props inside the view frustum, with their slot indices.

        Also records how many there are in ``rendered_count``.
        """
        chosen = [
            (index, prop)
            for index, prop in enumerate(self.props)
            if prop.visible
            and is_point_in_frustum(prop.position, camera, _FRUSTUM_MARGIN, aspect)
        ]
        self.rendered_count = len(chosen)
        return chosen

    def debug_rays(self, camera: Camera) -> list[Prop]:
        """Placed props within line-of-sight range, whether occluded or not."""
        return [
            prop
            for prop in self.props
            if _is_active(prop)
            and prop.position.distance_to(camera.position) <= LOS_MAX_PROP_DISTANCE
        ]