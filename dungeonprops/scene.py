"""Room geometry: dimensions, wall collision boxes and draw placements."""

from __future__ import annotations

from dataclasses import dataclass, field

from dungeonprops.geometry import BoundingBox, Vector3


def build_wall_boxes(
    width: float, length: float, height: float, thickness: float
) -> list[BoundingBox]:
    """Collision boxes for the front (+Z), back (-Z), left (-X) and right (+X) walls."""
    half_w = width / 2.0
    half_l = length / 2.0
    half_t = thickness / 2.0
    return [
        BoundingBox(
            Vector3(-half_w, 0.0, half_l - half_t),
            Vector3(half_w, height, half_l + half_t),
        ),
        BoundingBox(
            Vector3(-half_w, 0.0, -half_l - half_t),
            Vector3(half_w, height, -half_l + half_t),
        ),
        BoundingBox(
            Vector3(-half_w - half_t, 0.0, -half_l),
            Vector3(-half_w + half_t, height, half_l),
        ),
        BoundingBox(
            Vector3(half_w - half_t, 0.0, -half_l),
            Vector3(half_w + half_t, height, half_l),
        ),
    ]


@dataclass
class Scene:
    """A rectangular room with four walls and a floor."""

    room_width: float
    room_length: float
    wall_height: float
    wall_thickness: float
    wall_texture_path: str = ""
    floor_texture_path: str = ""
    wall_boxes: list[BoundingBox] = field(init=False)

    def __post_init__(self) -> None:
        self.wall_boxes = build_wall_boxes(
            self.room_width, self.room_length, self.wall_height, self.wall_thickness
        )

    def wall_placements(self) -> list[tuple[Vector3, Vector3]]:
        """``(center, size)`` of each wall cube, in the same order as ``wall_boxes``."""
        ns_size = Vector3(self.room_width, self.wall_height, self.wall_thickness)
        ew_size = Vector3(self.wall_thickness, self.wall_height, self.room_length)
        mid_y = self.wall_height / 2.0
        half_w = self.room_width / 2.0
        half_l = self.room_length / 2.0
        return [
            (Vector3(0.0, mid_y, half_l), ns_size),
            (Vector3(0.0, mid_y, -half_l), ns_size),
            (Vector3(-half_w, mid_y, 0.0), ew_size),
            (Vector3(half_w, mid_y, 0.0), ew_size),
        ]

    def floor_placement(self) -> tuple[Vector3, Vector3]:
        """``(center, size)`` of the floor slab, whose top sits at y = 0."""
        return (
            Vector3(0.0, -self.wall_thickness / 2.0, 0.0),
            Vector3(self.room_width, self.wall_thickness, self.room_length),
        )