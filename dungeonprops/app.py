"""The interactive first-person demo: a walled room scattered with grass and rocks."""

from __future__ import annotations

import argparse
import logging
import math
import random
from pathlib import Path
from typing import Optional, Sequence

from dungeonprops.geometry import (
    PROPS_RENDER_SCALE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    Camera,
    Vector3,
)
from dungeonprops.props import Props
from dungeonprops.scene import Scene

ROOM_WIDTH = 16.0
ROOM_LENGTH = 16.0
WALL_HEIGHT = 8.0
WALL_THICKNESS = 0.2
WALL_MARGIN = 1.0
GRASS_COUNT = 150
ROCK_COUNT = 50
GRASS_HEIGHT = 0.05

_UP = Vector3(0.0, 1.0, 0.0)


class FirstPersonCamera:
    """A walking camera steered by yaw and pitch, moving in the horizontal plane."""

    move_speed = 5.4
    mouse_sensitivity = 0.003
    max_pitch = math.radians(89.0)

    def __init__(self, position: Vector3, target: Vector3, fovy: float = 60.0) -> None:
        offset = target - position
        if offset.length() == 0:
            raise ValueError("camera target must differ from its position")
        self.position = position
        self.fovy = fovy
        self.yaw = math.atan2(offset.x, offset.z)
        self.pitch = self._clamp_pitch(math.atan2(offset.y, math.hypot(offset.x, offset.z)))

    def _clamp_pitch(self, pitch: float) -> float:
        return max(-self.max_pitch, min(self.max_pitch, pitch))

    @property
    def direction(self) -> Vector3:
        """Unit vector the camera looks along."""
        cos_pitch = math.cos(self.pitch)
        return Vector3(
            cos_pitch * math.sin(self.yaw),
            math.sin(self.pitch),
            cos_pitch * math.cos(self.yaw),
        )

    @property
    def camera(self) -> Camera:
        """The current view as a plain camera."""
        return Camera(self.position, self.position + self.direction, _UP, self.fovy)

    def update(
        self,
        dt: float,
        forward: float = 0.0,
        strafe: float = 0.0,
        mouse_dx: float = 0.0,
        mouse_dy: float = 0.0,
    ) -> Camera:
        """Turn by the mouse motion (positive ``mouse_dy`` looks up) and walk.

        ``forward`` and ``strafe`` are in [-1, 1]; positive strafe moves right.
        """
        self.yaw -= mouse_dx * self.mouse_sensitivity
        self.pitch = self._clamp_pitch(self.pitch + mouse_dy * self.mouse_sensitivity)

        ahead = Vector3(math.sin(self.yaw), 0.0, math.cos(self.yaw))
        right = Vector3(-math.cos(self.yaw), 0.0, math.sin(self.yaw))
        step = self.move_speed * dt
        self.position = self.position + ahead * (forward * step) + right * (strafe * step)
        return self.camera


def scatter_props(
    props: Props,
    rng: random.Random,
    room_width: float = ROOM_WIDTH,
    room_length: float = ROOM_LENGTH,
    margin: float = WALL_MARGIN,
    grass_count: int = GRASS_COUNT,
    rock_count: int = ROCK_COUNT,
) -> None:
    """Place grass billboards, then rocks, at random spots inside the walls."""
    min_x = -room_width / 2 + margin
    max_x = room_width / 2 - margin
    min_z = -room_length / 2 + margin
    max_z = room_length / 2 - margin

    def spot() -> tuple[float, float]:
        x = min_x + rng.random() * (max_x - min_x)
        z = min_z + rng.random() * (max_z - min_z)
        return x, z

    for index in range(grass_count):
        x, z = spot()
        props.add_billboard(Vector3(x, GRASS_HEIGHT, z), index)
    for offset in range(rock_count):
        x, z = spot()
        props.add_model(Vector3(x, 0.0, z), grass_count + offset)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="First-person walk through a dungeon room.")
    parser.add_argument("--assets", type=Path, default=Path("raw-assets"), help="asset directory")
    parser.add_argument("--grass", type=int, default=GRASS_COUNT, help="number of grass props")
    parser.add_argument("--rocks", type=int, default=ROCK_COUNT, help="number of rock props")
    parser.add_argument("--seed", type=int, default=None, help="random seed for placement")
    parser.add_argument("--verbose", action="store_true", help="log line-of-sight updates")
    args = parser.parse_args(argv)
    if args.grass < 0 or args.rocks < 0:
        parser.error("prop counts must not be negative")
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the window and run the demo until it is closed."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    import pyglet
    from pyglet.window import key

    from dungeonprops.renderer import Renderer

    window = pyglet.window.Window(SCREEN_WIDTH, SCREEN_HEIGHT, caption="First Person Demo")
    renderer = Renderer(window, SCREEN_WIDTH, SCREEN_HEIGHT, PROPS_RENDER_SCALE)

    assets = args.assets
    scene = Scene(
        ROOM_WIDTH,
        ROOM_LENGTH,
        WALL_HEIGHT,
        WALL_THICKNESS,
        str(assets / "tiling_dungeon_brickwall01.png"),
        str(assets / "tiling_dungeon_floor01.png"),
    )
    props = Props(
        args.grass,
        args.rocks,
        str(assets / "grass01_c.png"),
        str(assets / "rock.glb"),
        str(assets / "tilingrock01_c.png"),
    )
    scatter_props(props, random.Random(args.seed), grass_count=args.grass, rock_count=args.rocks)
    print(
        f"Created {args.grass} grass props and {args.rocks} rock props "
        f"(total: {args.grass + args.rocks})"
    )

    viewer = FirstPersonCamera(Vector3(0.0, 2.0, 4.0), Vector3(0.0, 1.8, 0.0), 60.0)
    keys = key.KeyStateHandler()
    window.push_handlers(keys)
    window.set_exclusive_mouse(True)
    state = {"debug": False, "dx": 0.0, "dy": 0.0}

    @window.event
    def on_key_press(symbol, modifiers):
        if symbol == key.F1:
            state["debug"] = not state["debug"]

    @window.event
    def on_mouse_motion(x, y, dx, dy):
        state["dx"] += dx
        state["dy"] += dy

    @window.event
    def on_draw():
        renderer.draw_frame(scene, props, viewer.camera, state["debug"])

    def update(dt: float) -> None:
        forward = float(keys[key.W] or keys[key.UP]) - float(keys[key.S] or keys[key.DOWN])
        strafe = float(keys[key.D] or keys[key.RIGHT]) - float(keys[key.A] or keys[key.LEFT])
        camera = viewer.update(dt, forward, strafe, state["dx"], state["dy"])
        state["dx"] = state["dy"] = 0.0
        props.update_visibility(scene, camera)

    pyglet.clock.schedule_interval(update, 1 / 60)
    try:
        pyglet.app.run()
    finally:
        pyglet.clock.unschedule(update)
        renderer.close()
    return 0