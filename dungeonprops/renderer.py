"""Two-pass renderer: full-resolution room, low-resolution props, then a composite."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from dungeonprops.geometry import (
    PROPS_RENDER_SCALE,
    BoundingBox,
    Camera,
    Vector3,
    look_at,
)
from dungeonprops.props import Props, PropType, model_rotation
from dungeonprops.scene import Scene

if TYPE_CHECKING:
    import pyglet

logger = logging.getLogger(__name__)

Color = tuple[float, float, float, float]


def _rgba(r: int, g: int, b: int, a: int = 255) -> Color:
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


WHITE = _rgba(255, 255, 255)
BLACK = _rgba(0, 0, 0)
RAYWHITE = _rgba(245, 245, 245)
BLANK = _rgba(0, 0, 0, 0)
GRAY = _rgba(130, 130, 130)
DARKGRAY = _rgba(80, 80, 80)
RED = _rgba(230, 41, 55)
GREEN = _rgba(0, 228, 48)
BLUE = _rgba(0, 121, 241)
YELLOW = _rgba(253, 249, 0)

_NEAR_PLANE = 0.01
_FAR_PLANE = 1000.0
_ROCK_SCALE = 0.5
_DEBUG_MARKER_SIZE = 0.2

_VERTEX_SHADER = """#version 330 core
in vec3 position;
in vec2 tex_coords;
in vec4 colors;
uniform mat4 projection;
uniform mat4 view;
out vec2 v_uv;
out vec4 v_color;
void main() {
    gl_Position = projection * view * vec4(position, 1.0);
    v_uv = tex_coords;
    v_color = colors;
}
"""

_FRAGMENT_SHADER = """#version 330 core
in vec2 v_uv;
in vec4 v_color;
uniform sampler2D tex;
uniform int use_texture;
out vec4 frag_color;
void main() {
    vec4 color = v_color;
    if (use_texture != 0) {
        color *= texture(tex, v_uv);
    }
    if (color.a < 0.1) {
        discard;
    }
    frag_color = color;
}
"""

# Corners of each cube face as signs of the half extents, with matching UVs.
_FACES = (
    ((1, -1, 1), (1, -1, -1), (1, 1, -1), (1, 1, 1)),
    ((-1, -1, -1), (-1, -1, 1), (-1, 1, 1), (-1, 1, -1)),
    ((-1, 1, 1), (1, 1, 1), (1, 1, -1), (-1, 1, -1)),
    ((-1, -1, -1), (1, -1, -1), (1, -1, 1), (-1, -1, 1)),
    ((-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1)),
    ((1, -1, -1), (-1, -1, -1), (-1, 1, -1), (1, 1, -1)),
)
_FACE_UVS = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))
_QUAD_ORDER = (0, 1, 2, 0, 2, 3)


def format_stats(rendered: int, visible: int) -> str:
    """The on-screen line reporting how many visible props were actually drawn."""
    share = rendered / visible * 100.0 if visible > 0 else 0.0
    return f"Rendered Props: {rendered}/{visible} ({share:.1f}%)"


def scaled_size(width: int, height: int, scale: float) -> tuple[int, int]:
    """Pixel size of a render target scaled from ``width`` x ``height``."""
    size = (int(width * scale), int(height * scale))
    if min(size) < 1:
        raise ValueError(f"render target {size[0]}x{size[1]} is empty")
    return size


def _column_major(matrix) -> tuple[float, ...]:
    return tuple(value for column in zip(*matrix) for value in column)


def _perspective(fovy_degrees: float, aspect: float) -> tuple[tuple[float, ...], ...]:
    f = 1.0 / math.tan(math.radians(fovy_degrees) / 2.0)
    depth = _NEAR_PLANE - _FAR_PLANE
    return (
        (f / aspect, 0.0, 0.0, 0.0),
        (0.0, f, 0.0, 0.0),
        (0.0, 0.0, (_FAR_PLANE + _NEAR_PLANE) / depth, 2.0 * _FAR_PLANE * _NEAR_PLANE / depth),
        (0.0, 0.0, -1.0, 0.0),
    )


def _rotate_y(offset: Vector3, degrees: float) -> Vector3:
    angle = math.radians(degrees)
    c, s = math.cos(angle), math.sin(angle)
    return Vector3(offset.x * c + offset.z * s, offset.y, -offset.x * s + offset.z * c)


@dataclass
class _Mesh:
    """Vertex data gathered for one draw call."""

    positions: list[float] = field(default_factory=list)
    uvs: list[float] = field(default_factory=list)
    colors: list[float] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.positions)

    @property
    def count(self) -> int:
        return len(self.positions) // 3

    def vertex(self, point: Vector3, uv: tuple[float, float], color: Color) -> None:
        self.positions.extend(point)
        self.uvs.extend(uv)
        self.colors.extend(color)

    def quad(self, corners: list[Vector3], color: Color) -> None:
        for corner in _QUAD_ORDER:
            self.vertex(corners[corner], _FACE_UVS[corner], color)

    def box(self, center: Vector3, size: Vector3, color: Color, angle: float = 0.0) -> None:
        half = size * 0.5
        for face in _FACES:
            corners = [
                center + _rotate_y(Vector3(sx * half.x, sy * half.y, sz * half.z), angle)
                for sx, sy, sz in face
            ]
            self.quad(corners, color)

    def line(self, start: Vector3, end: Vector3, color: Color) -> None:
        self.vertex(start, (0.0, 0.0), color)
        self.vertex(end, (0.0, 0.0), color)

    def box_outline(self, box: BoundingBox, color: Color) -> None:
        lo, hi = box.min, box.max
        corners = [
            Vector3(x, y, z)
            for x in (lo.x, hi.x)
            for y in (lo.y, hi.y)
            for z in (lo.z, hi.z)
        ]
        for a, first in enumerate(corners):
            for second in corners[a + 1:]:
                differing = sum(u != v for u, v in zip(first, second))
                if differing == 1:
                    self.line(first, second, color)


class Renderer:
    """Draws the room at full resolution and the props into a smaller target."""

    def __init__(
        self,
        window: "pyglet.window.Window",
        width: int,
        height: int,
        props_scale: float = PROPS_RENDER_SCALE,
    ) -> None:
        import pyglet
        from pyglet import gl
        from pyglet.graphics.shader import Shader, ShaderProgram
        from pyglet.image.buffer import Framebuffer, Renderbuffer

        self.window = window
        self.full_size = scaled_size(width, height, 1.0)
        self.props_size = scaled_size(width, height, props_scale)

        self._targets = []
        for size in (self.full_size, self.props_size):
            texture = pyglet.image.Texture.create(
                size[0], size[1], min_filter=gl.GL_LINEAR, mag_filter=gl.GL_LINEAR
            )
            depth = Renderbuffer(size[0], size[1], gl.GL_DEPTH_COMPONENT)
            framebuffer = Framebuffer()
            framebuffer.attach_texture(texture, attachment=gl.GL_COLOR_ATTACHMENT0)
            framebuffer.attach_renderbuffer(depth, attachment=gl.GL_DEPTH_ATTACHMENT)
            framebuffer.unbind()
            self._targets.append((framebuffer, texture, depth, size))

        self._program = ShaderProgram(
            Shader(_VERTEX_SHADER, "vertex"), Shader(_FRAGMENT_SHADER, "fragment")
        )
        self._program.use()
        self._program["tex"] = 0
        self._program.stop()

        self._textures: dict[str, Optional[object]] = {}
        self._fps = pyglet.window.FPSDisplay(window)
        self._stats = pyglet.text.Label(
            "", font_size=15, x=10, y=0, anchor_y="top", color=(255, 255, 255, 255)
        )

    def _texture(self, path: str, what: str):
        if not path:
            return None
        if path not in self._textures:
            import pyglet
            from pyglet import gl

            try:
                texture = pyglet.image.load(path).get_texture()
            except Exception:
                logger.warning("Failed to load %s texture: %s", what, path)
                texture = None
            else:
                gl.glBindTexture(texture.target, texture.id)
                gl.glTexParameteri(texture.target, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR)
                gl.glTexParameteri(texture.target, gl.GL_TEXTURE_MAG_FILTER, gl.GL_LINEAR)
            self._textures[path] = texture
        return self._textures[path]

    def _draw(self, mesh: _Mesh, mode: int, texture=None) -> None:
        if not mesh:
            return
        from pyglet import gl

        self._program["use_texture"] = 1 if texture is not None else 0
        if texture is not None:
            gl.glActiveTexture(gl.GL_TEXTURE0)
            gl.glBindTexture(texture.target, texture.id)
        vertex_list = self._program.vertex_list(
            mesh.count,
            mode,
            position=("f", mesh.positions),
            tex_coords=("f", mesh.uvs),
            colors=("f", mesh.colors),
        )
        vertex_list.draw(mode)
        vertex_list.delete()

    def _begin_pass(self, target, clear: Color, camera: Camera) -> None:
        from pyglet import gl

        framebuffer, _texture, _depth, (width, height) = target
        framebuffer.bind()
        gl.glViewport(0, 0, width, height)
        gl.glClearColor(*clear)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)
        gl.glEnable(gl.GL_DEPTH_TEST)
        self._program.use()
        view = look_at(camera.position, camera.target, camera.up)
        self._program["view"] = _column_major(view)
        self._program["projection"] = _column_major(
            _perspective(camera.fovy, width / height)
        )

    def _end_pass(self, target) -> None:
        from pyglet import gl

        self._program.stop()
        gl.glDisable(gl.GL_DEPTH_TEST)
        target[0].unbind()

    def _draw_scene(self, scene: Scene) -> None:
        from pyglet import gl

        floor_texture = self._texture(scene.floor_texture_path, "floor")
        wall_texture = self._texture(scene.wall_texture_path, "wall")

        floor = _Mesh()
        center, size = scene.floor_placement()
        floor.box(center, size, WHITE if floor_texture is not None else GRAY)
        self._draw(floor, gl.GL_TRIANGLES, floor_texture)

        walls = _Mesh()
        for center, size in scene.wall_placements():
            walls.box(center, size, WHITE if wall_texture is not None else DARKGRAY)
        self._draw(walls, gl.GL_TRIANGLES, wall_texture)

    def _draw_debug(self, scene: Scene, props: Props, camera: Camera) -> None:
        from pyglet import gl

        lines = _Mesh()
        for box in scene.wall_boxes:
            lines.box_outline(box, RED)
        markers = _Mesh()
        marker = Vector3(_DEBUG_MARKER_SIZE, _DEBUG_MARKER_SIZE, _DEBUG_MARKER_SIZE)
        for prop in props.debug_rays(camera):
            lines.line(camera.position, prop.position, GREEN if prop.visible else RED)
            colour = BLUE if prop.type is PropType.BILLBOARD else YELLOW
            markers.box(prop.position, marker, colour)
        self._draw(lines, gl.GL_LINES)
        self._draw(markers, gl.GL_TRIANGLES)

    def _draw_props(self, props: Props, camera: Camera) -> None:
        from pyglet import gl

        width, height = self.props_size
        chosen = props.renderable(camera, width / height)

        billboard_texture = self._texture(props.billboard_texture_path, "billboard")
        model_texture = self._texture(props.model_texture_path, "rock")

        view = look_at(camera.position, camera.target, camera.up)
        right = Vector3(*view[0][:3])
        up = Vector3(0.0, 1.0, 0.0)
        bw, bh = props.billboard_size
        half_right = right * (bw * 0.5)
        half_up = up * (bh * 0.5)

        billboards = _Mesh()
        models = _Mesh()
        rock = Vector3(_ROCK_SCALE, _ROCK_SCALE, _ROCK_SCALE)
        for index, prop in chosen:
            if prop.type is PropType.BILLBOARD:
                p = prop.position
                billboards.quad(
                    [
                        p - half_right - half_up,
                        p + half_right - half_up,
                        p + half_right + half_up,
                        p - half_right + half_up,
                    ],
                    WHITE if billboard_texture is not None else GREEN,
                )
            else:
                center = prop.position + Vector3(0.0, _ROCK_SCALE / 2.0, 0.0)
                models.box(
                    center,
                    rock,
                    WHITE if model_texture is not None else GRAY,
                    model_rotation(index),
                )
        self._draw(models, gl.GL_TRIANGLES, model_texture)
        self._draw(billboards, gl.GL_TRIANGLES, billboard_texture)

    def draw_frame(
        self, scene: Scene, props: Props, camera: Camera, show_debug: bool = False
    ) -> None:
        """Render the room and props off-screen, then composite them to the window."""
        from pyglet import gl

        full, low = self._targets

        self._begin_pass(full, RAYWHITE, camera)
        self._draw_scene(scene)
        if show_debug:
            self._draw_debug(scene, props, camera)
        self._end_pass(full)

        self._begin_pass(low, BLANK, camera)
        self._draw_props(props, camera)
        self._end_pass(low)

        fb_width, fb_height = self.window.get_framebuffer_size()
        gl.glViewport(0, 0, fb_width, fb_height)
        gl.glClearColor(*BLACK)
        self.window.clear()
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)
        width, height = self.window.width, self.window.height
        full[1].blit(0, 0, width=width, height=height)
        low[1].blit(0, 0, width=width, height=height)

        self._fps.label.x = 10
        self._fps.label.y = height - 30
        self._fps.draw()
        self._stats.text = format_stats(props.rendered_count, props.visible_count)
        self._stats.y = height - 40
        self._stats.draw()

    def close(self) -> None:
        """Release render targets, loaded textures and the shader program."""
        for framebuffer, texture, depth, _size in self._targets:
            framebuffer.delete()
            depth.delete()
            texture.delete()
        self._targets = []
        for texture in self._textures.values():
            if texture is not None:
                texture.delete()
        self._textures.clear()
        self._program.delete()