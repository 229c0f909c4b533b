import math
import random

import pytest

from dungeonprops.app import (
    GRASS_HEIGHT,
    FirstPersonCamera,
    scatter_props,
)
from dungeonprops.geometry import Vector3
from dungeonprops.props import Props, PropType


def _start_camera():
    return FirstPersonCamera(Vector3(0.0, 2.0, 4.0), Vector3(0.0, 1.8, 0.0), 60.0)


def test_initial_direction_points_at_target():
    viewer = _start_camera()
    expected = (Vector3(0.0, 1.8, 0.0) - Vector3(0.0, 2.0, 4.0)).normalized()
    direction = viewer.direction
    assert direction.x == pytest.approx(expected.x, abs=1e-9)
    assert direction.y == pytest.approx(expected.y)
    assert direction.z == pytest.approx(expected.z)


def test_camera_target_is_one_unit_ahead():
    camera = _start_camera().camera
    assert camera.position.distance_to(camera.target) == pytest.approx(1.0)
    assert camera.fovy == 60.0


def test_forward_walks_horizontally_at_move_speed():
    viewer = _start_camera()
    start = viewer.position
    camera = viewer.update(0.5, forward=1.0)
    assert camera.position.y == start.y
    assert camera.position.distance_to(start) == pytest.approx(viewer.move_speed * 0.5)
    assert camera.position.z < start.z


def test_strafe_is_perpendicular_to_heading():
    viewer = _start_camera()
    start = viewer.position
    heading = Vector3(viewer.direction.x, 0.0, viewer.direction.z).normalized()
    camera = viewer.update(1.0, strafe=1.0)
    moved = camera.position - start
    assert moved.x * heading.x + moved.z * heading.z == pytest.approx(0.0, abs=1e-9)
    assert moved.x > 0


def test_mouse_right_turns_right():
    viewer = _start_camera()
    viewer.update(0.0, mouse_dx=100.0)
    assert viewer.direction.x > 0
    assert viewer.position == Vector3(0.0, 2.0, 4.0)


def test_pitch_is_clamped():
    viewer = _start_camera()
    viewer.update(0.0, mouse_dy=1e6)
    assert viewer.pitch == viewer.max_pitch
    viewer.update(0.0, mouse_dy=-1e7)
    assert viewer.pitch == -viewer.max_pitch


def test_camera_rejects_target_at_position():
    with pytest.raises(ValueError):
        FirstPersonCamera(Vector3(1.0, 1.0, 1.0), Vector3(1.0, 1.0, 1.0))


def _scatter(seed, grass=30, rocks=10):
    props = Props(grass, rocks)
    scatter_props(props, random.Random(seed), 16.0, 16.0, 1.0, grass, rocks)
    return props


def test_scatter_places_every_slot_with_right_type():
    props = _scatter(3)
    kinds = [prop.type for prop in props.props]
    assert kinds == [PropType.BILLBOARD] * 30 + [PropType.MODEL] * 10
    assert all(prop.visible for prop in props.props)


def test_scatter_keeps_props_inside_margin():
    props = _scatter(11)
    for prop in props.props:
        assert -7.0 <= prop.position.x <= 7.0
        assert -7.0 <= prop.position.z <= 7.0


def test_scatter_heights():
    props = _scatter(5)
    assert {prop.position.y for prop in props.props[:30]} == {GRASS_HEIGHT}
    assert {prop.position.y for prop in props.props[30:]} == {0.0}


def test_scatter_is_deterministic_for_a_seed():
    first = [prop.position for prop in _scatter(42).props]
    second = [prop.position for prop in _scatter(42).props]
    assert first == second


def test_scatter_ignores_slots_beyond_capacity():
    props = Props(2, 0)
    scatter_props(props, random.Random(1), 16.0, 16.0, 1.0, 2, 3)
    assert len(props) == 2
    assert all(prop.type is PropType.BILLBOARD for prop in props.props)


def test_scatter_uses_two_draws_per_prop():
    rng = random.Random(9)
    scatter_props(Props(4, 2), rng, 16.0, 16.0, 1.0, 4, 2)
    reference = random.Random(9)
    for _ in range(12):
        reference.random()
    assert math.isclose(rng.random(), reference.random())