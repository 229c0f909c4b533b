import pytest

from dungeonprops.scene import Scene, build_wall_boxes

WIDTH, LENGTH, HEIGHT, THICKNESS = 16.0, 12.0, 8.0, 0.2


def _approx(v):
    return pytest.approx(tuple(v), abs=1e-9)


def test_four_boxes_with_positive_extent():
    boxes = build_wall_boxes(WIDTH, LENGTH, HEIGHT, THICKNESS)
    assert len(boxes) == 4
    for box in boxes:
        assert box.min.x < box.max.x
        assert box.min.y < box.max.y
        assert box.min.z < box.max.z


def test_boxes_span_floor_to_wall_height():
    for box in build_wall_boxes(WIDTH, LENGTH, HEIGHT, THICKNESS):
        assert box.min.y == 0.0
        assert box.max.y == HEIGHT


def test_front_and_back_walls_are_mirrored():
    front, back, left, right = build_wall_boxes(WIDTH, LENGTH, HEIGHT, THICKNESS)
    assert front.min.z == pytest.approx(-back.max.z)
    assert front.max.z == pytest.approx(-back.min.z)
    assert left.min.x == pytest.approx(-right.max.x)
    assert left.max.x == pytest.approx(-right.min.x)


def test_wall_thickness_and_span():
    front, _, left, _ = build_wall_boxes(WIDTH, LENGTH, HEIGHT, THICKNESS)
    assert front.max.z - front.min.z == pytest.approx(THICKNESS)
    assert front.max.x - front.min.x == pytest.approx(WIDTH)
    assert left.max.x - left.min.x == pytest.approx(THICKNESS)
    assert left.max.z - left.min.z == pytest.approx(LENGTH)


def test_scene_builds_its_boxes():
    scene = Scene(WIDTH, LENGTH, HEIGHT, THICKNESS, "walls.png", "floor.png")
    assert scene.wall_boxes == build_wall_boxes(WIDTH, LENGTH, HEIGHT, THICKNESS)
    assert scene.wall_texture_path == "walls.png"


def test_wall_placements_match_collision_boxes():
    scene = Scene(WIDTH, LENGTH, HEIGHT, THICKNESS)
    placements = scene.wall_placements()
    assert len(placements) == len(scene.wall_boxes)
    for (center, size), box in zip(placements, scene.wall_boxes):
        assert tuple((box.min + box.max) * 0.5) == _approx(center)
        assert tuple(box.max - box.min) == _approx(size)


def test_floor_top_is_at_ground_level():
    scene = Scene(WIDTH, LENGTH, HEIGHT, THICKNESS)
    center, size = scene.floor_placement()
    assert center.y + size.y * 0.5 == pytest.approx(0.0)
    assert size.x == WIDTH
    assert size.z == LENGTH