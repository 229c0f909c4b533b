import pytest

from dungeonprops.geometry import LOS_MIN_CAMERA_MOVE, Camera, Vector3
from dungeonprops.props import (
    Prop,
    Props,
    PropType,
    is_point_in_frustum,
    model_rotation,
)
from dungeonprops.scene import Scene


@pytest.fixture
def scene():
    return Scene(16.0, 16.0, 8.0, 0.2)


def _main_camera():
    return Camera(Vector3(0.0, 2.0, 4.0), Vector3(0.0, 1.8, 0.0))


def test_new_props_are_unplaced_and_hidden():
    billboard_count, model_count = 3, 2
    props = Props(billboard_count, model_count)
    assert len(props) == billboard_count + model_count
    assert all(p == Prop() for p in props.props)
    assert props.needs_los_update is True


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        Props(-1, 2)


def test_add_billboard_and_model():
    props = Props(1, 1)
    grass = Vector3(1.0, 0.05, 2.0)
    rock = Vector3(-3.0, 0.0, 1.0)
    props.add_billboard(grass, 0)
    props.add_model(rock, 1)
    assert props.props[0] == Prop(grass, True, PropType.BILLBOARD)
    assert props.props[1] == Prop(rock, True, PropType.MODEL)


def test_out_of_range_index_is_ignored():
    props = Props(2, 0)
    props.add_billboard(Vector3(1.0, 1.0, 1.0), 99)
    props.add_model(Vector3(1.0, 1.0, 1.0), -1)
    assert all(p == Prop() for p in props.props)


def test_model_rotation_values():
    assert model_rotation(0) == 0.0
    assert model_rotation(1) == 37.0
    for index in range(50):
        angle = model_rotation(index)
        assert 0.0 <= angle < 360.0
        assert angle == model_rotation(index + 360)


def _occlusion_setup():
    props = Props(3, 1)
    near = Vector3(1.0, 0.0, 5.0)
    behind_wall = Vector3(0.0, 0.05, 9.0)
    far = Vector3(0.0, 0.0, -7.0)
    props.add_billboard(near, 0)
    props.add_billboard(behind_wall, 1)
    props.add_model(far, 2)
    camera = Camera(Vector3(0.0, 2.0, 6.0), Vector3(0.0, 2.0, 0.0))
    return props, camera


def test_update_visibility_occlusion_and_range(scene):
    props, camera = _occlusion_setup()
    assert props.update_visibility(scene, camera) is True
    near, behind_wall, far, unplaced = props.props
    assert near.visible is True
    assert behind_wall.visible is False
    assert far.visible is False
    assert unplaced.visible is False
    assert props.visible_count == sum(p.visible for p in props.props)
    assert props.last_camera_position == camera.position
    assert props.needs_los_update is False


def test_update_skipped_until_camera_moves(scene):
    props, camera = _occlusion_setup()
    props.update_visibility(scene, camera)
    assert props.update_visibility(scene, camera) is False
    moved = Camera(camera.position + Vector3(LOS_MIN_CAMERA_MOVE, 0.0, 0.0), camera.target)
    assert props.update_visibility(scene, moved) is True
    assert props.last_camera_position == moved.position


def test_debug_rays_lists_in_range_props(scene):
    props, camera = _occlusion_setup()
    props.update_visibility(scene, camera)
    rays = props.debug_rays(camera)
    assert rays == [props.props[0], props.props[1]]
    assert [p.visible for p in rays] == [True, False]


def test_frustum_contains_target_and_excludes_behind():
    camera = _main_camera()
    assert is_point_in_frustum(camera.target, camera, 1.0)
    assert not is_point_in_frustum(Vector3(0.0, 2.0, 8.0), camera, 1.0)
    assert not is_point_in_frustum(Vector3(100.0, 2.0, 0.0), camera, 1.0)


def test_frustum_margin_widens_view():
    camera = _main_camera()
    point = Vector3(5.0, 1.8, 0.0)
    assert not is_point_in_frustum(point, camera, 0.0)
    assert is_point_in_frustum(point, camera, 10.0)


def test_renderable_keeps_visible_props_in_view():
    props = Props(2, 1)
    props.add_billboard(Vector3(1.0, 0.05, 0.0), 0)
    props.add_model(Vector3(0.0, 0.0, 7.0), 1)
    camera = _main_camera()
    chosen = props.renderable(camera)
    assert [index for index, _ in chosen] == [0]
    assert chosen[0][1] is props.props[0]
    assert props.rendered_count == len(chosen)