# dungeonprops

A small first-person demo built on pyglet. You walk around a square dungeon
room with textured walls and floor. The room is scattered with grass
billboards (150 by default) and rocks (50 by default). Props are culled in
two stages:

1. **Line of sight.** Props further than 9 units from the camera are hidden.
   So is any prop whose ray from the camera hits a wall box first. The check
   runs again only once the camera has moved at least 0.5 units since the
   last check.
2. **Frustum.** Of the props still visible, only those inside the camera's
   view frustum (widened by a small margin) are drawn.

The walls and floor are drawn to a full-resolution target. The props are
drawn to a quarter-resolution target, and both are then drawn to the window,
scaled to its size. An overlay shows the frame rate and a line such as
`Rendered Props: 12/40 (30.0%)`. That line counts the visible props that
passed the frustum check.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running

```
dungeonprops
```

Options:

| Option          | Meaning                                              |
|-----------------|------------------------------------------------------|
| `--assets DIR`  | asset directory (default `raw-assets`)               |
| `--grass N`     | number of grass props (default 150)                  |
| `--rocks N`     | number of rock props (default 50)                    |
| `--seed N`      | random seed, so the props are placed the same way each run |
| `--verbose`     | log every line-of-sight update                       |

Negative prop counts are rejected.

The game looks for these textures in the asset directory:

- `tiling_dungeon_brickwall01.png` (walls)
- `tiling_dungeon_floor01.png` (floor)
- `grass01_c.png` (grass billboards)
- `tilingrock01_c.png` (rocks)

If a texture cannot be loaded, the game logs `Failed to load ... texture`
and draws that surface in a plain fallback colour.

### Controls

| Key               | Action                                        |
|-------------------|-----------------------------------------------|
| W A S D / arrows  | Move                                          |
| Mouse             | Look around                                   |
| F1                | Toggle the debug view (wall boxes, prop rays) |
| Esc               | Quit                                          |

In the debug view, the wall collision boxes are outlined in red. Each prop
within range gets a ray from the camera: green if the prop is visible, red
if it is occluded. Each such prop is also marked with a small cube, blue for
billboards and yellow for rocks.

## What it does not do

Rocks are drawn as textured cubes, each turned about the vertical axis by
its own angle. No 3D model file is loaded. `Props` keeps a `model_path`, and
the game passes it `rock.glb` from the asset directory, but nothing reads
that file. There is no collision between the camera and the walls, and the
camera cannot jump or fly.

## Using the pieces

The culling logic does not need a window and can be used on its own:

```python
from dungeonprops.geometry import Vector3, Camera
from dungeonprops.scene import Scene
from dungeonprops.props import Props

scene = Scene(16.0, 16.0, 8.0, 0.2)
props = Props(billboard_count=1, model_count=1)
props.add_billboard(Vector3(1.0, 0.05, 1.0), 0)
props.add_model(Vector3(-2.0, 0.0, 3.0), 1)

camera = Camera(
    position=Vector3(0.0, 2.0, 4.0),
    target=Vector3(0.0, 1.8, 0.0),
    up=Vector3(0.0, 1.0, 0.0),
    fovy=60.0,
)
props.update_visibility(scene, camera)   # True: the first call always checks
print(props.visible_count)
print(props.renderable(camera, 1280 / 720))  # [(index, Prop), ...]
```

- `dungeonprops.geometry`: `Vector3`, `BoundingBox`, `Ray`, `RayCollision`
  and `Camera`. It also has `ray_box_collision` (slab test), `look_at` (view
  matrix) and `transform_point`.
- `dungeonprops.scene`: `Scene` and `build_wall_boxes`. A scene gives the
  wall collision boxes and the placement of each wall and of the floor.
- `dungeonprops.props`: `Props`, `Prop`, `PropType`, `is_point_in_frustum`
  and `model_rotation`. `Props.debug_rays` lists the placed props within
  line-of-sight range.
- `dungeonprops.app`: `FirstPersonCamera` (yaw and pitch steering,
  horizontal movement) and `scatter_props`. `scatter_props` places props at
  random inside the walls from any `random.Random`, so a placement can be
  reproduced from a seed.
- `dungeonprops.renderer`: `Renderer` (needs a pyglet window and an OpenGL
  3.3 context), `format_stats` and `scaled_size`.